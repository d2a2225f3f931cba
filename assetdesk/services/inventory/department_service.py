"""
Department Service - department management for one company.

Follows SRP: Only handles department-related operations.
"""
from __future__ import annotations

import logging

from assetdesk.core.exceptions import OperationUnavailableError
from assetdesk.core.rbac import Action, can_view_department, enforce
from assetdesk.models.schemas import DepartmentCreate, DepartmentIn, DepartmentOut, DepartmentUpdate
from assetdesk.services.inventory.base import BaseInventoryService
from assetdesk.store.base import Payload, changed_fields, validate_payload

logger = logging.getLogger(__name__)


class DepartmentService(BaseInventoryService):
    """
    Service for department operations.

    Admins create and rename departments; employees only see the
    departments they are members of. Deletion is not available yet.
    """

    def create_department(self, data: Payload | DepartmentIn) -> DepartmentOut:
        """Create a new, empty department (admin only)."""
        enforce(self._identity, Action.CREATE_DEPARTMENT)
        fields = validate_payload(DepartmentIn, data)
        with self._store.transaction():
            department = self._store.create_department(
                DepartmentCreate(company_id=self.company_id, name=fields.name)
            )
        logger.info(f"Created department: {department.name} (id={department.id}) for company {self.company_id}")
        return department

    def get_department(self, department_id: int) -> DepartmentOut:
        department = self._load_department(department_id)
        enforce(self._identity, Action.VIEW_DEPARTMENT, department.id)
        return department

    def list_departments(self) -> list[DepartmentOut]:
        """List the departments the caller can see."""
        return [
            d for d in self._store.list_departments(self.company_id)
            if can_view_department(self._identity, d.id)
        ]

    def rename_department(self, department_id: int, name: str) -> DepartmentOut:
        changes = changed_fields(DepartmentUpdate, {"name": name})
        with self._store.transaction():
            department = self._load_department(department_id)
            enforce(self._identity, Action.MANAGE_DEPARTMENT, department.id)
            updated = self._store.update_department(department.id, changes)
        logger.info(f"Renamed department {department_id}: {department.name} -> {updated.name}")
        return updated

    def delete_department(self, department_id: int) -> None:
        raise OperationUnavailableError("department deletion")
