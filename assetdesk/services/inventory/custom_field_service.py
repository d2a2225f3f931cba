"""
Custom Field Service - company-defined extra item attributes.

A field is either tenant-wide (``department_id`` is None) or scoped to one
department. Values are stored in ``InventoryItem.custom_fields`` keyed by
field name.
"""
from __future__ import annotations

import logging

from assetdesk.core.rbac import Action, enforce
from assetdesk.models.schemas import CustomFieldCreate, CustomFieldIn, CustomFieldOut
from assetdesk.services.inventory.base import BaseInventoryService
from assetdesk.store.base import Payload, validate_payload

logger = logging.getLogger(__name__)


class CustomFieldService(BaseInventoryService):
    """Service for custom field definitions."""

    def create_custom_field(self, data: Payload | CustomFieldIn) -> CustomFieldOut:
        enforce(self._identity, Action.MANAGE_CUSTOM_FIELDS)
        fields = validate_payload(CustomFieldIn, data)
        with self._store.transaction():
            if fields.department_id is not None:
                self._load_department(fields.department_id)
            field = self._store.create_custom_field(
                CustomFieldCreate(company_id=self.company_id, **fields.model_dump())
            )
        logger.info(f"Created custom field: {field.name} (id={field.id}) for company {self.company_id}")
        return field

    def list_custom_fields(self, department_id: int | None = None) -> list[CustomFieldOut]:
        if department_id is not None:
            department = self._load_department(department_id)
            enforce(self._identity, Action.VIEW_DEPARTMENT, department.id)
        return self._store.list_custom_fields(self.company_id, department_id)

    def effective_custom_fields(self, department_id: int) -> list[CustomFieldOut]:
        """
        Fields that apply to items in a department.

        Tenant-wide fields come first; a department field with the same name
        replaces the tenant-wide definition.
        """
        department_fields = self.list_custom_fields(department_id)
        overridden = {f.name for f in department_fields}
        tenant_fields = [
            f for f in self._store.list_custom_fields(self.company_id) if f.name not in overridden
        ]
        return tenant_fields + department_fields
