"""
Base inventory service with shared functionality.

Every inventory service is constructed for one request: an entity store and
the caller's identity. The ``_load_*`` helpers implement the fetch-then-
authorize pattern: a row from another company is reported as not found.
"""
from __future__ import annotations

import logging

from assetdesk.core.rbac import Identity, ensure_same_tenant
from assetdesk.models.schemas import DepartmentOut, InventoryItemOut
from assetdesk.store.base import EntityStore

logger = logging.getLogger(__name__)


class BaseInventoryService:
    """
    Base service class with shared inventory functionality.

    All inventory-related services inherit from this class
    to share the entity store and caller identity.
    """

    def __init__(self, store: EntityStore, identity: Identity):
        """
        Initialize the base inventory service.

        Args:
            store: Entity store for this request
            identity: Authenticated caller (user, company, role, memberships)
        """
        self._store = store
        self._identity = identity

    @property
    def store(self) -> EntityStore:
        return self._store

    @property
    def identity(self) -> Identity:
        return self._identity

    @property
    def company_id(self) -> int:
        return self._identity.company_id

    def _load_department(self, department_id: int) -> DepartmentOut:
        department = self._store.get_department(department_id)
        ensure_same_tenant(
            self._identity,
            department.company_id if department else None,
            "Department",
            department_id,
        )
        return department  # type: ignore[return-value]

    def _load_item(self, item_id: int) -> InventoryItemOut:
        item = self._store.get_item(item_id)
        ensure_same_tenant(self._identity, item.company_id if item else None, "Item", item_id)
        return item  # type: ignore[return-value]
