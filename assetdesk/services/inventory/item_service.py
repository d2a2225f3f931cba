"""
Item Service - inventory item lifecycle.

Each mutation runs as one store transaction:

    authorize -> issue asset id (create only) -> write item
              -> adjust department capacity -> record activity

If any step raises, nothing is persisted. The single sanctioned partial
outcome is capacity accounting being skipped because its department row is
missing (see ``CapacityAccountant``).
"""
from __future__ import annotations

import logging

from assetdesk.core.rbac import Action, Identity, can_view_department, enforce
from assetdesk.models.models import ActivityAction
from assetdesk.models.schemas import InventoryItemCreate, InventoryItemIn, InventoryItemOut, InventoryItemPatch
from assetdesk.services.inventory.activity import ActivityRecorder
from assetdesk.services.inventory.asset_ids import AssetIdIssuer
from assetdesk.services.inventory.base import BaseInventoryService
from assetdesk.services.inventory.capacity import CapacityAccountant
from assetdesk.store.base import EntityStore, Payload, changed_fields, validate_payload

logger = logging.getLogger(__name__)


class ItemService(BaseInventoryService):
    """Service for inventory item operations."""

    def __init__(
        self,
        store: EntityStore,
        identity: Identity,
        issuer: AssetIdIssuer | None = None,
        accountant: CapacityAccountant | None = None,
        recorder: ActivityRecorder | None = None,
    ):
        super().__init__(store, identity)
        self._issuer = issuer or AssetIdIssuer(store)
        self._accountant = accountant or CapacityAccountant(store)
        self._recorder = recorder or ActivityRecorder(store)

    # ========================================================================
    # Reads
    # ========================================================================

    def get_item(self, item_id: int) -> InventoryItemOut:
        item = self._load_item(item_id)
        enforce(self._identity, Action.VIEW_ITEM, item.department_id)
        return item

    def list_items(self, department_id: int | None = None) -> list[InventoryItemOut]:
        """List items for the whole company, or for one department."""
        if department_id is not None:
            department = self._load_department(department_id)
            enforce(self._identity, Action.VIEW_DEPARTMENT, department.id)
            return self._store.list_items(self.company_id, department.id)
        return [
            item for item in self._store.list_items(self.company_id)
            if can_view_department(self._identity, item.department_id)
        ]

    # ========================================================================
    # Mutations
    # ========================================================================

    def create_item(self, data: Payload | InventoryItemIn) -> InventoryItemOut:
        """
        Create an item in a department the caller may write to.

        Issues the next asset id, bumps the department counters and records
        an ``added`` activity entry.
        """
        fields = validate_payload(InventoryItemIn, data)
        user_id = self._identity.user_id
        with self._store.transaction():
            department = self._load_department(fields.department_id)
            enforce(self._identity, Action.CREATE_ITEM, department.id)

            asset_id = self._issuer.issue(self.company_id)
            item = self._store.create_item(
                InventoryItemCreate(
                    **fields.model_dump(),
                    company_id=self.company_id,
                    created_by=user_id,
                    updated_by=user_id,
                ),
                asset_id,
            )
            self._accountant.item_added(item.department_id)
            self._recorder.record(ActivityAction.ADDED, item, user_id=user_id)

        logger.info(f"Created item {item.asset_id} (id={item.id}) in department {item.department_id}")
        return item

    def update_item(self, item_id: int, data: Payload | InventoryItemPatch) -> InventoryItemOut:
        """
        Apply a partial update.

        Moving the item to another department is a transfer: the caller must
        be able to write to both departments, the counters move with the item,
        and the activity entry is ``transferred`` instead of ``updated``.
        """
        changes = changed_fields(InventoryItemPatch, data)
        user_id = self._identity.user_id
        with self._store.transaction():
            existing = self._load_item(item_id)
            enforce(self._identity, Action.UPDATE_ITEM, existing.department_id)

            destination = changes.get("department_id", existing.department_id)
            transferred = destination != existing.department_id
            if transferred:
                target = self._load_department(destination)
                enforce(self._identity, Action.UPDATE_ITEM, target.id)

            changes["updated_by"] = user_id
            item = self._store.update_item(existing.id, changes)

            if transferred:
                self._accountant.item_transferred(existing.department_id, item.department_id)
            action = ActivityAction.TRANSFERRED if transferred else ActivityAction.UPDATED
            self._recorder.record(action, item, user_id=user_id)

        logger.info(f"Updated item {item.asset_id} (id={item.id}, {action.value})")
        return item

    def delete_item(self, item_id: int) -> None:
        """Permanently delete an item (admin only)."""
        user_id = self._identity.user_id
        with self._store.transaction():
            existing = self._load_item(item_id)
            enforce(self._identity, Action.DELETE_ITEM, existing.department_id)

            department_name = self._recorder.department_name(existing.department_id)
            self._store.delete_item(existing.id)
            self._accountant.item_removed(existing.department_id)
            self._recorder.record(
                ActivityAction.REMOVED,
                existing,
                user_id=user_id,
                department_name=department_name,
            )

        logger.info(f"Deleted item {existing.asset_id} (id={existing.id})")
