"""
Inventory Service Module.

The InventoryService class acts as a facade that composes the specialized
services (departments, items, custom fields, dashboard) for one caller.

Usage:
    from assetdesk.services.inventory import InventoryService, build_inventory_service

    # Using factory function
    service = build_inventory_service(store, identity)

    # Department operations
    department = service.create_department({"name": "Warehouse"})
    departments = service.list_departments()

    # Item operations
    item = service.create_item({"department_id": department.id, "name": "Forklift"})
    service.update_item(item.id, {"department_id": other.id})
    service.delete_item(item.id)

    # Reads
    summary = service.get_dashboard_summary()
    feed = service.list_activity()
"""
from __future__ import annotations

import datetime as dt

from assetdesk.core.rbac import Identity
from assetdesk.models.schemas import (
    ActivityLogOut,
    CustomFieldIn,
    CustomFieldOut,
    DashboardSummary,
    DepartmentIn,
    DepartmentOut,
    InventoryItemIn,
    InventoryItemOut,
    InventoryItemPatch,
)
from assetdesk.store.base import EntityStore, Payload

from .activity import UNKNOWN, ActivityRecorder
from .asset_ids import AssetIdIssuer, render_asset_id
from .capacity import CAPACITY_UNITS_PER_ITEM, CapacityAccountant, reconcile_company, reconcile_department
from .custom_field_service import CustomFieldService
from .dashboard_service import DashboardService
from .department_service import DepartmentService
from .item_service import ItemService


class InventoryService:
    """
    Facade for inventory management operations.

    Composes specialized services to provide a unified API while
    maintaining separation of concerns internally.
    """

    def __init__(self, store: EntityStore, identity: Identity):
        """Initialize all sub-services."""
        self._store = store
        self._identity = identity

        self._departments = DepartmentService(store, identity)
        self._items = ItemService(store, identity)
        self._custom_fields = CustomFieldService(store, identity)
        self._dashboard = DashboardService(store, identity)

    # ========================================================================
    # Department Operations (delegated to DepartmentService)
    # ========================================================================

    def create_department(self, data: Payload | DepartmentIn) -> DepartmentOut:
        """Create a new department."""
        return self._departments.create_department(data)

    def get_department(self, department_id: int) -> DepartmentOut:
        """Get a department by ID."""
        return self._departments.get_department(department_id)

    def list_departments(self) -> list[DepartmentOut]:
        """List visible departments."""
        return self._departments.list_departments()

    def rename_department(self, department_id: int, name: str) -> DepartmentOut:
        """Rename a department."""
        return self._departments.rename_department(department_id, name)

    def delete_department(self, department_id: int) -> None:
        """Delete a department (not available)."""
        return self._departments.delete_department(department_id)

    # ========================================================================
    # Item Operations (delegated to ItemService)
    # ========================================================================

    def create_item(self, data: Payload | InventoryItemIn) -> InventoryItemOut:
        """Create an inventory item."""
        return self._items.create_item(data)

    def get_item(self, item_id: int) -> InventoryItemOut:
        """Get an item by ID."""
        return self._items.get_item(item_id)

    def list_items(self, department_id: int | None = None) -> list[InventoryItemOut]:
        """List visible items."""
        return self._items.list_items(department_id)

    def update_item(self, item_id: int, data: Payload | InventoryItemPatch) -> InventoryItemOut:
        """Update or transfer an item."""
        return self._items.update_item(item_id, data)

    def delete_item(self, item_id: int) -> None:
        """Delete an item."""
        return self._items.delete_item(item_id)

    # ========================================================================
    # Custom Field Operations (delegated to CustomFieldService)
    # ========================================================================

    def create_custom_field(self, data: Payload | CustomFieldIn) -> CustomFieldOut:
        """Define a custom field."""
        return self._custom_fields.create_custom_field(data)

    def list_custom_fields(self, department_id: int | None = None) -> list[CustomFieldOut]:
        """List tenant-wide or department custom fields."""
        return self._custom_fields.list_custom_fields(department_id)

    def effective_custom_fields(self, department_id: int) -> list[CustomFieldOut]:
        """Fields applying to a department's items."""
        return self._custom_fields.effective_custom_fields(department_id)

    # ========================================================================
    # Dashboard Operations (delegated to DashboardService)
    # ========================================================================

    def list_activity(self, limit: int | None = None) -> list[ActivityLogOut]:
        """Recent activity, newest first."""
        return self._dashboard.list_activity(limit)

    def get_dashboard_summary(self, now: dt.datetime | None = None) -> DashboardSummary:
        """Dashboard figures for the caller."""
        return self._dashboard.get_dashboard_summary(now)


def build_inventory_service(store: EntityStore, identity: Identity) -> InventoryService:
    """Factory function to create an InventoryService."""
    return InventoryService(store, identity)


__all__ = [
    "CAPACITY_UNITS_PER_ITEM",
    "UNKNOWN",
    "ActivityRecorder",
    "AssetIdIssuer",
    "CapacityAccountant",
    "CustomFieldService",
    "DashboardService",
    "DepartmentService",
    "InventoryService",
    "ItemService",
    "build_inventory_service",
    "reconcile_company",
    "reconcile_department",
    "render_asset_id",
]
