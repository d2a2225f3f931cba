"""
Department capacity accounting.

``Department.item_count`` and ``Department.capacity_used`` are caches of the
live items in a department. Each item is a fixed number of capacity units;
there is no weight or volume model yet.
"""
from __future__ import annotations

import logging

from assetdesk.core.exceptions import NotFoundError
from assetdesk.models.schemas import DepartmentOut
from assetdesk.store.base import EntityStore

logger = logging.getLogger(__name__)

CAPACITY_UNITS_PER_ITEM = 10


class CapacityAccountant:
    """Keeps department counters in step with item creates, deletes and transfers.

    A department that cannot be found is skipped with a warning; the item
    mutation that triggered the accounting still goes through.
    """

    def __init__(self, store: EntityStore, units_per_item: int = CAPACITY_UNITS_PER_ITEM):
        self._store = store
        self._units = units_per_item

    def item_added(self, department_id: int) -> DepartmentOut | None:
        return self._adjust(department_id, 1)

    def item_removed(self, department_id: int) -> DepartmentOut | None:
        return self._adjust(department_id, -1)

    def item_transferred(self, source_id: int, destination_id: int) -> None:
        if source_id == destination_id:
            return
        self._adjust(source_id, -1)
        self._adjust(destination_id, 1)

    def _adjust(self, department_id: int, direction: int) -> DepartmentOut | None:
        try:
            return self._store.adjust_department_counters(
                department_id,
                item_delta=direction,
                capacity_delta=direction * self._units,
            )
        except NotFoundError:
            logger.warning(
                "Department %s not found; skipping capacity accounting (delta=%+d)",
                department_id,
                direction,
            )
            return None


def reconcile_department(store: EntityStore, department_id: int) -> DepartmentOut:
    """Recompute one department's counters from its live items."""
    with store.transaction():
        department = store.get_department(department_id)
        if not department:
            raise NotFoundError("Department", department_id)
        live = len(store.list_items(department.company_id, department_id))
        expected = {"item_count": live, "capacity_used": live * CAPACITY_UNITS_PER_ITEM}
        if department.item_count != live or department.capacity_used != expected["capacity_used"]:
            logger.info(
                "Repairing department %s counters: items %s -> %s, capacity %s -> %s",
                department_id,
                department.item_count,
                live,
                department.capacity_used,
                expected["capacity_used"],
            )
        return store.update_department(department_id, expected)


def reconcile_company(store: EntityStore, company_id: int) -> list[DepartmentOut]:
    """Recompute counters for every department of a company in one transaction."""
    with store.transaction():
        return [reconcile_department(store, d.id) for d in store.list_departments(company_id)]
