"""
Activity recorder.

Appends one ActivityLog row per inventory mutation. Names are copied into the
row at write time so later renames or deletes never rewrite history. Lookup
failures while building the snapshot fall back to ``UNKNOWN`` instead of
failing the mutation; a failure to write the row itself propagates and rolls
the mutation back.
"""
from __future__ import annotations

import logging

from assetdesk.models.models import ActivityAction
from assetdesk.models.schemas import ActivityLogCreate, ActivityLogOut, InventoryItemOut
from assetdesk.store.base import EntityStore

logger = logging.getLogger(__name__)

UNKNOWN = "Unknown"


class ActivityRecorder:

    def __init__(self, store: EntityStore):
        self._store = store

    def record(
        self,
        action: ActivityAction,
        item: InventoryItemOut,
        *,
        user_id: int,
        user_name: str | None = None,
        department_name: str | None = None,
    ) -> ActivityLogOut:
        """Write the audit entry for ``item`` as it is at this moment."""
        entry = self._store.create_activity_log(
            ActivityLogCreate(
                company_id=item.company_id,
                action=action,
                item_id=item.id,
                asset_id=item.asset_id,
                item_name=item.name,
                department_name=department_name or self.department_name(item.department_id),
                user_id=user_id,
                user_name=user_name or self.user_name(user_id),
            )
        )
        logger.info(
            "Activity %s: item=%s asset=%s by user %s",
            action.value,
            item.id,
            item.asset_id,
            user_id,
        )
        return entry

    def department_name(self, department_id: int) -> str:
        try:
            department = self._store.get_department(department_id)
        except Exception:  # noqa: BLE001
            logger.warning("Department lookup failed for activity snapshot (id=%s)", department_id, exc_info=True)
            return UNKNOWN
        return department.name if department else UNKNOWN

    def user_name(self, user_id: int) -> str:
        try:
            user = self._store.get_user(user_id)
        except Exception:  # noqa: BLE001
            logger.warning("User lookup failed for activity snapshot (id=%s)", user_id, exc_info=True)
            return UNKNOWN
        return user.name if user else UNKNOWN

    def recent(self, company_id: int, limit: int | None = 10) -> list[ActivityLogOut]:
        """Newest entries first."""
        return self._store.list_activity_logs(company_id, limit)
