"""
Dashboard Service - read-only summaries.

Figures are computed from the departments and items the caller can see.
The activity feed is company-wide for every role.
"""
from __future__ import annotations

import datetime as dt
import logging

from assetdesk.core.config import settings
from assetdesk.core.exceptions import ValidationError
from assetdesk.core.rbac import visible_department_ids
from assetdesk.models.models import ItemStatus
from assetdesk.models.schemas import ActivityLogOut, DashboardSummary, DepartmentStat
from assetdesk.services.inventory.activity import ActivityRecorder
from assetdesk.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)

MAX_ACTIVITY_LIMIT = 100


def month_start(now: dt.datetime) -> dt.datetime:
    if now.tzinfo is None:
        now = now.replace(tzinfo=dt.timezone.utc)
    return now.astimezone(dt.timezone.utc).replace(day=1, hour=0, minute=0, second=0, microsecond=0)


class DashboardService(BaseInventoryService):
    """Service for dashboard and activity feed reads."""

    def list_activity(self, limit: int | None = None) -> list[ActivityLogOut]:
        """Most recent activity entries, newest first."""
        if limit is None:
            limit = settings.ACTIVITY_FEED_LIMIT
        if limit < 1:
            raise ValidationError("Limit must be at least 1", errors=[{"field": "limit", "message": "must be >= 1"}])
        return ActivityRecorder(self._store).recent(self.company_id, min(limit, MAX_ACTIVITY_LIMIT))

    def get_dashboard_summary(self, now: dt.datetime | None = None) -> DashboardSummary:
        since = month_start(now or dt.datetime.now(dt.timezone.utc))

        all_departments = self._store.list_departments(self.company_id)
        visible = visible_department_ids(self._identity, (d.id for d in all_departments))
        departments = [d for d in all_departments if d.id in visible]
        items = [i for i in self._store.list_items(self.company_id) if i.department_id in visible]

        return DashboardSummary(
            total_items=len(items),
            items_added_this_month=sum(1 for i in items if i.created_at >= since),
            low_stock_items=sum(1 for i in items if i.status == ItemStatus.LOW),
            department_count=len(departments),
            recent_activity=self.list_activity(settings.DASHBOARD_RECENT_ACTIVITY),
            department_stats=[
                DepartmentStat(
                    id=d.id,
                    name=d.name,
                    item_count=d.item_count,
                    capacity_used=d.capacity_used,
                )
                for d in departments
            ],
        )
