"""Activity feed and dashboard endpoints."""
from fastapi import APIRouter, Query

from assetdesk.models import schemas
from .dependencies import InventoryServiceDep

router = APIRouter()


@router.get("/activity", response_model=list[schemas.ActivityLogOut])
def list_activity(
    service: InventoryServiceDep,
    limit: int | None = Query(None, ge=1, le=100, description="Number of entries"),
):
    """Recent activity for the company, newest first."""
    return service.list_activity(limit)


@router.get("/dashboard", response_model=schemas.DashboardSummary)
def dashboard(service: InventoryServiceDep):
    return service.get_dashboard_summary()
