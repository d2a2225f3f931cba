"""Custom field endpoints."""
from fastapi import APIRouter, Query

from assetdesk.models import schemas
from .dependencies import InventoryServiceDep

router = APIRouter()


@router.post("/custom-fields", response_model=schemas.CustomFieldOut, status_code=201)
def create_custom_field(data: schemas.CustomFieldIn, service: InventoryServiceDep):
    return service.create_custom_field(data)


@router.get("/custom-fields", response_model=list[schemas.CustomFieldOut])
def list_custom_fields(
    service: InventoryServiceDep,
    department_id: int | None = Query(None, description="Department fields; omit for tenant-wide"),
):
    return service.list_custom_fields(department_id)


@router.get("/departments/{department_id}/custom-fields", response_model=list[schemas.CustomFieldOut])
def effective_custom_fields(department_id: int, service: InventoryServiceDep):
    """Fields that apply to items in the department."""
    return service.effective_custom_fields(department_id)
