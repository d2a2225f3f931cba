"""Inventory item endpoints."""
import logging

from fastapi import APIRouter, Query

from assetdesk.models import schemas
from .dependencies import InventoryServiceDep

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/inventory", response_model=schemas.InventoryItemOut, status_code=201)
def create_item(data: schemas.InventoryItemIn, service: InventoryServiceDep):
    """Create an item; the asset id is issued by the server."""
    return service.create_item(data)


@router.get("/inventory", response_model=list[schemas.InventoryItemOut])
def list_items(
    service: InventoryServiceDep,
    department_id: int | None = Query(None, description="Filter by department"),
):
    """List items visible to the caller."""
    return service.list_items(department_id)


@router.get("/inventory/{item_id}", response_model=schemas.InventoryItemOut)
def get_item(item_id: int, service: InventoryServiceDep):
    return service.get_item(item_id)


@router.patch("/inventory/{item_id}", response_model=schemas.InventoryItemOut)
def update_item(item_id: int, data: schemas.InventoryItemPatch, service: InventoryServiceDep):
    """Partially update an item; changing ``department_id`` transfers it."""
    return service.update_item(item_id, data)


@router.delete("/inventory/{item_id}", status_code=204)
def delete_item(item_id: int, service: InventoryServiceDep):
    service.delete_item(item_id)
