"""Department endpoints."""
from fastapi import APIRouter
from assetdesk.models import schemas
from .dependencies import InventoryServiceDep

router = APIRouter()


@router.post("/departments", response_model=schemas.DepartmentOut, status_code=201)
def create_department(data: schemas.DepartmentIn, service: InventoryServiceDep):
    """Create a new department."""
    return service.create_department(data)


@router.get("/departments", response_model=list[schemas.DepartmentOut])
def list_departments(service: InventoryServiceDep):
    """List the departments visible to the caller."""
    return service.list_departments()


@router.get("/departments/{department_id}", response_model=schemas.DepartmentOut)
def get_department(department_id: int, service: InventoryServiceDep):
    return service.get_department(department_id)


@router.patch("/departments/{department_id}", response_model=schemas.DepartmentOut)
def rename_department(department_id: int, data: schemas.DepartmentIn, service: InventoryServiceDep):
    return service.rename_department(department_id, data.name)


@router.delete("/departments/{department_id}", status_code=204)
def delete_department(department_id: int, service: InventoryServiceDep):
    service.delete_department(department_id)
