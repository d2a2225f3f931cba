"""Company sign-up, settings and user administration."""
from fastapi import APIRouter

from assetdesk.api.dependencies import CompanyServiceDep, StoreDep
from assetdesk.models import schemas
from assetdesk.services.company_service import register_company

router = APIRouter()


@router.post("/register", response_model=schemas.CompanyRegistrationOut, status_code=201)
def register(data: schemas.CompanyRegistration, store: StoreDep):
    """Create a company with its default department and admin user."""
    return register_company(store, data)


@router.get("/company", response_model=schemas.CompanyOut)
def get_company(service: CompanyServiceDep):
    return service.get_company()


@router.patch("/company", response_model=schemas.CompanyOut)
def update_company(data: schemas.CompanyUpdate, service: CompanyServiceDep):
    return service.update_settings(data)


@router.get("/users", response_model=list[schemas.UserOut])
def list_users(service: CompanyServiceDep):
    return service.list_users()


@router.post("/users", response_model=schemas.UserOut, status_code=201)
def create_user(data: schemas.UserIn, service: CompanyServiceDep):
    return service.create_user(data)


@router.post("/users/{user_id}/departments/{department_id}", response_model=schemas.UserDepartmentOut, status_code=201)
def assign_department(user_id: int, department_id: int, service: CompanyServiceDep):
    return service.assign_user_to_department(user_id, department_id)
