"""Tests for sign-up and company administration."""
import pytest

from assetdesk.core.exceptions import (
    ConflictError,
    ForbiddenError,
    NotFoundError,
    OperationUnavailableError,
    ValidationError,
)
from assetdesk.core.rbac import resolve_identity
from assetdesk.core.security import verify_password
from assetdesk.models.models import Role
from assetdesk.services.company_service import CompanyService, register_company


def test_registration_creates_company_department_and_admin(store, company):
    assert company.company.asset_id_pattern == "A-####"
    assert company.company.current_asset_id == 1
    assert [d.name for d in company.departments] == ["General"]
    assert company.admin.role == Role.ADMIN
    assert company.admin.email == "admin@acme.test"
    assert store.get_user_by_email(company.company.id, "admin@acme.test").id == company.admin.id


def test_registration_rejects_pattern_without_placeholder(store):
    with pytest.raises(ValidationError):
        register_company(
            store,
            {
                "company_name": "Broken",
                "asset_id_pattern": "NOPE",
                "admin_name": "B",
                "admin_email": "b@example.test",
                "password": "correct-horse-battery",
            },
        )


def test_registration_is_atomic(store, company, monkeypatch):
    def refuse(*args, **kwargs):
        raise RuntimeError("user table locked")

    monkeypatch.setattr(store, "create_user", refuse)
    with pytest.raises(RuntimeError):
        register_company(
            store,
            {
                "company_name": "Half Made",
                "admin_name": "H",
                "admin_email": "h@example.test",
                "password": "correct-horse-battery",
            },
        )

    assert store.get_company(company.company.id + 1) is None
    assert store.list_departments(company.company.id + 1) == []


def test_update_settings(store, admin):
    service = CompanyService(store, admin)

    updated = service.update_settings({"asset_id_pattern": "EQ-#####"})

    assert updated.asset_id_pattern == "EQ-#####"
    assert updated.current_asset_id == 1


def test_update_settings_validation(store, admin, company, make_employee):
    with pytest.raises(ValidationError):
        CompanyService(store, admin).update_settings({"asset_id_pattern": "PLAIN"})
    with pytest.raises(ValidationError):
        CompanyService(store, admin).update_settings({"current_asset_id": 50})

    employee = make_employee(company.company.id)
    with pytest.raises(ForbiddenError):
        CompanyService(store, employee).update_settings({"name": "Hijacked"})


def test_create_user_with_departments(store, company, admin):
    service = CompanyService(store, admin)
    general = company.departments[0].id

    user = service.create_user(
        {"name": "Dee", "email": "Dee@Acme.test", "password": "long-enough-pw", "department_ids": [general]}
    )

    assert user.email == "dee@acme.test"
    assert user.role == Role.EMPLOYEE
    assert resolve_identity(store, user.id).department_ids == frozenset({general})


def test_create_user_duplicate_email(store, company, admin):
    service = CompanyService(store, admin)

    with pytest.raises(ConflictError):
        service.create_user({"name": "Dup", "email": "admin@acme.test", "password": "long-enough-pw"})


def test_create_user_with_foreign_department_creates_nothing(store, admin, other_company):
    service = CompanyService(store, admin)

    with pytest.raises(NotFoundError):
        service.create_user(
            {
                "name": "Eve",
                "email": "eve@acme.test",
                "password": "long-enough-pw",
                "department_ids": [other_company.departments[0].id],
            }
        )

    assert store.get_user_by_email(admin.company_id, "eve@acme.test") is None


def test_assign_user_to_department(store, company, admin, make_employee):
    employee = make_employee(company.company.id)
    service = CompanyService(store, admin)

    edge = service.assign_user_to_department(employee.user_id, company.departments[0].id)

    assert edge.user_id == employee.user_id
    with pytest.raises(ConflictError):
        service.assign_user_to_department(employee.user_id, company.departments[0].id)


def test_employee_cannot_manage_users(store, company, make_employee):
    employee = make_employee(company.company.id)

    with pytest.raises(ForbiddenError):
        CompanyService(store, employee).list_users()


def test_unavailable_operations(store, admin):
    service = CompanyService(store, admin)

    with pytest.raises(OperationUnavailableError):
        service.invite_user("new@acme.test")
    with pytest.raises(OperationUnavailableError):
        service.change_subscription("pro")


def test_admin_password_is_hashed(store, db_session, company):
    from assetdesk.models.models import User

    if not hasattr(store, "db"):
        pytest.skip("credentials are only readable from the SQL store")
    row = db_session.get(User, company.admin.id)

    assert row.hashed_password != "correct-horse-battery"
    assert verify_password("correct-horse-battery", row.hashed_password)
