"""Company and user administration: sign-up, settings, users and memberships."""
from __future__ import annotations

import logging

from assetdesk.core.audit import log_audit_event
from assetdesk.core.config import settings
from assetdesk.core.exceptions import NotFoundError, OperationUnavailableError, ValidationError
from assetdesk.core.rbac import Action, Identity, enforce, ensure_same_tenant
from assetdesk.core.security import hash_password
from assetdesk.models.models import Role
from assetdesk.models.schemas import (
    CompanyCreate,
    CompanyOut,
    CompanyRegistration,
    CompanyRegistrationOut,
    CompanyUpdate,
    DepartmentCreate,
    UserCreate,
    UserDepartmentCreate,
    UserDepartmentOut,
    UserIn,
    UserOut,
)
from assetdesk.services.inventory.asset_ids import has_placeholder
from assetdesk.store.base import EntityStore, Payload, changed_fields, validate_payload

logger = logging.getLogger(__name__)

DEFAULT_DEPARTMENT_NAME = "General"


def register_company(store: EntityStore, data: Payload | CompanyRegistration) -> CompanyRegistrationOut:
    """
    Create a company, its default department and its first admin user.

    All three rows are written in one transaction.
    """
    registration = validate_payload(CompanyRegistration, data)
    pattern = registration.asset_id_pattern or settings.DEFAULT_ASSET_ID_PATTERN
    _check_pattern(pattern)

    with store.transaction():
        company = store.create_company(CompanyCreate(name=registration.company_name, asset_id_pattern=pattern))
        department = store.create_department(
            DepartmentCreate(company_id=company.id, name=DEFAULT_DEPARTMENT_NAME)
        )
        admin = store.create_user(
            UserCreate(
                company_id=company.id,
                name=registration.admin_name,
                email=registration.admin_email,
                role=Role.ADMIN,
                hashed_password=hash_password(registration.password),
            )
        )

    logger.info("Registered company %s (id=%s) with admin user %s", company.name, company.id, admin.id)
    return CompanyRegistrationOut(company=company, admin=admin, departments=[department])


def _check_pattern(pattern: str) -> None:
    if not has_placeholder(pattern):
        raise ValidationError(
            "Asset ID pattern must contain a run of '#' characters",
            errors=[{"field": "asset_id_pattern", "message": "missing '#' placeholder"}],
        )


class CompanyService:
    """Service for the caller's own company and its users."""

    def __init__(self, store: EntityStore, identity: Identity):
        self._store = store
        self._identity = identity

    @property
    def company_id(self) -> int:
        return self._identity.company_id

    # ========================================================================
    # Company
    # ========================================================================

    def get_company(self) -> CompanyOut:
        company = self._store.get_company(self.company_id)
        if not company:
            raise NotFoundError("Company", self.company_id)
        return company

    def update_settings(self, data: Payload | CompanyUpdate) -> CompanyOut:
        """Change the company name or asset id pattern (admin only).

        A new pattern applies to ids issued from now on; existing ids and the
        counter are left as they are.
        """
        enforce(self._identity, Action.MANAGE_COMPANY)
        changes = changed_fields(CompanyUpdate, data)
        if changes.get("asset_id_pattern") is not None:
            _check_pattern(changes["asset_id_pattern"])
        with self._store.transaction():
            company = self._store.update_company(self.company_id, changes)
        log_audit_event("company.update", user_id=self._identity.user_id, company_id=self.company_id, fields=sorted(changes))
        logger.info("Updated settings for company %s: %s", self.company_id, sorted(changes))
        return company

    def change_subscription(self, tier: str) -> CompanyOut:
        raise OperationUnavailableError("subscription change")

    # ========================================================================
    # Users
    # ========================================================================

    def list_users(self) -> list[UserOut]:
        enforce(self._identity, Action.MANAGE_USERS)
        return self._store.list_users(self.company_id)

    def create_user(self, data: Payload | UserIn) -> UserOut:
        """Create a user in the caller's company and assign their departments."""
        enforce(self._identity, Action.MANAGE_USERS)
        fields = validate_payload(UserIn, data)
        with self._store.transaction():
            for department_id in fields.department_ids:
                self._require_department(department_id)
            user = self._store.create_user(
                UserCreate(
                    company_id=self.company_id,
                    name=fields.name,
                    email=fields.email,
                    role=fields.role,
                    hashed_password=hash_password(fields.password),
                )
            )
            for department_id in dict.fromkeys(fields.department_ids):
                self._store.assign_user_to_department(
                    UserDepartmentCreate(user_id=user.id, department_id=department_id)
                )
        log_audit_event(
            "user.create",
            user_id=self._identity.user_id,
            company_id=self.company_id,
            target_id=user.id,
            role=user.role.value,
        )
        logger.info("Created %s user %s in company %s", user.role.value, user.id, self.company_id)
        return user

    def assign_user_to_department(self, user_id: int, department_id: int) -> UserDepartmentOut:
        enforce(self._identity, Action.MANAGE_USERS)
        with self._store.transaction():
            user = self._store.get_user(user_id)
            ensure_same_tenant(self._identity, user.company_id if user else None, "User", user_id)
            self._require_department(department_id)
            edge = self._store.assign_user_to_department(
                UserDepartmentCreate(user_id=user_id, department_id=department_id)
            )
        log_audit_event(
            "user.assign_department",
            user_id=self._identity.user_id,
            company_id=self.company_id,
            target_id=user_id,
            department_id=department_id,
        )
        logger.info("Assigned user %s to department %s", user_id, department_id)
        return edge

    def invite_user(self, email: str) -> None:
        raise OperationUnavailableError("user invitation")

    def _require_department(self, department_id: int) -> None:
        department = self._store.get_department(department_id)
        ensure_same_tenant(
            self._identity,
            department.company_id if department else None,
            "Department",
            department_id,
        )
