"""
Role-based access policy.

Stateless and evaluated per request. The caller's role is turned into one of
two access variants and branched on once:

- ``AdminAccess``: everything inside the caller's company
- ``EmployeeAccess``: only the departments the caller is a member of, and
  never the admin-only actions

Tenant isolation is checked before any role check; a foreign-tenant row is
reported as missing, never as forbidden.
"""
from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from assetdesk.core.audit import log_denied
from assetdesk.core.exceptions import ForbiddenError, NotFoundError
from assetdesk.models.models import Role

if TYPE_CHECKING:
    from assetdesk.store.base import EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminAccess:
    pass


@dataclass(frozen=True)
class EmployeeAccess:
    department_ids: frozenset[int] = frozenset()


RoleAccess = AdminAccess | EmployeeAccess


@dataclass(frozen=True)
class Identity:
    """Authenticated caller, as supplied by the auth collaborator."""
    user_id: int
    company_id: int
    role: Role
    department_ids: frozenset[int] = field(default_factory=frozenset)

    @property
    def access(self) -> RoleAccess:
        if self.role == Role.ADMIN:
            return AdminAccess()
        return EmployeeAccess(frozenset(self.department_ids))

    @property
    def is_admin(self) -> bool:
        return isinstance(self.access, AdminAccess)


class Action(str, enum.Enum):
    VIEW_DEPARTMENT = "department.view"
    CREATE_DEPARTMENT = "department.create"
    MANAGE_DEPARTMENT = "department.manage"
    MANAGE_CUSTOM_FIELDS = "custom_field.manage"
    VIEW_ITEM = "item.view"
    CREATE_ITEM = "item.create"
    UPDATE_ITEM = "item.update"
    DELETE_ITEM = "item.delete"
    MANAGE_COMPANY = "company.manage"
    MANAGE_USERS = "user.manage"


ADMIN_ONLY_ACTIONS = frozenset({
    Action.CREATE_DEPARTMENT,
    Action.MANAGE_DEPARTMENT,
    Action.MANAGE_CUSTOM_FIELDS,
    Action.DELETE_ITEM,
    Action.MANAGE_COMPANY,
    Action.MANAGE_USERS,
})


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str | None = None

    @classmethod
    def allow(cls) -> Decision:
        return cls(True)

    @classmethod
    def deny(cls, reason: str) -> Decision:
        return cls(False, reason)


def authorize(identity: Identity, action: Action, department_id: int | None = None) -> Decision:
    """Decide whether ``identity`` may perform ``action`` on ``department_id``.

    Tenancy is not checked here; run ``ensure_same_tenant`` on the target row first.
    """
    access = identity.access
    if isinstance(access, AdminAccess):
        return Decision.allow()
    if action in ADMIN_ONLY_ACTIONS:
        return Decision.deny(ForbiddenError.ADMIN_REQUIRED)
    if department_id is None or department_id not in access.department_ids:
        return Decision.deny(ForbiddenError.NO_DEPARTMENT_ACCESS)
    return Decision.allow()


def ensure_same_tenant(
    identity: Identity,
    company_id: int | None,
    entity: str = "Resource",
    entity_id: int | None = None,
) -> None:
    """Raise ``NotFoundError`` when the row is absent or owned by another company."""
    if company_id is None or company_id != identity.company_id:
        if company_id is not None:
            log_denied(
                f"{entity.lower()}.cross_tenant",
                user_id=identity.user_id,
                reason="cross-tenant access",
                company_id=identity.company_id,
                target_id=entity_id,
            )
        raise NotFoundError(entity, entity_id)


def enforce(identity: Identity, action: Action, department_id: int | None = None) -> None:
    """Raise ``ForbiddenError`` unless ``authorize`` allows the action."""
    decision = authorize(identity, action, department_id)
    if not decision.allowed:
        log_denied(
            action.value,
            user_id=identity.user_id,
            reason=decision.reason,
            company_id=identity.company_id,
            department_id=department_id,
        )
        raise ForbiddenError(decision.reason or ForbiddenError.ADMIN_REQUIRED)


def can_view_department(identity: Identity, department_id: int) -> bool:
    return authorize(identity, Action.VIEW_DEPARTMENT, department_id).allowed


def visible_department_ids(identity: Identity, department_ids: Iterable[int]) -> set[int]:
    return {d for d in department_ids if can_view_department(identity, d)}


def resolve_identity(store: EntityStore, user_id: int) -> Identity:
    """Build the request identity for ``user_id`` from stored user and membership rows.

    Stand-in for the external auth collaborator. Membership edges pointing at
    another company's departments are ignored.
    """
    user = store.get_user(user_id)
    if not user:
        raise NotFoundError("User", user_id)
    own_departments = {d.id for d in store.list_departments(user.company_id)}
    memberships = frozenset(
        edge.department_id
        for edge in store.list_user_departments(user.id)
        if edge.department_id in own_departments
    )
    return Identity(user_id=user.id, company_id=user.company_id, role=user.role, department_ids=memberships)
