"""
Entity store interface.

The store is the only component that touches durable storage. Two
implementations share this contract:

- ``MemoryEntityStore``: dict-backed tables with manually incremented ids (tests, demos)
- ``SqlEntityStore``: SQLAlchemy session against the configured database

Multi-row reads are always scoped by ``company_id``. Single-row ``get_*``
fetches return ``None`` when absent and do NOT enforce tenancy; callers run
the access policy on the returned row before exposing or mutating it.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from assetdesk.core.exceptions import ValidationError
from assetdesk.models.schemas import (
    ActivityLogCreate,
    ActivityLogOut,
    CompanyCreate,
    CompanyOut,
    CustomFieldCreate,
    CustomFieldOut,
    DepartmentCreate,
    DepartmentOut,
    InventoryItemCreate,
    InventoryItemOut,
    UserCreate,
    UserDepartmentCreate,
    UserDepartmentOut,
    UserOut,
)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

Payload = Mapping[str, Any] | BaseModel


def validate_payload(schema: type[SchemaT], data: Payload, *, partial: bool = False) -> SchemaT:
    """Validate ``data`` against ``schema`` and convert failures to ``ValidationError``.

    ``partial`` keeps only the fields the caller actually set, so an update
    never overwrites columns with schema defaults.
    """
    if isinstance(data, BaseModel):
        raw = data.model_dump(exclude_unset=partial)
    else:
        raw = dict(data)
    try:
        return schema.model_validate(raw)
    except pydantic.ValidationError as exc:
        errors = [
            {"field": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        raise ValidationError(f"Invalid {schema.__name__} payload", errors=errors) from exc


def changed_fields(schema: type[SchemaT], data: Payload) -> dict[str, Any]:
    """Validate a partial update and return only the explicitly provided fields."""
    model = validate_payload(schema, data, partial=True)
    return model.model_dump(exclude_unset=True)


class EntityStore(ABC):
    """Typed CRUD persistence for every entity kind."""

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator[EntityStore]:
        """Run a block atomically.

        Nested scopes join the outermost one; only the outermost scope commits
        or rolls back.
        """

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    @abstractmethod
    def create_company(self, data: Payload | CompanyCreate) -> CompanyOut: ...

    @abstractmethod
    def get_company(self, company_id: int) -> CompanyOut | None: ...

    @abstractmethod
    def update_company(self, company_id: int, data: Payload) -> CompanyOut: ...

    @abstractmethod
    def increment_asset_counter(self, company_id: int) -> int:
        """Atomically advance the company's asset counter.

        Returns the value being issued (the counter before the increment).
        Raises ``NotFoundError`` for an unknown company.
        """

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    @abstractmethod
    def create_department(self, data: Payload | DepartmentCreate) -> DepartmentOut: ...

    @abstractmethod
    def get_department(self, department_id: int) -> DepartmentOut | None: ...

    @abstractmethod
    def list_departments(self, company_id: int) -> list[DepartmentOut]: ...

    @abstractmethod
    def update_department(self, department_id: int, data: Payload) -> DepartmentOut: ...

    @abstractmethod
    def adjust_department_counters(
        self, department_id: int, item_delta: int, capacity_delta: int
    ) -> DepartmentOut:
        """Add the deltas to the department caches in one write, clamping at 0."""

    # ------------------------------------------------------------------
    # Users & memberships
    # ------------------------------------------------------------------

    @abstractmethod
    def create_user(self, data: Payload | UserCreate) -> UserOut: ...

    @abstractmethod
    def get_user(self, user_id: int) -> UserOut | None: ...

    @abstractmethod
    def get_user_by_email(self, company_id: int, email: str) -> UserOut | None: ...

    @abstractmethod
    def list_users(self, company_id: int) -> list[UserOut]: ...

    @abstractmethod
    def assign_user_to_department(self, data: Payload | UserDepartmentCreate) -> UserDepartmentOut: ...

    @abstractmethod
    def list_user_departments(self, user_id: int) -> list[UserDepartmentOut]: ...

    # ------------------------------------------------------------------
    # Custom fields
    # ------------------------------------------------------------------

    @abstractmethod
    def create_custom_field(self, data: Payload | CustomFieldCreate) -> CustomFieldOut: ...

    @abstractmethod
    def list_custom_fields(self, company_id: int, department_id: int | None = None) -> list[CustomFieldOut]:
        """Tenant-wide fields when ``department_id`` is None, else that department's fields."""

    # ------------------------------------------------------------------
    # Inventory items
    # ------------------------------------------------------------------

    @abstractmethod
    def create_item(self, data: Payload | InventoryItemCreate, asset_id: str) -> InventoryItemOut: ...

    @abstractmethod
    def get_item(self, item_id: int) -> InventoryItemOut | None: ...

    @abstractmethod
    def list_items(self, company_id: int, department_id: int | None = None) -> list[InventoryItemOut]: ...

    @abstractmethod
    def update_item(self, item_id: int, data: Payload) -> InventoryItemOut: ...

    @abstractmethod
    def delete_item(self, item_id: int) -> None: ...

    # ------------------------------------------------------------------
    # Activity log (append-only)
    # ------------------------------------------------------------------

    @abstractmethod
    def create_activity_log(self, data: Payload | ActivityLogCreate) -> ActivityLogOut: ...

    @abstractmethod
    def list_activity_logs(self, company_id: int, limit: int | None = 10) -> list[ActivityLogOut]:
        """Newest first. ``limit=None`` returns the full history."""

    def close(self) -> None:
        """Release any underlying resources."""
