"""
In-memory entity store.

Tables are plain dicts keyed by integer ids with per-table counters, the same
shape the service had before a database was introduced. A re-entrant lock is
held for every call and for the whole of an outermost transaction; rollback
restores a snapshot taken when that transaction began.
"""
from __future__ import annotations

import copy
import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, TypeVar

from assetdesk.core.exceptions import ConflictError, NotFoundError
from assetdesk.models.models import utcnow
from assetdesk.models.schemas import (
    ActivityLogCreate,
    ActivityLogOut,
    CompanyCreate,
    CompanyOut,
    CompanyUpdate,
    CustomFieldCreate,
    CustomFieldOut,
    DepartmentCreate,
    DepartmentOut,
    DepartmentUpdate,
    InventoryItemCreate,
    InventoryItemOut,
    InventoryItemUpdate,
    UserCreate,
    UserDepartmentCreate,
    UserDepartmentOut,
    UserOut,
)
from assetdesk.store.base import EntityStore, Payload, changed_fields, validate_payload

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

_TABLES = ("companies", "departments", "users", "user_departments", "custom_fields", "items", "activity_logs")


def _locked(func: F) -> F:
    @wraps(func)
    def wrapper(self: MemoryEntityStore, *args, **kwargs):
        with self._lock:
            return func(self, *args, **kwargs)

    return wrapper  # type: ignore[return-value]


class MemoryEntityStore(EntityStore):
    """Dict-backed store with manually incremented ids."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._depth = 0
        self._tables: dict[str, dict[int, Any]] = {name: {} for name in _TABLES}
        self._next_ids: dict[str, int] = {name: 1 for name in _TABLES}

    def _insert(self, table: str, build: Callable[[int], Any]) -> Any:
        row_id = self._next_ids[table]
        self._next_ids[table] += 1
        row = build(row_id)
        self._tables[table][row_id] = row
        return row.model_copy(deep=True)

    def _require(self, table: str, row_id: int, entity: str) -> Any:
        row = self._tables[table].get(row_id)
        if row is None:
            raise NotFoundError(entity, row_id)
        return row

    @staticmethod
    def _copy(row):
        return row.model_copy(deep=True) if row is not None else None

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[MemoryEntityStore]:
        with self._lock:
            if self._depth:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            snapshot = (copy.deepcopy(self._tables), dict(self._next_ids))
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._tables, self._next_ids = snapshot
                logger.debug("Memory store transaction rolled back")
                raise
            finally:
                self._depth = 0

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    @_locked
    def create_company(self, data: Payload | CompanyCreate) -> CompanyOut:
        payload = validate_payload(CompanyCreate, data)
        return self._insert(
            "companies",
            lambda row_id: CompanyOut(
                id=row_id,
                current_asset_id=1,
                created_at=utcnow(),
                **payload.model_dump(),
            ),
        )

    @_locked
    def get_company(self, company_id: int) -> CompanyOut | None:
        return self._copy(self._tables["companies"].get(company_id))

    @_locked
    def update_company(self, company_id: int, data: Payload) -> CompanyOut:
        company = self._require("companies", company_id, "Company")
        fields = changed_fields(CompanyUpdate, data)
        updated = company.model_copy(update=fields)
        self._tables["companies"][company_id] = updated
        return self._copy(updated)

    @_locked
    def increment_asset_counter(self, company_id: int) -> int:
        company = self._require("companies", company_id, "Company")
        issued = company.current_asset_id
        self._tables["companies"][company_id] = company.model_copy(update={"current_asset_id": issued + 1})
        return issued

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    @_locked
    def create_department(self, data: Payload | DepartmentCreate) -> DepartmentOut:
        payload = validate_payload(DepartmentCreate, data)
        return self._insert(
            "departments",
            lambda row_id: DepartmentOut(id=row_id, created_at=utcnow(), **payload.model_dump()),
        )

    @_locked
    def get_department(self, department_id: int) -> DepartmentOut | None:
        return self._copy(self._tables["departments"].get(department_id))

    @_locked
    def list_departments(self, company_id: int) -> list[DepartmentOut]:
        return [self._copy(d) for d in self._tables["departments"].values() if d.company_id == company_id]

    @_locked
    def update_department(self, department_id: int, data: Payload) -> DepartmentOut:
        department = self._require("departments", department_id, "Department")
        fields = changed_fields(DepartmentUpdate, data)
        updated = department.model_copy(update={**fields, "updated_at": utcnow()})
        self._tables["departments"][department_id] = updated
        return self._copy(updated)

    @_locked
    def adjust_department_counters(self, department_id: int, item_delta: int, capacity_delta: int) -> DepartmentOut:
        department = self._require("departments", department_id, "Department")
        updated = department.model_copy(
            update={
                "item_count": max(0, department.item_count + item_delta),
                "capacity_used": max(0, department.capacity_used + capacity_delta),
                "updated_at": utcnow(),
            }
        )
        self._tables["departments"][department_id] = updated
        return self._copy(updated)

    # ------------------------------------------------------------------
    # Users & memberships
    # ------------------------------------------------------------------

    @_locked
    def create_user(self, data: Payload | UserCreate) -> UserOut:
        payload = validate_payload(UserCreate, data)
        if self.get_user_by_email(payload.company_id, payload.email):
            raise ConflictError("Email is already registered", field="email")
        row = self._insert(
            "users",
            lambda row_id: _UserRow(id=row_id, created_at=utcnow(), **payload.model_dump()),
        )
        return _public(row)

    @_locked
    def get_user(self, user_id: int) -> UserOut | None:
        row = self._tables["users"].get(user_id)
        return _public(row) if row is not None else None

    @_locked
    def get_user_by_email(self, company_id: int, email: str) -> UserOut | None:
        needle = email.strip().lower()
        for row in self._tables["users"].values():
            if row.company_id == company_id and row.email.lower() == needle:
                return _public(row)
        return None

    @_locked
    def list_users(self, company_id: int) -> list[UserOut]:
        return [_public(u) for u in self._tables["users"].values() if u.company_id == company_id]

    @_locked
    def assign_user_to_department(self, data: Payload | UserDepartmentCreate) -> UserDepartmentOut:
        payload = validate_payload(UserDepartmentCreate, data)
        for edge in self._tables["user_departments"].values():
            if edge.user_id == payload.user_id and edge.department_id == payload.department_id:
                raise ConflictError("User is already assigned to this department", field="department_id")
        return self._insert(
            "user_departments",
            lambda row_id: UserDepartmentOut(id=row_id, created_at=utcnow(), **payload.model_dump()),
        )

    @_locked
    def list_user_departments(self, user_id: int) -> list[UserDepartmentOut]:
        return [self._copy(e) for e in self._tables["user_departments"].values() if e.user_id == user_id]

    # ------------------------------------------------------------------
    # Custom fields
    # ------------------------------------------------------------------

    @_locked
    def create_custom_field(self, data: Payload | CustomFieldCreate) -> CustomFieldOut:
        payload = validate_payload(CustomFieldCreate, data)
        return self._insert(
            "custom_fields",
            lambda row_id: CustomFieldOut(id=row_id, created_at=utcnow(), **payload.model_dump()),
        )

    @_locked
    def list_custom_fields(self, company_id: int, department_id: int | None = None) -> list[CustomFieldOut]:
        return [
            self._copy(f)
            for f in self._tables["custom_fields"].values()
            if f.company_id == company_id and f.department_id == department_id
        ]

    # ------------------------------------------------------------------
    # Inventory items
    # ------------------------------------------------------------------

    @_locked
    def create_item(self, data: Payload | InventoryItemCreate, asset_id: str) -> InventoryItemOut:
        payload = validate_payload(InventoryItemCreate, data)
        for existing in self._tables["items"].values():
            if existing.company_id == payload.company_id and existing.asset_id == asset_id:
                raise ConflictError(f"Asset ID {asset_id} is already in use", field="asset_id")
        now = utcnow()
        return self._insert(
            "items",
            lambda row_id: InventoryItemOut(
                id=row_id,
                asset_id=asset_id,
                created_at=now,
                updated_at=now,
                **payload.model_dump(),
            ),
        )

    @_locked
    def get_item(self, item_id: int) -> InventoryItemOut | None:
        return self._copy(self._tables["items"].get(item_id))

    @_locked
    def list_items(self, company_id: int, department_id: int | None = None) -> list[InventoryItemOut]:
        return [
            self._copy(item)
            for item in self._tables["items"].values()
            if item.company_id == company_id and (department_id is None or item.department_id == department_id)
        ]

    @_locked
    def update_item(self, item_id: int, data: Payload) -> InventoryItemOut:
        item = self._require("items", item_id, "Item")
        fields = changed_fields(InventoryItemUpdate, data)
        updated = item.model_copy(update={**fields, "updated_at": utcnow()})
        self._tables["items"][item_id] = updated
        return self._copy(updated)

    @_locked
    def delete_item(self, item_id: int) -> None:
        self._require("items", item_id, "Item")
        del self._tables["items"][item_id]

    # ------------------------------------------------------------------
    # Activity log
    # ------------------------------------------------------------------

    @_locked
    def create_activity_log(self, data: Payload | ActivityLogCreate) -> ActivityLogOut:
        payload = validate_payload(ActivityLogCreate, data)
        return self._insert(
            "activity_logs",
            lambda row_id: ActivityLogOut(id=row_id, created_at=utcnow(), **payload.model_dump()),
        )

    @_locked
    def list_activity_logs(self, company_id: int, limit: int | None = 10) -> list[ActivityLogOut]:
        logs = sorted(
            (log for log in self._tables["activity_logs"].values() if log.company_id == company_id),
            key=lambda log: (log.created_at, log.id),
            reverse=True,
        )
        if limit is not None:
            logs = logs[: max(0, limit)]
        return [self._copy(log) for log in logs]


class _UserRow(UserOut):
    """Stored user row; the credential never leaves the store."""
    hashed_password: str | None = None


def _public(row: _UserRow) -> UserOut:
    return UserOut.model_validate(row.model_dump(exclude={"hashed_password"}))
