"""
SQLAlchemy-backed entity store.

Writes outside ``transaction()`` commit immediately; inside a transaction they
only flush, and the outermost scope commits or rolls back. Shared counters
(company asset counter, department caches) are changed with single UPDATE
statements so concurrent requests serialize on the database row lock instead
of on any in-process state.
"""
from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from assetdesk.core.exceptions import ConflictError, NotFoundError
from assetdesk.models.models import (
    ActivityLog,
    Company,
    CustomField,
    Department,
    InventoryItem,
    User,
    UserDepartment,
    utcnow,
)
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


def _clamped(column, delta: int):
    """``column + delta`` floored at zero, evaluated by the database."""
    expr = column + delta
    return case((expr < 0, 0), else_=expr)


class SqlEntityStore(EntityStore):
    """Entity store over a SQLAlchemy session."""

    def __init__(self, db: Session):
        """
        Args:
            db: SQLAlchemy session; the store does not own its lifecycle unless closed.
        """
        self._db = db
        self._depth = 0

    @property
    def db(self) -> Session:
        """Database session accessor."""
        return self._db

    def _get(self, model, row_id: int):
        # Counter columns are changed with core UPDATEs, so never trust the identity map
        return self._db.get(model, row_id, populate_existing=True)

    def _write(self, conflict_message: str | None = None, conflict_field: str | None = None) -> None:
        try:
            if self._depth:
                self._db.flush()
            else:
                self._db.commit()
        except IntegrityError as exc:
            self._db.rollback()
            logger.warning("Integrity error during write: %s", exc.orig)
            raise ConflictError(conflict_message or "Conflicting update, please retry", field=conflict_field) from exc

    # ------------------------------------------------------------------
    # Transactions
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[SqlEntityStore]:
        if self._depth:
            self._depth += 1
            try:
                yield self
            finally:
                self._depth -= 1
            return

        self._depth = 1
        try:
            yield self
            self._depth = 0
            self._db.commit()
        except Exception:
            self._db.rollback()
            raise
        finally:
            self._depth = 0

    def close(self) -> None:
        self._db.close()

    # ------------------------------------------------------------------
    # Companies
    # ------------------------------------------------------------------

    def create_company(self, data: Payload | CompanyCreate) -> CompanyOut:
        payload = validate_payload(CompanyCreate, data)
        company = Company(current_asset_id=1, **payload.model_dump())
        self._db.add(company)
        self._write()
        return CompanyOut.model_validate(company)

    def get_company(self, company_id: int) -> CompanyOut | None:
        company = self._get(Company, company_id)
        return CompanyOut.model_validate(company) if company else None

    def update_company(self, company_id: int, data: Payload) -> CompanyOut:
        company = self._get(Company, company_id)
        if not company:
            raise NotFoundError("Company", company_id)
        for key, value in changed_fields(CompanyUpdate, data).items():
            setattr(company, key, value)
        self._write()
        return CompanyOut.model_validate(company)

    def increment_asset_counter(self, company_id: int) -> int:
        stmt = (
            update(Company)
            .where(Company.id == company_id)
            .values(current_asset_id=Company.current_asset_id + 1)
            .returning(Company.current_asset_id)
            .execution_options(synchronize_session=False)
        )
        new_value = self._db.execute(stmt).scalar_one_or_none()
        if new_value is None:
            raise NotFoundError("Company", company_id)
        self._write()
        return new_value - 1

    # ------------------------------------------------------------------
    # Departments
    # ------------------------------------------------------------------

    def create_department(self, data: Payload | DepartmentCreate) -> DepartmentOut:
        payload = validate_payload(DepartmentCreate, data)
        department = Department(**payload.model_dump())
        self._db.add(department)
        self._write()
        return DepartmentOut.model_validate(department)

    def get_department(self, department_id: int) -> DepartmentOut | None:
        department = self._get(Department, department_id)
        return DepartmentOut.model_validate(department) if department else None

    def list_departments(self, company_id: int) -> list[DepartmentOut]:
        rows = self._db.scalars(
            select(Department)
            .where(Department.company_id == company_id)
            .order_by(Department.id)
            .execution_options(populate_existing=True)
        ).all()
        return [DepartmentOut.model_validate(d) for d in rows]

    def update_department(self, department_id: int, data: Payload) -> DepartmentOut:
        department = self._get(Department, department_id)
        if not department:
            raise NotFoundError("Department", department_id)
        for key, value in changed_fields(DepartmentUpdate, data).items():
            setattr(department, key, value)
        department.updated_at = utcnow()
        self._write()
        return DepartmentOut.model_validate(department)

    def adjust_department_counters(self, department_id: int, item_delta: int, capacity_delta: int) -> DepartmentOut:
        stmt = (
            update(Department)
            .where(Department.id == department_id)
            .values(
                item_count=_clamped(Department.item_count, item_delta),
                capacity_used=_clamped(Department.capacity_used, capacity_delta),
                updated_at=utcnow(),
            )
            .execution_options(synchronize_session=False)
        )
        result = self._db.execute(stmt)
        if result.rowcount == 0:
            raise NotFoundError("Department", department_id)
        self._write()
        return self.get_department(department_id)  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Users & memberships
    # ------------------------------------------------------------------

    def create_user(self, data: Payload | UserCreate) -> UserOut:
        payload = validate_payload(UserCreate, data)
        if self.get_user_by_email(payload.company_id, payload.email):
            raise ConflictError("Email is already registered", field="email")
        user = User(**payload.model_dump())
        self._db.add(user)
        self._write("Email is already registered", "email")
        return UserOut.model_validate(user)

    def get_user(self, user_id: int) -> UserOut | None:
        user = self._get(User, user_id)
        return UserOut.model_validate(user) if user else None

    def get_user_by_email(self, company_id: int, email: str) -> UserOut | None:
        user = self._db.scalar(
            select(User).where(
                User.company_id == company_id,
                func.lower(User.email) == email.strip().lower(),
            )
        )
        return UserOut.model_validate(user) if user else None

    def list_users(self, company_id: int) -> list[UserOut]:
        rows = self._db.scalars(select(User).where(User.company_id == company_id).order_by(User.id)).all()
        return [UserOut.model_validate(u) for u in rows]

    def assign_user_to_department(self, data: Payload | UserDepartmentCreate) -> UserDepartmentOut:
        payload = validate_payload(UserDepartmentCreate, data)
        existing = self._db.scalar(
            select(UserDepartment).where(
                UserDepartment.user_id == payload.user_id,
                UserDepartment.department_id == payload.department_id,
            )
        )
        if existing:
            raise ConflictError("User is already assigned to this department", field="department_id")
        edge = UserDepartment(**payload.model_dump())
        self._db.add(edge)
        self._write("User is already assigned to this department", "department_id")
        return UserDepartmentOut.model_validate(edge)

    def list_user_departments(self, user_id: int) -> list[UserDepartmentOut]:
        rows = self._db.scalars(select(UserDepartment).where(UserDepartment.user_id == user_id)).all()
        return [UserDepartmentOut.model_validate(e) for e in rows]

    # ------------------------------------------------------------------
    # Custom fields
    # ------------------------------------------------------------------

    def create_custom_field(self, data: Payload | CustomFieldCreate) -> CustomFieldOut:
        payload = validate_payload(CustomFieldCreate, data)
        field = CustomField(**payload.model_dump())
        self._db.add(field)
        self._write()
        return CustomFieldOut.model_validate(field)

    def list_custom_fields(self, company_id: int, department_id: int | None = None) -> list[CustomFieldOut]:
        query = select(CustomField).where(CustomField.company_id == company_id)
        if department_id is None:
            query = query.where(CustomField.department_id.is_(None))
        else:
            query = query.where(CustomField.department_id == department_id)
        rows = self._db.scalars(query.order_by(CustomField.id)).all()
        return [CustomFieldOut.model_validate(f) for f in rows]

    # ------------------------------------------------------------------
    # Inventory items
    # ------------------------------------------------------------------

    def create_item(self, data: Payload | InventoryItemCreate, asset_id: str) -> InventoryItemOut:
        payload = validate_payload(InventoryItemCreate, data)
        now = utcnow()
        item = InventoryItem(asset_id=asset_id, created_at=now, updated_at=now, **payload.model_dump())
        self._db.add(item)
        self._write(f"Asset ID {asset_id} is already in use", "asset_id")
        return InventoryItemOut.model_validate(item)

    def get_item(self, item_id: int) -> InventoryItemOut | None:
        item = self._get(InventoryItem, item_id)
        return InventoryItemOut.model_validate(item) if item else None

    def list_items(self, company_id: int, department_id: int | None = None) -> list[InventoryItemOut]:
        query = select(InventoryItem).where(InventoryItem.company_id == company_id)
        if department_id is not None:
            query = query.where(InventoryItem.department_id == department_id)
        rows = self._db.scalars(query.order_by(InventoryItem.id)).all()
        return [InventoryItemOut.model_validate(i) for i in rows]

    def update_item(self, item_id: int, data: Payload) -> InventoryItemOut:
        item = self._get(InventoryItem, item_id)
        if not item:
            raise NotFoundError("Item", item_id)
        fields: dict[str, Any] = changed_fields(InventoryItemUpdate, data)
        for key, value in fields.items():
            setattr(item, key, value)
        item.updated_at = utcnow()
        self._write()
        return InventoryItemOut.model_validate(item)

    def delete_item(self, item_id: int) -> None:
        item = self._get(InventoryItem, item_id)
        if not item:
            raise NotFoundError("Item", item_id)
        self._db.delete(item)
        self._write()

    # ------------------------------------------------------------------
    # Activity log
    # ------------------------------------------------------------------

    def create_activity_log(self, data: Payload | ActivityLogCreate) -> ActivityLogOut:
        payload = validate_payload(ActivityLogCreate, data)
        entry = ActivityLog(created_at=utcnow(), **payload.model_dump())
        self._db.add(entry)
        self._write()
        return ActivityLogOut.model_validate(entry)

    def list_activity_logs(self, company_id: int, limit: int | None = 10) -> list[ActivityLogOut]:
        query = (
            select(ActivityLog)
            .where(ActivityLog.company_id == company_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
        )
        if limit is not None:
            query = query.limit(max(0, limit))
        return [ActivityLogOut.model_validate(log) for log in self._db.scalars(query).all()]
