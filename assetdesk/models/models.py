"""
ORM models for the multi-tenant inventory tracker.

Every row below a Company carries a ``company_id``. Department counters
(``item_count``/``capacity_used``) are caches of live InventoryItem rows;
ActivityLog rows are append-only and hold denormalized names so history
survives later renames and deletes.
"""
from __future__ import annotations

import datetime as dt
import enum

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    Enum,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.sql import func

from assetdesk.db.base_class import Base


def utcnow() -> dt.datetime:
    return dt.datetime.now(dt.timezone.utc)


def _values(enum_cls: type[enum.Enum]) -> list[str]:
    return [e.value for e in enum_cls]


class Role(str, enum.Enum):
    ADMIN = "admin"
    EMPLOYEE = "employee"


class SubscriptionTier(str, enum.Enum):
    FREE = "free"
    PRO = "pro"
    BUSINESS = "business"


class SubscriptionStatus(str, enum.Enum):
    ACTIVE = "active"
    TRIALING = "trialing"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class ItemStatus(str, enum.Enum):
    ACTIVE = "active"
    LOW = "low"
    ORDERED = "ordered"
    DISCONTINUED = "discontinued"


class ActivityAction(str, enum.Enum):
    ADDED = "added"
    UPDATED = "updated"
    REMOVED = "removed"
    TRANSFERRED = "transferred"  # Department changed by an update


class CustomFieldType(str, enum.Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    SELECT = "select"
    BOOLEAN = "boolean"


class Company(Base):
    """Tenant account. Owns the asset-id pattern and its counter."""
    __tablename__ = "company"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    asset_id_pattern: Mapped[str] = mapped_column(String(50), nullable=False, default="A-####")
    current_asset_id: Mapped[int] = mapped_column(Integer, nullable=False, default=1, server_default="1")
    subscription_tier: Mapped[SubscriptionTier] = mapped_column(
        Enum(SubscriptionTier, values_callable=_values),
        default=SubscriptionTier.FREE,
        nullable=False,
    )
    subscription_status: Mapped[SubscriptionStatus] = mapped_column(
        Enum(SubscriptionStatus, values_callable=_values),
        default=SubscriptionStatus.ACTIVE,
        nullable=False,
    )
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    departments: Mapped[list[Department]] = relationship("Department", back_populates="company")
    users: Mapped[list[User]] = relationship("User", back_populates="company")

    def __repr__(self) -> str:
        return f"<Company(id={self.id}, name='{self.name}')>"


class Department(Base):
    __tablename__ = "department"
    __table_args__ = (
        CheckConstraint("item_count >= 0", name="ck_department_item_count_nonneg"),
        CheckConstraint("capacity_used >= 0", name="ck_department_capacity_nonneg"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("company.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    item_count: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    capacity_used: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )
    updated_at: Mapped[dt.datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    company: Mapped[Company] = relationship("Company", back_populates="departments")

    def __repr__(self) -> str:
        return f"<Department(id={self.id}, name='{self.name}', items={self.item_count})>"


class User(Base):
    __tablename__ = "user"
    __table_args__ = (
        UniqueConstraint("company_id", "email", name="uq_user_company_email"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("company.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)  # Stored lower-cased
    role: Mapped[Role] = mapped_column(Enum(Role, values_callable=_values), nullable=False, default=Role.EMPLOYEE)
    hashed_password: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )

    company: Mapped[Company] = relationship("Company", back_populates="users")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, role='{self.role}')>"


class UserDepartment(Base):
    """Membership edge granting an employee access to one department."""
    __tablename__ = "user_department"
    __table_args__ = (
        UniqueConstraint("user_id", "department_id", name="uq_user_department"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    department_id: Mapped[int] = mapped_column(ForeignKey("department.id"), nullable=False, index=True)
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )


class CustomField(Base):
    __tablename__ = "custom_field"
    __table_args__ = (
        Index("ix_custom_field_company_department", "company_id", "department_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("company.id"), nullable=False)
    department_id: Mapped[int | None] = mapped_column(ForeignKey("department.id"), nullable=True)  # NULL = tenant-wide
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    field_type: Mapped[CustomFieldType] = mapped_column(
        Enum(CustomFieldType, values_callable=_values),
        nullable=False,
        default=CustomFieldType.TEXT,
    )
    options: Mapped[list | None] = mapped_column(JSON, nullable=True)
    required: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false")
    created_at: Mapped[dt.datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    )


class InventoryItem(Base):
    __tablename__ = "inventory_item"
    __table_args__ = (
        Index("ix_inventory_item_company_asset", "company_id", "asset_id", unique=True),
        Index("ix_inventory_item_company_department", "company_id", "department_id"),
        CheckConstraint("quantity >= 1", name="ck_inventory_item_quantity_positive"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("company.id"), nullable=False)
    department_id: Mapped[int] = mapped_column(ForeignKey("department.id"), nullable=False)
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    unit_price: Mapped[int | None] = mapped_column(Integer, nullable=True)  # Minor currency units
    location: Mapped[str | None] = mapped_column(String(200), nullable=True)
    purchase_date: Mapped[dt.date | None] = mapped_column(Date, nullable=True)
    status: Mapped[ItemStatus] = mapped_column(
        Enum(ItemStatus, values_callable=_values),
        nullable=False,
        default=ItemStatus.ACTIVE,
    )
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    custom_fields: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)
    updated_by: Mapped[int | None] = mapped_column(ForeignKey("user.id"), nullable=True)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)

    def __repr__(self) -> str:
        return f"<InventoryItem(id={self.id}, asset_id='{self.asset_id}')>"


class ActivityLog(Base):
    """Immutable audit entry. Item/department/user names are snapshots."""
    __tablename__ = "activity_log"
    __table_args__ = (
        Index("ix_activity_log_company_created", "company_id", "created_at"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    company_id: Mapped[int] = mapped_column(ForeignKey("company.id"), nullable=False)
    action: Mapped[ActivityAction] = mapped_column(Enum(ActivityAction, values_callable=_values), nullable=False)
    item_id: Mapped[int] = mapped_column(Integer, nullable=False)  # No FK: the item may be deleted
    asset_id: Mapped[str] = mapped_column(String(64), nullable=False)
    item_name: Mapped[str] = mapped_column(String(200), nullable=False)
    department_name: Mapped[str] = mapped_column(String(100), nullable=False)
    user_id: Mapped[int] = mapped_column(Integer, nullable=False)
    user_name: Mapped[str] = mapped_column(String(120), nullable=False)
    created_at: Mapped[dt.datetime] = mapped_column(DateTime(timezone=True), default=utcnow, nullable=False)
