"""
Pydantic schemas shared by the entity store and the API layer.

``*Create``/``*Update`` schemas are the acceptance schema for both input
validation and store writes; ``*Out`` schemas are the records every store
back-end returns.
"""
from __future__ import annotations

import datetime as dt
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from assetdesk.models.models import (
    ActivityAction,
    CustomFieldType,
    ItemStatus,
    Role,
    SubscriptionStatus,
    SubscriptionTier,
)


def _as_utc(value: dt.datetime | None) -> dt.datetime | None:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=dt.timezone.utc)
    return value


UtcDatetime = Annotated[dt.datetime, AfterValidator(_as_utc)]

# ============================================================================
# Company Schemas
# ============================================================================

class CompanyCreate(BaseModel):
    name: str = Field(..., min_length=2, max_length=120)
    asset_id_pattern: str = Field(default="A-####", min_length=2, max_length=50)
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE


class CompanyRegistration(BaseModel):
    """Sign-up payload: the company plus its first admin user."""
    company_name: str = Field(..., min_length=2, max_length=120)
    asset_id_pattern: str | None = Field(None, min_length=2, max_length=50)
    admin_name: str = Field(..., min_length=1, max_length=120)
    admin_email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    password: str = Field(..., min_length=8, max_length=72)


class CompanyUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=2, max_length=120)
    asset_id_pattern: str | None = Field(None, min_length=2, max_length=50)

    @field_validator("name", "asset_id_pattern")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class CompanyOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    asset_id_pattern: str
    current_asset_id: int = 1
    subscription_tier: SubscriptionTier = SubscriptionTier.FREE
    subscription_status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    created_at: UtcDatetime | None = None


# ============================================================================
# Department Schemas
# ============================================================================

class DepartmentIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class DepartmentCreate(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1, max_length=100)
    item_count: int = Field(default=0, ge=0)
    capacity_used: int = Field(default=0, ge=0)


class DepartmentUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str | None = Field(None, min_length=1, max_length=100)
    item_count: int | None = Field(None, ge=0)
    capacity_used: int | None = Field(None, ge=0)

    @field_validator("name", "item_count", "capacity_used")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class DepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: str
    item_count: int = 0
    capacity_used: int = 0
    created_at: UtcDatetime | None = None
    updated_at: UtcDatetime | None = None


class DepartmentStat(BaseModel):
    id: int
    name: str
    item_count: int
    capacity_used: int


# ============================================================================
# User Schemas
# ============================================================================

class UserIn(BaseModel):
    """Admin-supplied user fields; the password is hashed before it reaches the store."""
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: Role = Role.EMPLOYEE
    password: str = Field(..., min_length=8, max_length=72)
    department_ids: list[int] = Field(default_factory=list)


class UserCreate(BaseModel):
    company_id: int
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., min_length=3, max_length=255, pattern=r"^[^@\s]+@[^@\s]+$")
    role: Role = Role.EMPLOYEE
    hashed_password: str | None = None

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.strip().lower()


class UserOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: str
    email: str
    role: Role
    created_at: UtcDatetime | None = None


class UserDepartmentCreate(BaseModel):
    user_id: int
    department_id: int


class UserDepartmentOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    department_id: int
    created_at: UtcDatetime | None = None


# ============================================================================
# Custom Field Schemas
# ============================================================================

class CustomFieldIn(BaseModel):
    department_id: int | None = None
    name: str = Field(..., min_length=1, max_length=100)
    field_type: CustomFieldType = CustomFieldType.TEXT
    options: list[str] | None = None
    required: bool = False


class CustomFieldCreate(BaseModel):
    company_id: int
    department_id: int | None = None
    name: str = Field(..., min_length=1, max_length=100)
    field_type: CustomFieldType = CustomFieldType.TEXT
    options: list[str] | None = None
    required: bool = False


class CustomFieldOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    department_id: int | None = None
    name: str
    field_type: CustomFieldType
    options: list[str] | None = None
    required: bool = False
    created_at: UtcDatetime | None = None


# ============================================================================
# Inventory Item Schemas
# ============================================================================

class InventoryItemIn(BaseModel):
    """Caller-supplied item fields; tenant and author come from the identity."""
    department_id: int
    name: str = Field(..., min_length=2, max_length=200)
    description: str | None = None
    quantity: int = Field(default=1, ge=1)
    unit_price: int | None = Field(None, ge=0)  # Minor currency units
    location: str | None = Field(None, max_length=200)
    purchase_date: dt.date | None = None
    status: ItemStatus = ItemStatus.ACTIVE
    custom_fields: dict[str, Any] | None = None


class InventoryItemCreate(InventoryItemIn):
    company_id: int
    created_by: int | None = None
    updated_by: int | None = None


class InventoryItemPatch(BaseModel):
    """Caller-supplied partial update. Identity and audit fields are not accepted."""
    model_config = ConfigDict(extra="forbid")

    department_id: int | None = None
    name: str | None = Field(None, min_length=2, max_length=200)
    description: str | None = None
    quantity: int | None = Field(None, ge=1)
    unit_price: int | None = Field(None, ge=0)
    location: str | None = Field(None, max_length=200)
    purchase_date: dt.date | None = None
    status: ItemStatus | None = None
    custom_fields: dict[str, Any] | None = None

    @field_validator("department_id", "name", "quantity", "status")
    @classmethod
    def not_null(cls, v):
        if v is None:
            raise ValueError("field cannot be null")
        return v


class InventoryItemUpdate(InventoryItemPatch):
    """Store-side update: the patch plus the author stamped by the service."""
    updated_by: int | None = None


class InventoryItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    department_id: int
    asset_id: str
    name: str
    description: str | None = None
    quantity: int = 1
    unit_price: int | None = None
    location: str | None = None
    purchase_date: dt.date | None = None
    status: ItemStatus = ItemStatus.ACTIVE
    custom_fields: dict[str, Any] | None = None
    created_by: int | None = None
    updated_by: int | None = None
    created_at: UtcDatetime
    updated_at: UtcDatetime


# ============================================================================
# Activity Log Schemas
# ============================================================================

class ActivityLogCreate(BaseModel):
    company_id: int
    action: ActivityAction
    item_id: int
    asset_id: str
    item_name: str
    department_name: str
    user_id: int
    user_name: str


class ActivityLogOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    action: ActivityAction
    item_id: int
    asset_id: str
    item_name: str
    department_name: str
    user_id: int
    user_name: str
    created_at: UtcDatetime


# ============================================================================
# Dashboard
# ============================================================================

class DashboardSummary(BaseModel):
    """Home-page figures. Item totals and ``department_stats`` cover the departments
    the caller can see; ``recent_activity`` is the company-wide feed."""
    total_items: int
    items_added_this_month: int
    low_stock_items: int
    department_count: int
    recent_activity: list[ActivityLogOut]
    department_stats: list[DepartmentStat]


class CompanyRegistrationOut(BaseModel):
    company: CompanyOut
    admin: UserOut
    departments: list[DepartmentOut]
