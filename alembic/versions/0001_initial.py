from __future__ import annotations

import sqlalchemy as sa

from alembic import op

revision = "0001_initial"
down_revision = None
branch_labels = None
depends_on = None

ROLE = sa.Enum("admin", "employee", name="role")
SUBSCRIPTION_TIER = sa.Enum("free", "pro", "business", name="subscriptiontier")
SUBSCRIPTION_STATUS = sa.Enum("active", "trialing", "past_due", "canceled", name="subscriptionstatus")
ITEM_STATUS = sa.Enum("active", "low", "ordered", "discontinued", name="itemstatus")
ACTIVITY_ACTION = sa.Enum("added", "updated", "removed", "transferred", name="activityaction")
CUSTOM_FIELD_TYPE = sa.Enum("text", "number", "date", "select", "boolean", name="customfieldtype")


def upgrade() -> None:
    op.create_table(
        "company",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("asset_id_pattern", sa.String(length=50), nullable=False),
        sa.Column("current_asset_id", sa.Integer(), nullable=False, server_default="1"),
        sa.Column("subscription_tier", SUBSCRIPTION_TIER, nullable=False),
        sa.Column("subscription_status", SUBSCRIPTION_STATUS, nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_table(
        "department",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("company.id"), nullable=False),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("item_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("capacity_used", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
        sa.CheckConstraint("item_count >= 0", name="ck_department_item_count_nonneg"),
        sa.CheckConstraint("capacity_used >= 0", name="ck_department_capacity_nonneg"),
    )
    op.create_index("ix_department_company_id", "department", ["company_id"])
    op.create_table(
        "user",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("company.id"), nullable=False),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("role", ROLE, nullable=False),
        sa.Column("hashed_password", sa.String(length=255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("company_id", "email", name="uq_user_company_email"),
    )
    op.create_index("ix_user_company_id", "user", ["company_id"])
    op.create_table(
        "user_department",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("user.id"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("department.id"), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint("user_id", "department_id", name="uq_user_department"),
    )
    op.create_index("ix_user_department_user_id", "user_department", ["user_id"])
    op.create_index("ix_user_department_department_id", "user_department", ["department_id"])
    op.create_table(
        "custom_field",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("company.id"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("department.id"), nullable=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column("field_type", CUSTOM_FIELD_TYPE, nullable=False),
        sa.Column("options", sa.JSON(), nullable=True),
        sa.Column("required", sa.Boolean(), server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_custom_field_company_department", "custom_field", ["company_id", "department_id"])
    op.create_table(
        "inventory_item",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("company.id"), nullable=False),
        sa.Column("department_id", sa.Integer(), sa.ForeignKey("department.id"), nullable=False),
        sa.Column("asset_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("unit_price", sa.Integer(), nullable=True),
        sa.Column("location", sa.String(length=200), nullable=True),
        sa.Column("purchase_date", sa.Date(), nullable=True),
        sa.Column("status", ITEM_STATUS, nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("custom_fields", sa.JSON(), nullable=True),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("updated_by", sa.Integer(), sa.ForeignKey("user.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("quantity >= 1", name="ck_inventory_item_quantity_positive"),
    )
    op.create_index("ix_inventory_item_company_asset", "inventory_item", ["company_id", "asset_id"], unique=True)
    op.create_index("ix_inventory_item_company_department", "inventory_item", ["company_id", "department_id"])
    op.create_table(
        "activity_log",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("company_id", sa.Integer(), sa.ForeignKey("company.id"), nullable=False),
        sa.Column("action", ACTIVITY_ACTION, nullable=False),
        sa.Column("item_id", sa.Integer(), nullable=False),
        sa.Column("asset_id", sa.String(length=64), nullable=False),
        sa.Column("item_name", sa.String(length=200), nullable=False),
        sa.Column("department_name", sa.String(length=100), nullable=False),
        sa.Column("user_id", sa.Integer(), nullable=False),
        sa.Column("user_name", sa.String(length=120), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("ix_activity_log_company_created", "activity_log", ["company_id", "created_at"])


def downgrade() -> None:
    op.drop_index("ix_activity_log_company_created", table_name="activity_log")
    op.drop_table("activity_log")
    op.drop_index("ix_inventory_item_company_department", table_name="inventory_item")
    op.drop_index("ix_inventory_item_company_asset", table_name="inventory_item")
    op.drop_table("inventory_item")
    op.drop_index("ix_custom_field_company_department", table_name="custom_field")
    op.drop_table("custom_field")
    op.drop_index("ix_user_department_department_id", table_name="user_department")
    op.drop_index("ix_user_department_user_id", table_name="user_department")
    op.drop_table("user_department")
    op.drop_index("ix_user_company_id", table_name="user")
    op.drop_table("user")
    op.drop_index("ix_department_company_id", table_name="department")
    op.drop_table("department")
    op.drop_table("company")
    bind = op.get_bind()
    for enum in (CUSTOM_FIELD_TYPE, ACTIVITY_ACTION, ITEM_STATUS, SUBSCRIPTION_STATUS, SUBSCRIPTION_TIER, ROLE):
        enum.drop(bind, checkfirst=True)
