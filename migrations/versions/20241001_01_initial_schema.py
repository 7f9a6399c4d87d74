"""Initial schema for the company store."""
from __future__ import annotations

from collections.abc import Iterable

import sqlalchemy as sa
from alembic import op

revision = "20241001_01"
down_revision = None
branch_labels = None
depends_on: Iterable[str] | None = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:  # noqa: D401
    """Create employees, profiles, purchases and the credit ledger."""

    op.create_table(
        "employees",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("sector", sa.String(length=128), nullable=False),
        sa.Column("company", sa.String(length=8), nullable=False, server_default="FA"),
        sa.Column("active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("credit_balance", sa.Numeric(12, 2), nullable=False, server_default="0"),
        *_timestamps(),
        sa.CheckConstraint("credit_balance >= 0", name="ck_employees_credit_balance_non_negative"),
        sa.UniqueConstraint("user_id", name="uq_employees_user_id"),
    )
    op.create_index("ix_employees_company_active", "employees", ["company", "active"])

    op.create_table(
        "profiles",
        sa.Column("user_id", sa.String(length=64), primary_key=True),
        sa.Column(
            "employee_id",
            sa.String(length=36),
            sa.ForeignKey("employees.id", name="fk_profiles_employee_id_employees", ondelete="SET NULL"),
            nullable=True,
        ),
        sa.Column("is_admin", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("is_kiosk", sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )

    op.create_table(
        "purchases",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("item", sa.String(length=64), nullable=False),
        sa.Column("unit_price", sa.Numeric(12, 2), nullable=False),
        sa.Column("qty", sa.Integer(), nullable=False),
        sa.Column("total", sa.Numeric(12, 2), nullable=False),
        sa.Column("credit_used", sa.Numeric(12, 2), nullable=False, server_default="0"),
        sa.Column("channel", sa.String(length=16), nullable=False, server_default="self"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("qty > 0", name="ck_purchases_qty_positive"),
    )
    op.create_index("ix_purchases_created_at", "purchases", ["created_at"])
    op.create_index("ix_purchases_user_id", "purchases", ["user_id"])

    op.create_table(
        "credit_ledger",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("user_id", sa.String(length=64), nullable=False),
        sa.Column("amount", sa.Numeric(12, 2), nullable=False),
        sa.Column("note", sa.String(length=255), nullable=True),
        sa.Column("granted_by", sa.String(length=64), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.CheckConstraint("amount > 0", name="ck_credit_ledger_amount_positive"),
    )
    op.create_index("ix_credit_ledger_created_at", "credit_ledger", ["created_at"])
    op.create_index("ix_credit_ledger_user_id", "credit_ledger", ["user_id"])


def downgrade() -> None:  # noqa: D401
    """Drop all store tables."""

    op.drop_index("ix_credit_ledger_user_id", table_name="credit_ledger")
    op.drop_index("ix_credit_ledger_created_at", table_name="credit_ledger")
    op.drop_table("credit_ledger")

    op.drop_index("ix_purchases_user_id", table_name="purchases")
    op.drop_index("ix_purchases_created_at", table_name="purchases")
    op.drop_table("purchases")

    op.drop_table("profiles")

    op.drop_index("ix_employees_company_active", table_name="employees")
    op.drop_table("employees")
