"""Employee ORM model."""
from __future__ import annotations

import enum
import uuid
from decimal import Decimal

from sqlalchemy import Boolean, CheckConstraint, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from company_store.models.base import Base, TimestampMixin


class Company(str, enum.Enum):
    FA = "FA"
    BF = "BF"


class Employee(TimestampMixin, Base):
    """Store customer identified by the external identity key ``user_id``."""

    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("credit_balance >= 0", name="ck_employees_credit_balance_non_negative"),
        Index("ix_employees_company_active", "company", "active"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    sector: Mapped[str] = mapped_column(String(128), nullable=False)
    company: Mapped[str] = mapped_column(String(8), nullable=False, default=Company.FA.value)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    credit_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))


__all__ = ["Company", "Employee"]
