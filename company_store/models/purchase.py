"""Purchase ORM model."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from company_store.models.base import Base, CreatedAtMixin


class Purchase(CreatedAtMixin, Base):
    """Immutable purchase event with the unit price captured at purchase time."""

    __tablename__ = "purchases"
    __table_args__ = (
        CheckConstraint("qty > 0", name="ck_purchases_qty_positive"),
        Index("ix_purchases_created_at", "created_at"),
        Index("ix_purchases_user_id", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    item: Mapped[str] = mapped_column(String(64), nullable=False)
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    qty: Mapped[int] = mapped_column(Integer, nullable=False)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    credit_used: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0"))
    channel: Mapped[str] = mapped_column(String(16), nullable=False, default="self")


__all__ = ["Purchase"]
