"""Credit ledger ORM model."""
from __future__ import annotations

import uuid
from decimal import Decimal

from sqlalchemy import CheckConstraint, Index, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from company_store.models.base import Base, CreatedAtMixin


class CreditLedgerEntry(CreatedAtMixin, Base):
    """Append-only record of an administrator credit grant.

    Credit consumed by purchases is debited from ``Employee.credit_balance``
    directly and never appears here.
    """

    __tablename__ = "credit_ledger"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_credit_ledger_amount_positive"),
        Index("ix_credit_ledger_created_at", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    note: Mapped[str | None] = mapped_column(String(255))
    granted_by: Mapped[str | None] = mapped_column(String(64))


__all__ = ["CreditLedgerEntry"]
