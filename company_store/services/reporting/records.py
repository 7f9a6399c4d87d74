"""Backend-agnostic records flowing through the monthly report pipeline."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass(slots=True, frozen=True)
class EmployeeRecord:
    owner_id: str
    display_name: str
    sector: str
    company: str
    active: bool
    credit_balance: Decimal


@dataclass(slots=True, frozen=True)
class PurchaseRecord:
    """Purchase as persisted; ``total`` is the stored snapshot, never recomputed."""

    id: str
    owner_id: str
    item_code: str
    unit_price: Decimal
    quantity: int
    total: Decimal
    occurred_at: datetime


@dataclass(slots=True, frozen=True)
class CreditGrantRecord:
    id: str
    owner_id: str
    amount: Decimal
    note: str | None
    occurred_at: datetime


@dataclass(slots=True, frozen=True)
class Identity:
    display_name: str
    sector: str
    company: str


@dataclass(slots=True, frozen=True)
class EnrichedPurchase:
    """Purchase joined with its owner's identity; ``identity`` is None when unresolved."""

    purchase: PurchaseRecord
    identity: Identity | None

    @property
    def company(self) -> str | None:
        return self.identity.company if self.identity else None


@dataclass(slots=True, frozen=True)
class EnrichedGrant:
    grant: CreditGrantRecord
    identity: Identity | None

    @property
    def company(self) -> str | None:
        return self.identity.company if self.identity else None


@dataclass(slots=True, frozen=True)
class SummaryRow:
    owner_id: str
    display_name: str
    sector: str
    company: str
    total_month: Decimal


__all__ = [
    "CreditGrantRecord",
    "EmployeeRecord",
    "EnrichedGrant",
    "EnrichedPurchase",
    "Identity",
    "PurchaseRecord",
    "SummaryRow",
]
