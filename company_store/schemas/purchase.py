"""Pydantic schemas for purchase resources."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from company_store.models import Purchase
from company_store.services.catalog import item_label
from company_store.services.purchases import PurchaseResult


class PurchaseCreate(BaseModel):
    item: str = Field(..., min_length=1, max_length=64)
    qty: int = Field(default=1, ge=1, le=100)
    use_credit: bool = False


class KioskPurchaseCreate(PurchaseCreate):
    user_id: str = Field(..., min_length=1, max_length=64)
    pin: str = Field(..., min_length=4, max_length=6)


class PurchaseRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    item: str
    item_label: str
    unit_price: Decimal
    qty: int
    total: Decimal
    credit_used: Decimal
    channel: str
    created_at: datetime

    @classmethod
    def from_model(cls, purchase: Purchase) -> "PurchaseRead":
        return cls(
            id=purchase.id,
            item=purchase.item,
            item_label=item_label(purchase.item),
            unit_price=purchase.unit_price,
            qty=purchase.qty,
            total=purchase.total,
            credit_used=purchase.credit_used,
            channel=purchase.channel,
            created_at=purchase.created_at,
        )


class PurchaseResponse(PurchaseRead):
    amount_due: Decimal
    credit_balance: Decimal

    @classmethod
    def from_result(cls, result: PurchaseResult) -> "PurchaseResponse":
        base = PurchaseRead.from_model(result.purchase)
        return cls(
            **base.model_dump(),
            amount_due=result.amount_due,
            credit_balance=result.credit_balance,
        )


class MonthlyPurchasesResponse(BaseModel):
    period: str
    total: Decimal
    purchases: list[PurchaseRead]


__all__ = [
    "KioskPurchaseCreate",
    "MonthlyPurchasesResponse",
    "PurchaseCreate",
    "PurchaseRead",
    "PurchaseResponse",
]
