"""Pydantic schemas for credit grants."""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field


class CreditGrantRequest(BaseModel):
    user_id: str = Field(..., min_length=1, max_length=64)
    amount: Decimal = Field(..., gt=Decimal("0"), max_digits=12, decimal_places=2)
    note: str | None = Field(default=None, max_length=255)


class CreditGrantResponse(BaseModel):
    id: str
    user_id: str
    amount: Decimal
    note: str | None
    credit_balance: Decimal
    created_at: datetime


__all__ = ["CreditGrantRequest", "CreditGrantResponse"]
