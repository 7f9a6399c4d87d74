"""Pydantic schemas for employee resources."""
from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from company_store.models.employee import Company


class OnboardingRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    sector: str = Field(..., min_length=1, max_length=128)
    company: Company = Field(default=Company.FA)


class EmployeeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    name: str
    sector: str
    company: str
    active: bool
    credit_balance: Decimal


class KioskEmployee(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    user_id: str
    name: str
    sector: str
    company: str


__all__ = ["EmployeeRead", "KioskEmployee", "OnboardingRequest"]
