"""Pydantic schemas package."""

from .credit import CreditGrantRequest, CreditGrantResponse
from .employee import EmployeeRead, KioskEmployee, OnboardingRequest
from .purchase import (
    KioskPurchaseCreate,
    MonthlyPurchasesResponse,
    PurchaseCreate,
    PurchaseRead,
    PurchaseResponse,
)

__all__ = [
    "CreditGrantRequest",
    "CreditGrantResponse",
    "EmployeeRead",
    "KioskEmployee",
    "KioskPurchaseCreate",
    "MonthlyPurchasesResponse",
    "OnboardingRequest",
    "PurchaseCreate",
    "PurchaseRead",
    "PurchaseResponse",
]
