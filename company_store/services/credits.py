"""Administrator credit issuance."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import update
from sqlalchemy.orm import Session

from company_store.models import CreditLedgerEntry, Employee
from company_store.obs import CREDIT_GRANTED_COUNTER
from company_store.services.employees import EmployeeService

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class CreditGrantPayload:
    user_id: str
    amount: Decimal
    note: str | None = None


@dataclass(slots=True, frozen=True)
class CreditGrantResult:
    entry: CreditLedgerEntry
    credit_balance: Decimal


class CreditService:
    def __init__(self, session: Session) -> None:
        self._session = session

    def grant(self, *, payload: CreditGrantPayload, granted_by: str) -> CreditGrantResult:
        """Append a ledger grant and raise the employee balance in the same transaction."""

        amount = Decimal(payload.amount).quantize(Decimal("0.01"))
        if amount <= 0:
            raise ValueError("credit amount must be positive")
        employee = EmployeeService(self._session).get_active(payload.user_id)

        entry = CreditLedgerEntry(
            user_id=employee.user_id,
            amount=amount,
            note=(payload.note or "").strip() or None,
            granted_by=granted_by,
            created_at=datetime.now(timezone.utc),
        )
        self._session.add(entry)
        self._session.execute(
            update(Employee)
            .where(Employee.id == employee.id)
            .values(credit_balance=Employee.credit_balance + amount)
            .execution_options(synchronize_session=False)
        )
        self._session.commit()
        self._session.refresh(entry)
        self._session.refresh(employee)

        CREDIT_GRANTED_COUNTER.inc(float(amount))
        logger.info(
            "credit granted",
            extra={"user_id": employee.user_id, "amount": str(amount), "granted_by": granted_by},
        )
        return CreditGrantResult(entry=entry, credit_balance=Decimal(employee.credit_balance))


__all__ = ["CreditGrantPayload", "CreditGrantResult", "CreditService"]
