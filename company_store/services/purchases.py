"""Purchase registration and credit settlement."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from company_store.core.config import Settings, get_settings
from company_store.models import Employee, Purchase
from company_store.obs import PURCHASE_COUNTER
from company_store.services.catalog import quote
from company_store.services.employees import EmployeeService
from company_store.services.notifications import PurchaseBroadcaster
from company_store.services.reporting.period import ReportPeriod, resolve_period

logger = logging.getLogger(__name__)

_ZERO = Decimal("0.00")


class CreditSettlementConflict(RuntimeError):
    """Raised when the conditional balance update matched no row."""


@dataclass(slots=True, frozen=True)
class PurchasePayload:
    item: str
    qty: int
    use_credit: bool = False
    channel: str = "self"


@dataclass(slots=True, frozen=True)
class PurchaseResult:
    purchase: Purchase
    credit_used: Decimal
    amount_due: Decimal
    credit_balance: Decimal


@dataclass(slots=True, frozen=True)
class MonthlyPurchases:
    period: ReportPeriod
    purchases: list[Purchase]
    total: Decimal


class PurchaseService:
    """Registers purchases priced from the catalog at the time of purchase."""

    def __init__(
        self,
        session: Session,
        *,
        settings: Settings | None = None,
        broadcaster: PurchaseBroadcaster | None = None,
    ) -> None:
        self._session = session
        self._settings = settings or get_settings()
        self._broadcaster = broadcaster
        self._employees = EmployeeService(session)

    def _settle_credit(self, employee: Employee, total: Decimal) -> Decimal:
        """Debit ``min(balance, total)`` in one conditional UPDATE; returns the debit."""

        available = Decimal(employee.credit_balance or 0)
        debit = min(available, total)
        if debit <= 0:
            return _ZERO
        result = self._session.execute(
            update(Employee)
            .where(Employee.id == employee.id, Employee.credit_balance >= debit)
            .values(credit_balance=Employee.credit_balance - debit)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self._session.rollback()
            raise CreditSettlementConflict(
                f"Credit balance of '{employee.user_id}' changed during settlement"
            )
        return debit

    def register(self, *, user_id: str, payload: PurchasePayload) -> PurchaseResult:
        price = quote(payload.item, payload.qty)
        employee = self._employees.get_active(user_id)

        credit_used = self._settle_credit(employee, price.total) if payload.use_credit else _ZERO
        purchase = Purchase(
            user_id=employee.user_id,
            item=price.item.code,
            unit_price=price.unit_price,
            qty=price.quantity,
            total=price.total,
            credit_used=credit_used,
            channel=payload.channel,
            created_at=datetime.now(timezone.utc),
        )
        self._session.add(purchase)
        self._session.commit()
        self._session.refresh(purchase)
        self._session.refresh(employee)

        PURCHASE_COUNTER.labels(item=purchase.item, channel=payload.channel).inc()
        logger.info(
            "purchase registered",
            extra={
                "purchase_id": purchase.id,
                "item": purchase.item,
                "qty": purchase.qty,
                "channel": payload.channel,
                "credit_used": str(credit_used),
            },
        )
        if self._broadcaster is not None:
            self._broadcaster.publish(purchase, employee_name=employee.name)

        return PurchaseResult(
            purchase=purchase,
            credit_used=credit_used,
            amount_due=price.total - credit_used,
            credit_balance=Decimal(employee.credit_balance),
        )

    def list_month(self, *, user_id: str, reference: datetime | date | None = None) -> MonthlyPurchases:
        """Purchases of ``user_id`` in the month of ``reference``, newest first."""

        period = resolve_period(reference, tz=ZoneInfo(self._settings.report_timezone))
        statement = (
            select(Purchase)
            .where(
                Purchase.user_id == user_id,
                Purchase.created_at >= period.start.astimezone(timezone.utc),
                Purchase.created_at < period.end.astimezone(timezone.utc),
            )
            .order_by(Purchase.created_at.desc())
        )
        purchases = list(self._session.scalars(statement))
        total = sum((Decimal(item.total) for item in purchases), _ZERO)
        return MonthlyPurchases(period=period, purchases=purchases, total=total)


__all__ = [
    "CreditSettlementConflict",
    "MonthlyPurchases",
    "PurchasePayload",
    "PurchaseResult",
    "PurchaseService",
]
