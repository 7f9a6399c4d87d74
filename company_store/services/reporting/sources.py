"""Data sources feeding the report pipeline."""
from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.orm import Session

from company_store.models import CreditLedgerEntry, Employee, Purchase
from company_store.services.hosted import HostedServiceClient
from company_store.services.reporting.period import ReportPeriod
from company_store.services.reporting.records import CreditGrantRecord, EmployeeRecord, PurchaseRecord


class StoreDataSource(Protocol):
    """Read-only queries the report pipeline runs against the store data."""

    def list_employees(self, *, active: bool | None = None) -> list[EmployeeRecord]:
        """Return employees, optionally restricted by ``active`` status."""

    def list_purchases(self, period: ReportPeriod) -> list[PurchaseRecord]:
        """Return purchases with ``period.start <= occurred_at < period.end``, oldest first."""

    def list_credit_ledger(self, period: ReportPeriod) -> list[CreditGrantRecord]:
        """Return credit grants inside ``period``, oldest first."""


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _parse_timestamp(value: Any) -> datetime:
    if isinstance(value, datetime):
        return _as_utc(value)
    return _as_utc(datetime.fromisoformat(str(value)))


def _decimal(value: Any) -> Decimal:
    return Decimal(str(value if value is not None else 0))


class SqlStoreDataSource:
    """Reads store tables directly through a SQLAlchemy session."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_employees(self, *, active: bool | None = None) -> list[EmployeeRecord]:
        statement = select(Employee).order_by(Employee.name, Employee.user_id)
        if active is not None:
            statement = statement.where(Employee.active.is_(active))
        return [
            EmployeeRecord(
                owner_id=employee.user_id,
                display_name=employee.name,
                sector=employee.sector,
                company=employee.company,
                active=employee.active,
                credit_balance=_decimal(employee.credit_balance),
            )
            for employee in self._session.scalars(statement)
        ]

    def list_purchases(self, period: ReportPeriod) -> list[PurchaseRecord]:
        start, end = _as_utc(period.start), _as_utc(period.end)
        statement = (
            select(Purchase)
            .where(Purchase.created_at >= start, Purchase.created_at < end)
            .order_by(Purchase.created_at, Purchase.id)
        )
        return [
            PurchaseRecord(
                id=purchase.id,
                owner_id=purchase.user_id,
                item_code=purchase.item,
                unit_price=_decimal(purchase.unit_price),
                quantity=int(purchase.qty),
                total=_decimal(purchase.total),
                occurred_at=_as_utc(purchase.created_at),
            )
            for purchase in self._session.scalars(statement)
        ]

    def list_credit_ledger(self, period: ReportPeriod) -> list[CreditGrantRecord]:
        start, end = _as_utc(period.start), _as_utc(period.end)
        statement = (
            select(CreditLedgerEntry)
            .where(CreditLedgerEntry.created_at >= start, CreditLedgerEntry.created_at < end)
            .order_by(CreditLedgerEntry.created_at, CreditLedgerEntry.id)
        )
        return [
            CreditGrantRecord(
                id=entry.id,
                owner_id=entry.user_id,
                amount=_decimal(entry.amount),
                note=entry.note,
                occurred_at=_as_utc(entry.created_at),
            )
            for entry in self._session.scalars(statement)
        ]


class HostedStoreDataSource:
    """Reads store tables through the hosted service REST API."""

    def __init__(self, client: HostedServiceClient) -> None:
        self._client = client

    @staticmethod
    def _range(period: ReportPeriod) -> list[tuple[str, str]]:
        return [
            ("created_at", f"gte.{_as_utc(period.start).isoformat()}"),
            ("created_at", f"lt.{_as_utc(period.end).isoformat()}"),
            ("order", "created_at.asc,id.asc"),
        ]

    def list_employees(self, *, active: bool | None = None) -> list[EmployeeRecord]:
        params = [
            ("select", "user_id,name,sector,company,active,credit_balance"),
            ("order", "name.asc"),
        ]
        if active is not None:
            params.append(("active", f"eq.{str(active).lower()}"))
        return [
            EmployeeRecord(
                owner_id=str(row["user_id"]),
                display_name=row.get("name") or "",
                sector=row.get("sector") or "",
                company=row.get("company") or "",
                active=bool(row.get("active", True)),
                credit_balance=_decimal(row.get("credit_balance")),
            )
            for row in self._client.select("employees", params)
        ]

    def list_purchases(self, period: ReportPeriod) -> list[PurchaseRecord]:
        params = [("select", "id,user_id,item,unit_price,qty,total,created_at"), *self._range(period)]
        return [
            PurchaseRecord(
                id=str(row["id"]),
                owner_id=str(row["user_id"]),
                item_code=row["item"],
                unit_price=_decimal(row["unit_price"]),
                quantity=int(row["qty"]),
                total=_decimal(row["total"]),
                occurred_at=_parse_timestamp(row["created_at"]),
            )
            for row in self._client.select("purchases", params)
        ]

    def list_credit_ledger(self, period: ReportPeriod) -> list[CreditGrantRecord]:
        params = [("select", "id,user_id,amount,note,created_at"), *self._range(period)]
        return [
            CreditGrantRecord(
                id=str(row["id"]),
                owner_id=str(row["user_id"]),
                amount=_decimal(row["amount"]),
                note=row.get("note"),
                occurred_at=_parse_timestamp(row["created_at"]),
            )
            for row in self._client.select("credit_ledger", params)
        ]


__all__ = ["HostedStoreDataSource", "SqlStoreDataSource", "StoreDataSource"]
