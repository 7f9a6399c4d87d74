"""Arrange pipeline output into the named tabular sections of a report."""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any

from company_store.services.catalog import item_label
from company_store.services.reporting.period import ReportPeriod
from company_store.services.reporting.records import (
    EmployeeRecord,
    EnrichedGrant,
    EnrichedPurchase,
    SummaryRow,
)

PURCHASES_SECTION = "Detailed Purchases"
SUMMARY_SECTION = "Per-Employee Summary"
BALANCES_SECTION = "Credit Balances"
LEDGER_SECTION = "Credit Ledger"

PURCHASE_COLUMNS = ("Date", "Company", "Name", "Sector", "Item", "Qty", "UnitPrice", "Total", "OwnerId")
SUMMARY_COLUMNS = ("Company", "Name", "Sector", "MonthTotal", "OwnerId")
BALANCE_COLUMNS = ("Company", "Name", "Sector", "CurrentBalance", "OwnerId")
LEDGER_COLUMNS = ("Date", "Company", "Name", "Sector", "Amount", "Note", "OwnerId")


@dataclass(slots=True)
class ReportSection:
    """Ordered columns plus rows; values stay raw until serialization."""

    title: str
    columns: tuple[str, ...]
    rows: list[tuple[Any, ...]] = field(default_factory=list)
    currency_columns: frozenset[str] = frozenset()
    date_columns: frozenset[str] = frozenset()

    def records(self) -> list[dict[str, Any]]:
        return [dict(zip(self.columns, row)) for row in self.rows]


@dataclass(slots=True)
class ReportDocument:
    period: ReportPeriod
    company: str | None
    sections: list[ReportSection]

    def section(self, title: str) -> ReportSection:
        for section in self.sections:
            if section.title == title:
                return section
        raise KeyError(title)


def _identity_fields(identity: Any) -> tuple[str, str, str]:
    if identity is None:
        return "", "", ""
    return identity.company, identity.display_name, identity.sector


def _local(moment: datetime, tz: tzinfo | None) -> datetime:
    return moment.astimezone(tz) if tz is not None else moment


def assemble_report(
    *,
    period: ReportPeriod,
    company: str | None,
    purchases: Sequence[EnrichedPurchase],
    summary: Sequence[SummaryRow],
    balances: Sequence[EmployeeRecord],
    grants: Sequence[EnrichedGrant],
    tz: tzinfo | None = None,
) -> ReportDocument:
    """Build the four report sections in their fixed order.

    ``balances`` reflect current balances of active employees, not the balance
    at the end of ``period``.
    """

    detailed = ReportSection(
        title=PURCHASES_SECTION,
        columns=PURCHASE_COLUMNS,
        currency_columns=frozenset({"UnitPrice", "Total"}),
        date_columns=frozenset({"Date"}),
    )
    for row in purchases:
        purchase = row.purchase
        company_code, name, sector = _identity_fields(row.identity)
        detailed.rows.append(
            (
                _local(purchase.occurred_at, tz),
                company_code,
                name,
                sector,
                item_label(purchase.item_code),
                purchase.quantity,
                purchase.unit_price,
                purchase.total,
                purchase.owner_id,
            )
        )

    summary_section = ReportSection(
        title=SUMMARY_SECTION,
        columns=SUMMARY_COLUMNS,
        currency_columns=frozenset({"MonthTotal"}),
        rows=[(row.company, row.display_name, row.sector, row.total_month, row.owner_id) for row in summary],
    )

    ordered_balances = sorted(balances, key=lambda item: (item.company, item.display_name, item.owner_id))
    balance_section = ReportSection(
        title=BALANCES_SECTION,
        columns=BALANCE_COLUMNS,
        currency_columns=frozenset({"CurrentBalance"}),
        rows=[
            (item.company, item.display_name, item.sector, item.credit_balance, item.owner_id)
            for item in ordered_balances
        ],
    )

    ledger = ReportSection(
        title=LEDGER_SECTION,
        columns=LEDGER_COLUMNS,
        currency_columns=frozenset({"Amount"}),
        date_columns=frozenset({"Date"}),
    )
    for row in grants:
        grant = row.grant
        company_code, name, sector = _identity_fields(row.identity)
        ledger.rows.append(
            (
                _local(grant.occurred_at, tz),
                company_code,
                name,
                sector,
                grant.amount,
                grant.note or "",
                grant.owner_id,
            )
        )

    return ReportDocument(
        period=period,
        company=company,
        sections=[detailed, summary_section, balance_section, ledger],
    )


__all__ = [
    "BALANCES_SECTION",
    "LEDGER_SECTION",
    "PURCHASES_SECTION",
    "ReportDocument",
    "ReportSection",
    "SUMMARY_SECTION",
    "assemble_report",
]
