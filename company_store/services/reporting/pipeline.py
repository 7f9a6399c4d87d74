"""Join, aggregation and company filtering stages of the monthly report."""
from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, TypeVar

from company_store.services.reporting.records import (
    CreditGrantRecord,
    EmployeeRecord,
    EnrichedGrant,
    EnrichedPurchase,
    Identity,
    PurchaseRecord,
    SummaryRow,
)


class _HasCompany(Protocol):
    @property
    def company(self) -> str | None: ...


RowT = TypeVar("RowT", bound=_HasCompany)


@dataclass(slots=True, frozen=True)
class EnrichmentAnomalies:
    """Rows whose owner was missing from the directory or inactive."""

    unresolved_purchases: int = 0
    unresolved_grants: int = 0

    @property
    def total(self) -> int:
        return self.unresolved_purchases + self.unresolved_grants


def normalize_company(company: str | None) -> str | None:
    """Upper-case a company code; blank means every company."""

    if company is None:
        return None
    value = company.strip().upper()
    return value or None


def build_directory(employees: Iterable[EmployeeRecord]) -> dict[str, Identity]:
    """Map owner ids of active employees to their identity."""

    return {
        employee.owner_id: Identity(
            display_name=employee.display_name,
            sector=employee.sector,
            company=employee.company,
        )
        for employee in employees
        if employee.active
    }


def enrich_purchases(
    purchases: Iterable[PurchaseRecord], directory: Mapping[str, Identity]
) -> list[EnrichedPurchase]:
    return [EnrichedPurchase(purchase=row, identity=directory.get(row.owner_id)) for row in purchases]


def enrich_grants(
    grants: Iterable[CreditGrantRecord], directory: Mapping[str, Identity]
) -> list[EnrichedGrant]:
    return [EnrichedGrant(grant=row, identity=directory.get(row.owner_id)) for row in grants]


def count_anomalies(
    purchases: Iterable[EnrichedPurchase], grants: Iterable[EnrichedGrant]
) -> EnrichmentAnomalies:
    return EnrichmentAnomalies(
        unresolved_purchases=sum(1 for row in purchases if row.identity is None),
        unresolved_grants=sum(1 for row in grants if row.identity is None),
    )


def summarize_purchases(rows: Iterable[EnrichedPurchase]) -> list[SummaryRow]:
    """Sum stored purchase totals per ``(owner, name, sector, company)``.

    Rows without an identity are skipped. The result is ordered by month total,
    highest first; equal totals keep the order in which each group first
    appeared in ``rows``.
    """

    totals: dict[tuple[str, str, str, str], Decimal] = {}
    for row in rows:
        if row.identity is None:
            continue
        key = (
            row.purchase.owner_id,
            row.identity.display_name,
            row.identity.sector,
            row.identity.company,
        )
        totals[key] = totals.get(key, Decimal("0")) + row.purchase.total

    summary = [
        SummaryRow(owner_id=owner_id, display_name=name, sector=sector, company=company, total_month=total)
        for (owner_id, name, sector, company), total in totals.items()
    ]
    summary.sort(key=lambda item: item.total_month, reverse=True)
    return summary


def filter_by_company(rows: Iterable[RowT], company: str | None) -> list[RowT]:
    """Keep rows of ``company``; a blank code keeps everything, unresolved rows included."""

    code = normalize_company(company)
    if code is None:
        return list(rows)
    return [row for row in rows if row.company == code]


__all__ = [
    "EnrichmentAnomalies",
    "build_directory",
    "count_anomalies",
    "enrich_grants",
    "enrich_purchases",
    "filter_by_company",
    "normalize_company",
    "summarize_purchases",
]
