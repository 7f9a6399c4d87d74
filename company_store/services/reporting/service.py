"""Monthly reconciliation and export pipeline."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from zoneinfo import ZoneInfo

from company_store.core.config import Settings, get_settings
from company_store.obs import report_anomalies, report_export, traced
from company_store.services.reporting.assembler import ReportDocument, assemble_report
from company_store.services.reporting.period import ReportPeriod, resolve_period
from company_store.services.reporting.pipeline import (
    EnrichmentAnomalies,
    build_directory,
    count_anomalies,
    enrich_grants,
    enrich_purchases,
    filter_by_company,
    normalize_company,
    summarize_purchases,
)
from company_store.services.reporting.records import CreditGrantRecord, EmployeeRecord, PurchaseRecord
from company_store.services.reporting.serializers import ReportFormat, get_serializer
from company_store.services.reporting.sources import StoreDataSource

logger = logging.getLogger(__name__)


class ReportError(RuntimeError):
    """Base class for report pipeline failures."""


class ReportFetchError(ReportError):
    """Raised when reading employees, purchases or the credit ledger fails."""


class ReportSerializationError(ReportError):
    """Raised when the assembled report cannot be encoded."""


@dataclass(slots=True, frozen=True)
class ReportRequest:
    reference_date: datetime | date | None = None
    company: str | None = None
    output_format: ReportFormat | str = ReportFormat.CSV


@dataclass(slots=True, frozen=True)
class ReportExport:
    filename: str
    content: bytes
    media_type: str
    period: ReportPeriod
    company: str | None
    anomalies: EnrichmentAnomalies


def report_filename(company: str | None, period: ReportPeriod, output_format: ReportFormat | str) -> str:
    """``store_<COMPANY|GENERAL>_<YYYY-MM>.<ext>``."""

    fmt = ReportFormat.parse(output_format)
    return f"store_{normalize_company(company) or 'GENERAL'}_{period.label}.{fmt.value}"


class MonthlyReportService:
    """Runs fetch, join, aggregate, filter, assemble and serialize for one month."""

    def __init__(self, source: StoreDataSource, *, settings: Settings | None = None) -> None:
        self._source = source
        self._settings = settings or get_settings()

    @property
    def timezone(self) -> tzinfo:
        return ZoneInfo(self._settings.report_timezone)

    def _fetch(
        self, period: ReportPeriod
    ) -> tuple[list[EmployeeRecord], list[PurchaseRecord], list[CreditGrantRecord]]:
        try:
            employees = self._source.list_employees(active=True)
            purchases = self._source.list_purchases(period)
            grants = self._source.list_credit_ledger(period)
        except ReportFetchError:
            raise
        except Exception as exc:
            raise ReportFetchError(str(exc)) from exc
        return employees, purchases, grants

    def build(self, request: ReportRequest) -> tuple[ReportDocument, EnrichmentAnomalies]:
        """Assemble the report sections for ``request`` without serializing them."""

        tz = self.timezone
        period = resolve_period(request.reference_date, tz=tz)
        company = normalize_company(request.company)
        employees, purchases, grants = self._fetch(period)

        try:
            directory = build_directory(employees)
            enriched_purchases = enrich_purchases(purchases, directory)
            enriched_grants = enrich_grants(grants, directory)
            anomalies = count_anomalies(enriched_purchases, enriched_grants)

            document = assemble_report(
                period=period,
                company=company,
                purchases=filter_by_company(enriched_purchases, company),
                summary=filter_by_company(summarize_purchases(enriched_purchases), company),
                balances=filter_by_company([item for item in employees if item.active], company),
                grants=filter_by_company(enriched_grants, company),
                tz=tz,
            )
        except Exception as exc:
            # Anything past a successful fetch is an encoding failure for the caller.
            raise ReportSerializationError(str(exc)) from exc
        return document, anomalies

    def export(self, request: ReportRequest) -> ReportExport:
        fmt = ReportFormat.parse(request.output_format)
        company = normalize_company(request.company)
        with traced("report.export", format=fmt.value, company=company or "GENERAL"):
            try:
                document, anomalies = self.build(request)
            except ReportSerializationError:
                report_export(fmt.value, company, "serialization_failed")
                raise
            except ReportError:
                report_export(fmt.value, company, "fetch_failed")
                raise

            serializer = get_serializer(
                fmt,
                currency_symbol=self._settings.currency_symbol,
                max_column_width=self._settings.workbook_max_column_width,
            )
            try:
                content = serializer.serialize(document)
            except Exception as exc:
                report_export(fmt.value, company, "serialization_failed")
                raise ReportSerializationError(str(exc)) from exc

        report_anomalies("purchase", anomalies.unresolved_purchases)
        report_anomalies("credit_grant", anomalies.unresolved_grants)
        if anomalies.total:
            logger.warning(
                "report rows without an active owner",
                extra={
                    "period": document.period.label,
                    "unresolved_purchases": anomalies.unresolved_purchases,
                    "unresolved_grants": anomalies.unresolved_grants,
                },
            )
        logger.info(
            "monthly report exported",
            extra={
                "period": document.period.label,
                "company": company or "GENERAL",
                "format": fmt.value,
                "rows": {section.title: len(section.rows) for section in document.sections},
            },
        )
        report_export(fmt.value, company, "ok")
        return ReportExport(
            filename=report_filename(company, document.period, fmt),
            content=content,
            media_type=serializer.media_type,
            period=document.period,
            company=company,
            anomalies=anomalies,
        )


__all__ = [
    "MonthlyReportService",
    "ReportError",
    "ReportExport",
    "ReportFetchError",
    "ReportRequest",
    "ReportSerializationError",
    "report_filename",
]
