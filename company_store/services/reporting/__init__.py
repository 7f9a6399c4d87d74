"""Monthly purchase and credit reporting."""
from .assembler import (
    BALANCES_SECTION,
    LEDGER_SECTION,
    PURCHASES_SECTION,
    SUMMARY_SECTION,
    ReportDocument,
    ReportSection,
    assemble_report,
)
from .period import ReportPeriod, resolve_period
from .pipeline import EnrichmentAnomalies, filter_by_company, summarize_purchases
from .serializers import (
    DelimitedTextSerializer,
    ReportFormat,
    UnknownReportFormatError,
    WorkbookSerializer,
    format_currency,
)
from .service import (
    MonthlyReportService,
    ReportError,
    ReportExport,
    ReportFetchError,
    ReportRequest,
    ReportSerializationError,
    report_filename,
)
from .sources import HostedStoreDataSource, SqlStoreDataSource, StoreDataSource

__all__ = [
    "BALANCES_SECTION",
    "DelimitedTextSerializer",
    "EnrichmentAnomalies",
    "HostedStoreDataSource",
    "LEDGER_SECTION",
    "MonthlyReportService",
    "PURCHASES_SECTION",
    "ReportDocument",
    "ReportError",
    "ReportExport",
    "ReportFetchError",
    "ReportFormat",
    "ReportPeriod",
    "ReportRequest",
    "ReportSection",
    "ReportSerializationError",
    "SUMMARY_SECTION",
    "SqlStoreDataSource",
    "StoreDataSource",
    "UnknownReportFormatError",
    "WorkbookSerializer",
    "assemble_report",
    "filter_by_company",
    "format_currency",
    "report_filename",
    "resolve_period",
    "summarize_purchases",
]
