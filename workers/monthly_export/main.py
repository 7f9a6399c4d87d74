"""Worker exporting each finished month to the report archive bucket."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from sqlalchemy.orm import Session

from company_store.core.config import Settings, get_settings
from company_store.db.session import SessionLocal
from company_store.obs import shutdown_tracing
from company_store.services.report_archive import ArchiveRunResult, ReportArchiver, archive_month
from company_store.services.reporting import MonthlyReportService, SqlStoreDataSource
from company_store.workers.observability import configure_worker, worker_span
from workers.monthly_scheduler import run_monthly_scheduler

logger = logging.getLogger(__name__)


class MonthlyExportWorker:
    """Exports the month ending at a boundary once per configured company filter."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        session_factory: Callable[[], Session] = SessionLocal,
        archiver: ReportArchiver | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._session_factory = session_factory
        self._archiver = archiver or ReportArchiver(settings=self._settings)

    def export_month_before(self, boundary: datetime) -> ArchiveRunResult:
        reference = boundary - timedelta(days=1)
        with worker_span("monthly_export.run", boundary=boundary.isoformat()):
            session = self._session_factory()
            try:
                service = MonthlyReportService(SqlStoreDataSource(session), settings=self._settings)
                result = archive_month(
                    service,
                    self._archiver,
                    reference=reference,
                    companies=self._settings.export_companies,
                )
            finally:
                session.close()
        logger.info(
            "monthly export finished",
            extra={"archived": len(result.archived), "failed": sorted(result.failed)},
        )
        return result

    async def on_boundary(self, boundary: datetime) -> None:
        await asyncio.to_thread(self.export_month_before, boundary)


async def run() -> None:
    configure_worker("monthly-export-worker")
    settings = get_settings()
    worker = MonthlyExportWorker(settings=settings)
    logger.info("monthly export worker started")
    await run_monthly_scheduler(worker.on_boundary, tz=ZoneInfo(settings.report_timezone))


def main() -> None:
    try:
        asyncio.run(run())
    except KeyboardInterrupt:  # pragma: no cover - signal handling for CLI
        logger.info("monthly export worker stopped")
    finally:
        shutdown_tracing()


if __name__ == "__main__":
    main()
