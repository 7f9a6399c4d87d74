"""Archive of generated monthly reports in object storage."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from company_store.core.config import Settings, get_settings
from company_store.services.reporting import (
    MonthlyReportService,
    ReportError,
    ReportExport,
    ReportFormat,
    ReportRequest,
)

logger = logging.getLogger(__name__)


class ReportArchiveError(RuntimeError):
    """Raised when a report cannot be written to the archive bucket."""


@dataclass(slots=True)
class ArchiveRunResult:
    archived: list[str] = field(default_factory=list)
    failed: dict[str, str] = field(default_factory=dict)


class ReportArchiver:
    """Stores report files under ``<prefix>/<YYYY-MM>/<filename>``."""

    def __init__(
        self,
        *,
        settings: Settings | None = None,
        s3_client_factory: Callable[[], Any] | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._s3_client_factory = s3_client_factory or self._default_s3_client
        self._s3_client: Any | None = None
        self._bucket_ready = False

    def _default_s3_client(self) -> Any:
        return boto3.client(
            "s3",
            region_name=self._settings.aws_region,
            endpoint_url=self._settings.s3_endpoint_url,
        )

    def _get_s3_client(self) -> Any:
        if self._s3_client is None:
            self._s3_client = self._s3_client_factory()
        return self._s3_client

    def _ensure_bucket(self) -> None:
        if self._bucket_ready:
            return
        client = self._get_s3_client()
        bucket = self._settings.report_archive_bucket
        try:
            client.head_bucket(Bucket=bucket)
        except ClientError:
            client.create_bucket(Bucket=bucket)
        self._bucket_ready = True

    def key_for(self, export: ReportExport) -> str:
        return f"{self._settings.report_archive_prefix}/{export.period.label}/{export.filename}"

    def archive(self, export: ReportExport) -> str:
        key = self.key_for(export)
        try:
            self._ensure_bucket()
            self._get_s3_client().put_object(
                Bucket=self._settings.report_archive_bucket,
                Key=key,
                Body=export.content,
                ContentType=export.media_type,
                Metadata={
                    "period": export.period.label,
                    "company": export.company or "GENERAL",
                    "anomalies": str(export.anomalies.total),
                },
            )
        except (BotoCoreError, ClientError) as exc:
            raise ReportArchiveError(str(exc)) from exc
        return key


def archive_month(
    service: MonthlyReportService,
    archiver: ReportArchiver,
    *,
    reference: datetime | date,
    companies: Iterable[str],
    output_format: ReportFormat | str = ReportFormat.WORKBOOK,
) -> ArchiveRunResult:
    """Export and archive the month of ``reference`` once per company filter.

    A failing company is recorded in the result and does not stop the others.
    """

    result = ArchiveRunResult()
    for company in companies:
        label = company or "GENERAL"
        try:
            export = service.export(
                ReportRequest(reference_date=reference, company=company, output_format=output_format)
            )
            key = archiver.archive(export)
        except (ReportError, ReportArchiveError) as exc:
            logger.error("monthly report archive failed", extra={"company": label, "error": str(exc)})
            result.failed[label] = str(exc)
            continue
        logger.info("monthly report archived", extra={"company": label, "key": key})
        result.archived.append(key)
    return result


__all__ = ["ArchiveRunResult", "ReportArchiveError", "ReportArchiver", "archive_month"]
