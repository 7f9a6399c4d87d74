"""Monthly report export endpoints."""
from __future__ import annotations

from collections.abc import Iterator
from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy.orm import Session

from company_store.api.deps import get_db_session
from company_store.api.routes.auth import AuthenticatedUser, require_role
from company_store.core.config import get_settings
from company_store.services.hosted import HostedServiceClient
from company_store.services.reporting import (
    HostedStoreDataSource,
    MonthlyReportService,
    ReportFetchError,
    ReportFormat,
    ReportRequest,
    ReportSerializationError,
    SqlStoreDataSource,
    StoreDataSource,
)

router = APIRouter(prefix="/reports")

report_reader = require_role("admin")


def get_report_source(
    session: Session = Depends(get_db_session),
    user: AuthenticatedUser = Depends(report_reader),
) -> Iterator[StoreDataSource]:
    """Yield the configured data source; hosted reads run with the caller's token."""

    settings = get_settings()
    if settings.report_source != "hosted":
        yield SqlStoreDataSource(session)
        return
    client = HostedServiceClient.from_settings(settings, access_token=user.access_token)
    try:
        yield HostedStoreDataSource(client)
    finally:
        client.close()


@router.get("/monthly", summary="Export the monthly purchase and credit report")
def export_monthly_report(
    reference_date: date | None = Query(default=None, description="Any day of the month to export"),
    company: str | None = Query(default=None, pattern="^(FA|BF|fa|bf)?$"),
    output_format: str | None = Query(default=None, alias="format", pattern="^(csv|xlsx|workbook)$"),
    source: StoreDataSource = Depends(get_report_source),
) -> Response:
    service = MonthlyReportService(source)
    request = ReportRequest(
        reference_date=reference_date,
        company=company,
        output_format=ReportFormat.parse(output_format or get_settings().report_default_format),
    )
    try:
        export = service.export(request)
    except ReportFetchError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    except ReportSerializationError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc

    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={
            "Content-Disposition": f'attachment; filename="{export.filename}"',
            "X-Report-Anomalies": str(export.anomalies.total),
            "X-Report-Period": export.period.label,
        },
    )


__all__ = ["export_monthly_report", "get_report_source", "router"]
