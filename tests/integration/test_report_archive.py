from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from zoneinfo import ZoneInfo

from botocore.exceptions import ClientError
from sqlalchemy.orm import Session

from company_store.core.config import Settings
from company_store.models import Purchase
from company_store.services.report_archive import ReportArchiver
from workers.monthly_export.main import MonthlyExportWorker

SAO_PAULO = ZoneInfo("America/Sao_Paulo")
APRIL_BOUNDARY = datetime(2024, 4, 1, tzinfo=SAO_PAULO)


def _settings() -> Settings:
    return Settings(
        enable_tracing=False,
        report_timezone="America/Sao_Paulo",
        report_archive_bucket="store-reports",
        report_archive_prefix="reports/monthly",
        export_companies=["", "FA", "BF"],
    )


def _seed(db_session: Session, make_employee) -> None:  # type: ignore[no-untyped-def]
    make_employee("u1", name="Ana", company="FA")
    db_session.add(
        Purchase(
            user_id="u1",
            item="RED_BULL",
            unit_price=Decimal("7.00"),
            qty=1,
            total=Decimal("7.00"),
            credit_used=Decimal("0"),
            channel="self",
            created_at=datetime(2024, 3, 31, 12, 0, tzinfo=timezone.utc),
        )
    )
    db_session.commit()


def test_worker_archives_finished_month_per_company(
    db_session: Session, make_employee, s3_client  # type: ignore[no-untyped-def]
) -> None:
    _seed(db_session, make_employee)
    settings = _settings()
    worker = MonthlyExportWorker(
        settings=settings,
        session_factory=lambda: db_session,
        archiver=ReportArchiver(settings=settings, s3_client_factory=lambda: s3_client),
    )

    result = worker.export_month_before(APRIL_BOUNDARY)

    assert result.failed == {}
    assert sorted(s3_client.buckets["store-reports"]) == [
        "reports/monthly/2024-03/store_BF_2024-03.xlsx",
        "reports/monthly/2024-03/store_FA_2024-03.xlsx",
        "reports/monthly/2024-03/store_GENERAL_2024-03.xlsx",
    ]
    metadata = s3_client.metadata["reports/monthly/2024-03/store_FA_2024-03.xlsx"]
    assert metadata == {"period": "2024-03", "company": "FA", "anomalies": "0"}


def test_failure_for_one_company_does_not_stop_others(
    db_session: Session, make_employee, s3_client  # type: ignore[no-untyped-def]
) -> None:
    _seed(db_session, make_employee)
    settings = _settings()
    original_put = s3_client.put_object

    def flaky_put(**kwargs):  # type: ignore[no-untyped-def]
        if "store_FA_" in kwargs["Key"]:
            raise ClientError({"Error": {"Code": "500", "Message": "Internal"}}, "PutObject")
        return original_put(**kwargs)

    s3_client.put_object = flaky_put
    worker = MonthlyExportWorker(
        settings=settings,
        session_factory=lambda: db_session,
        archiver=ReportArchiver(settings=settings, s3_client_factory=lambda: s3_client),
    )

    result = worker.export_month_before(APRIL_BOUNDARY)

    assert list(result.failed) == ["FA"]
    assert len(result.archived) == 2
