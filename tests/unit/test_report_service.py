from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timezone
from decimal import Decimal

import pytest

from company_store.core.config import Settings
from company_store.obs import REPORT_EXPORT_COUNTER
from company_store.services.reporting import (
    BALANCES_SECTION,
    LEDGER_SECTION,
    PURCHASES_SECTION,
    SUMMARY_SECTION,
    MonthlyReportService,
    ReportFetchError,
    ReportFormat,
    ReportPeriod,
    ReportRequest,
    ReportSerializationError,
    report_filename,
)
from company_store.services.reporting.records import CreditGrantRecord, EmployeeRecord, PurchaseRecord

MARCH = datetime(2024, 3, 10, 15, 0, tzinfo=timezone.utc)


@dataclass
class InMemorySource:
    employees: list[EmployeeRecord] = field(default_factory=list)
    purchases: list[PurchaseRecord] = field(default_factory=list)
    grants: list[CreditGrantRecord] = field(default_factory=list)
    periods: list[ReportPeriod] = field(default_factory=list)

    def list_employees(self, *, active: bool | None = None) -> list[EmployeeRecord]:
        return [item for item in self.employees if active is None or item.active == active]

    def list_purchases(self, period: ReportPeriod) -> list[PurchaseRecord]:
        self.periods.append(period)
        return [item for item in self.purchases if period.contains(item.occurred_at)]

    def list_credit_ledger(self, period: ReportPeriod) -> list[CreditGrantRecord]:
        return [item for item in self.grants if period.contains(item.occurred_at)]


class FailingSource(InMemorySource):
    def list_purchases(self, period: ReportPeriod) -> list[PurchaseRecord]:
        raise PermissionError("permission denied for table purchases")


def _settings() -> Settings:
    return Settings(report_timezone="America/Sao_Paulo", enable_tracing=False)


def _scenario_source() -> InMemorySource:
    return InMemorySource(
        employees=[
            EmployeeRecord(
                owner_id="u1",
                display_name="Ana",
                sector="Sales",
                company="FA",
                active=True,
                credit_balance=Decimal("5.00"),
            )
        ],
        purchases=[
            PurchaseRecord(
                id="p1",
                owner_id="u1",
                item_code="RED_BULL",
                unit_price=Decimal("7"),
                quantity=2,
                total=Decimal("14"),
                occurred_at=MARCH,
            )
        ],
        grants=[
            CreditGrantRecord(
                id="g1",
                owner_id="u1",
                amount=Decimal("20"),
                note="adjustment",
                occurred_at=MARCH,
            )
        ],
    )


def test_end_to_end_scenario_for_single_company() -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())

    document, anomalies = service.build(ReportRequest(reference_date=date(2024, 3, 20), company="FA"))

    detailed = document.section(PURCHASES_SECTION).records()
    assert len(detailed) == 1
    assert detailed[0]["Total"] == Decimal("14")
    assert detailed[0]["Item"] == "Red Bull"

    summary = document.section(SUMMARY_SECTION).records()
    assert summary == [
        {"Company": "FA", "Name": "Ana", "Sector": "Sales", "MonthTotal": Decimal("14"), "OwnerId": "u1"}
    ]

    balances = document.section(BALANCES_SECTION).records()
    assert balances == [
        {"Company": "FA", "Name": "Ana", "Sector": "Sales", "CurrentBalance": Decimal("5.00"), "OwnerId": "u1"}
    ]

    ledger = document.section(LEDGER_SECTION).records()
    assert len(ledger) == 1
    assert (ledger[0]["Company"], ledger[0]["Name"], ledger[0]["Sector"]) == ("FA", "Ana", "Sales")
    assert ledger[0]["Amount"] == Decimal("20")
    assert ledger[0]["Note"] == "adjustment"
    assert anomalies.total == 0


def test_sections_are_emitted_in_fixed_order() -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())

    document, _ = service.build(ReportRequest(reference_date=date(2024, 3, 20)))

    assert [section.title for section in document.sections] == [
        PURCHASES_SECTION,
        SUMMARY_SECTION,
        BALANCES_SECTION,
        LEDGER_SECTION,
    ]


def test_summary_uses_stored_totals_not_catalog_price() -> None:
    source = _scenario_source()
    # RED_BULL costs 7.00 in the catalog today; the stored snapshot says otherwise.
    source.purchases = [
        PurchaseRecord(
            id="p1",
            owner_id="u1",
            item_code="RED_BULL",
            unit_price=Decimal("5.50"),
            quantity=2,
            total=Decimal("11.00"),
            occurred_at=MARCH,
        )
    ]
    service = MonthlyReportService(source, settings=_settings())

    document, _ = service.build(ReportRequest(reference_date=date(2024, 3, 1)))

    assert document.section(SUMMARY_SECTION).records()[0]["MonthTotal"] == Decimal("11.00")


def test_unfiltered_report_keeps_unresolved_rows_with_blank_identity() -> None:
    source = _scenario_source()
    source.purchases.append(
        PurchaseRecord(
            id="p2",
            owner_id="ghost",
            item_code="UNKNOWN",
            unit_price=Decimal("1"),
            quantity=1,
            total=Decimal("1"),
            occurred_at=MARCH,
        )
    )
    service = MonthlyReportService(source, settings=_settings())

    document, anomalies = service.build(ReportRequest(reference_date=date(2024, 3, 1)))
    filtered, _ = service.build(ReportRequest(reference_date=date(2024, 3, 1), company="FA"))

    detailed = document.section(PURCHASES_SECTION).records()
    ghost = next(row for row in detailed if row["OwnerId"] == "ghost")
    assert (ghost["Company"], ghost["Name"], ghost["Sector"]) == ("", "", "")
    assert ghost["Item"] == "Snack"
    assert len(document.section(SUMMARY_SECTION).rows) == 1
    assert len(filtered.section(PURCHASES_SECTION).rows) == 1
    assert anomalies.unresolved_purchases == 1


def test_detail_dates_are_rendered_in_report_zone() -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())

    document, _ = service.build(ReportRequest(reference_date=date(2024, 3, 1)))

    moment = document.section(PURCHASES_SECTION).records()[0]["Date"]
    assert moment.hour == 12
    assert moment.utcoffset().total_seconds() == -3 * 3600


def test_fetch_failure_keeps_underlying_message() -> None:
    service = MonthlyReportService(FailingSource(), settings=_settings())

    with pytest.raises(ReportFetchError) as exc_info:
        service.export(ReportRequest(reference_date=date(2024, 3, 1)))

    assert str(exc_info.value) == "permission denied for table purchases"


def test_serialization_failure_produces_no_export(monkeypatch: pytest.MonkeyPatch) -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())

    def explode(self, document):  # type: ignore[no-untyped-def]
        raise ValueError("sheet too large")

    monkeypatch.setattr("company_store.services.reporting.serializers.WorkbookSerializer.serialize", explode)

    with pytest.raises(ReportSerializationError, match="sheet too large"):
        service.export(ReportRequest(reference_date=date(2024, 3, 1), output_format=ReportFormat.WORKBOOK))


def test_export_names_file_after_company_and_month() -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())

    export = service.export(ReportRequest(reference_date=date(2024, 3, 1), company="fa", output_format="xlsx"))
    general = service.export(ReportRequest(reference_date=date(2024, 3, 1)))

    assert export.filename == "store_FA_2024-03.xlsx"
    assert general.filename == "store_GENERAL_2024-03.csv"
    assert general.content.startswith(b"\xef\xbb\xbf")


def test_report_filename_accepts_workbook_alias() -> None:
    period = ReportPeriod(
        start=datetime(2024, 12, 1, tzinfo=timezone.utc),
        end=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )

    assert report_filename("BF", period, "workbook") == "store_BF_2024-12.xlsx"


def _export_count(**labels: str) -> float:
    family = next(iter(REPORT_EXPORT_COUNTER.collect()))
    for sample in family.samples:
        if sample.name.endswith("_total") and all(sample.labels.get(k) == v for k, v in labels.items()):
            return sample.value
    return 0.0


def test_assembly_failure_is_reported_as_serialization_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    service = MonthlyReportService(_scenario_source(), settings=_settings())
    before = _export_count(format="csv", company="BF", outcome="serialization_failed")

    def explode(**kwargs):  # type: ignore[no-untyped-def]
        raise KeyError("MonthTotal")

    monkeypatch.setattr("company_store.services.reporting.service.assemble_report", explode)

    with pytest.raises(ReportSerializationError, match="MonthTotal"):
        service.export(ReportRequest(reference_date=date(2024, 3, 1), company="BF"))

    assert _export_count(format="csv", company="BF", outcome="serialization_failed") == before + 1


def _two_company_source() -> InMemorySource:
    source = _scenario_source()
    source.employees.append(
        EmployeeRecord(
            owner_id="u2",
            display_name="Bruno",
            sector="Logistics",
            company="BF",
            active=True,
            credit_balance=Decimal("3.00"),
        )
    )
    source.purchases.append(
        PurchaseRecord(
            id="p2",
            owner_id="u2",
            item_code="DOCE_SALGADINHO",
            unit_price=Decimal("2"),
            quantity=3,
            total=Decimal("6"),
            occurred_at=MARCH,
        )
    )
    source.grants.append(
        CreditGrantRecord(id="g2", owner_id="u2", amount=Decimal("10"), note="bonus", occurred_at=MARCH)
    )
    return source


def _sorted_rows(document, title: str) -> list[tuple]:  # type: ignore[no-untyped-def]
    return sorted(document.section(title).rows, key=repr)


@pytest.mark.parametrize("title", [PURCHASES_SECTION, SUMMARY_SECTION, BALANCES_SECTION, LEDGER_SECTION])
def test_general_report_is_union_of_company_reports(title: str) -> None:
    service = MonthlyReportService(_two_company_source(), settings=_settings())
    reference = date(2024, 3, 15)

    general, anomalies = service.build(ReportRequest(reference_date=reference))
    fa, _ = service.build(ReportRequest(reference_date=reference, company="FA"))
    bf, _ = service.build(ReportRequest(reference_date=reference, company="BF"))

    assert anomalies.total == 0
    assert fa.section(title).rows
    assert bf.section(title).rows
    assert _sorted_rows(general, title) == sorted(fa.section(title).rows + bf.section(title).rows, key=repr)
