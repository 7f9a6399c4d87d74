from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal

from company_store.services.reporting.pipeline import (
    build_directory,
    count_anomalies,
    enrich_grants,
    enrich_purchases,
    filter_by_company,
    normalize_company,
    summarize_purchases,
)
from company_store.services.reporting.records import (
    CreditGrantRecord,
    EmployeeRecord,
    EnrichedPurchase,
    Identity,
    PurchaseRecord,
)

BASE = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def _employee(owner_id: str, name: str, company: str = "FA", *, active: bool = True) -> EmployeeRecord:
    return EmployeeRecord(
        owner_id=owner_id,
        display_name=name,
        sector="Ops",
        company=company,
        active=active,
        credit_balance=Decimal("0"),
    )


def _purchase(index: int, owner_id: str, total: str) -> PurchaseRecord:
    return PurchaseRecord(
        id=f"p{index}",
        owner_id=owner_id,
        item_code="RED_BULL",
        unit_price=Decimal(total),
        quantity=1,
        total=Decimal(total),
        occurred_at=BASE + timedelta(hours=index),
    )


def test_directory_keeps_active_employees_only() -> None:
    directory = build_directory([_employee("a", "Ana"), _employee("b", "Bia", active=False)])

    assert set(directory) == {"a"}
    assert directory["a"] == Identity(display_name="Ana", sector="Ops", company="FA")


def test_unresolved_rows_are_counted_and_kept() -> None:
    directory = build_directory([_employee("a", "Ana"), _employee("gone", "Old", active=False)])
    purchases = enrich_purchases(
        [_purchase(1, "a", "2.00"), _purchase(2, "ghost", "3.00"), _purchase(3, "gone", "7.00")],
        directory,
    )
    grants = enrich_grants(
        [CreditGrantRecord(id="g1", owner_id="ghost", amount=Decimal("5"), note=None, occurred_at=BASE)],
        directory,
    )

    anomalies = count_anomalies(purchases, grants)

    assert len(purchases) == 3
    assert anomalies.unresolved_purchases == 2
    assert anomalies.unresolved_grants == 1
    assert anomalies.total == 3


def test_summary_total_matches_resolved_purchases() -> None:
    directory = build_directory([_employee("a", "Ana"), _employee("b", "Bia", "BF")])
    purchases = enrich_purchases(
        [
            _purchase(1, "a", "2.00"),
            _purchase(2, "b", "7.00"),
            _purchase(3, "a", "3.00"),
            _purchase(4, "ghost", "100.00"),
        ],
        directory,
    )

    summary = summarize_purchases(purchases)

    resolved_total = sum(row.purchase.total for row in purchases if row.identity is not None)
    assert sum(row.total_month for row in summary) == resolved_total == Decimal("12.00")
    assert [(row.owner_id, row.total_month) for row in summary] == [
        ("b", Decimal("7.00")),
        ("a", Decimal("5.00")),
    ]


def test_summary_ties_keep_first_appearance_order() -> None:
    directory = build_directory([_employee("a", "Ana"), _employee("b", "Bia"), _employee("c", "Caio")])
    purchases = enrich_purchases(
        [_purchase(1, "c", "2.00"), _purchase(2, "a", "2.00"), _purchase(3, "b", "9.00")],
        directory,
    )

    summary = summarize_purchases(purchases)

    assert [row.owner_id for row in summary] == ["b", "c", "a"]


def test_summary_groups_by_identity_snapshot() -> None:
    before = Identity(display_name="Ana", sector="Ops", company="FA")
    after = Identity(display_name="Ana Maria", sector="Ops", company="FA")
    rows = [
        EnrichedPurchase(purchase=_purchase(1, "a", "2.00"), identity=before),
        EnrichedPurchase(purchase=_purchase(2, "a", "3.00"), identity=after),
    ]

    summary = summarize_purchases(rows)

    assert len(summary) == 2
    assert {row.display_name for row in summary} == {"Ana", "Ana Maria"}


def test_company_filter_is_case_insensitive_and_drops_unresolved() -> None:
    directory = build_directory([_employee("a", "Ana", "FA"), _employee("b", "Bia", "BF")])
    purchases = enrich_purchases(
        [_purchase(1, "a", "2.00"), _purchase(2, "b", "7.00"), _purchase(3, "ghost", "3.00")],
        directory,
    )

    filtered = filter_by_company(purchases, "bf")

    assert [row.purchase.id for row in filtered] == ["p2"]
    assert len(filter_by_company(purchases, None)) == 3
    assert len(filter_by_company(purchases, "  ")) == 3


def test_unfiltered_view_is_union_of_company_views_for_resolved_data() -> None:
    directory = build_directory([_employee("a", "Ana", "FA"), _employee("b", "Bia", "BF")])
    purchases = enrich_purchases(
        [_purchase(1, "a", "2.00"), _purchase(2, "b", "7.00"), _purchase(3, "a", "3.00")],
        directory,
    )

    everything = filter_by_company(purchases, None)
    per_company = filter_by_company(purchases, "FA") + filter_by_company(purchases, "BF")

    assert sorted(row.purchase.id for row in everything) == sorted(row.purchase.id for row in per_company)


def test_normalize_company() -> None:
    assert normalize_company(" fa ") == "FA"
    assert normalize_company("") is None
    assert normalize_company(None) is None
