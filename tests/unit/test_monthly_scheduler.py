from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from workers.monthly_scheduler import next_month_start, run_monthly_scheduler

SAO_PAULO = ZoneInfo("America/Sao_Paulo")


def test_next_month_start_handles_year_rollover() -> None:
    current = datetime(2023, 12, 15, 10, 0, tzinfo=timezone.utc)
    expected = datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
    assert next_month_start(current) == expected


def test_next_month_start_follows_report_zone() -> None:
    # 01:00 UTC on April 1st is still March 31st in Sao Paulo.
    current = datetime(2024, 4, 1, 1, 0, tzinfo=timezone.utc)

    boundary = next_month_start(current, tz=SAO_PAULO)

    assert boundary == datetime(2024, 4, 1, 0, 0, tzinfo=SAO_PAULO)
    assert boundary.astimezone(timezone.utc) == datetime(2024, 4, 1, 3, 0, tzinfo=timezone.utc)


def test_naive_reference_is_read_as_utc() -> None:
    assert next_month_start(datetime(2024, 2, 29, 23, 0)) == datetime(2024, 3, 1, tzinfo=timezone.utc)


def test_scheduler_passes_boundary_to_callback() -> None:
    start = datetime(2024, 3, 18, 12, 0, tzinfo=timezone.utc)
    delays: list[float] = []
    boundaries: list[datetime] = []

    async def run() -> None:
        async def fake_sleep(seconds: float) -> None:
            delays.append(seconds)

        async def callback(boundary: datetime) -> None:
            boundaries.append(boundary)

        await run_monthly_scheduler(
            callback,
            now_fn=lambda: start,
            sleep_fn=fake_sleep,
            iterations=1,
        )

    asyncio.run(run())

    target = datetime(2024, 4, 1, tzinfo=timezone.utc)
    assert boundaries == [target]
    assert delays == [(target - start).total_seconds()]
