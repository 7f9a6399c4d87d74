"""Monthly scheduler waking periodic jobs at each month boundary."""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone, tzinfo
from typing import Awaitable, Callable

from company_store.services.reporting.period import resolve_period

logger = logging.getLogger(__name__)


def next_month_start(reference: datetime, *, tz: tzinfo | None = None) -> datetime:
    """Return the first instant of the month after ``reference`` as seen from ``tz``.

    Naive references are read as UTC.
    """

    if reference.tzinfo is None:
        reference = reference.replace(tzinfo=timezone.utc)
    return resolve_period(reference, tz=tz).end


async def run_monthly_scheduler(
    callback: Callable[[datetime], Awaitable[None]],
    *,
    tz: tzinfo | None = None,
    now_fn: Callable[[], datetime] | None = None,
    sleep_fn: Callable[[float], Awaitable[None]] = asyncio.sleep,
    iterations: int | None = None,
) -> None:
    """Invoke ``callback`` with each month boundary once it has been reached."""

    now_provider = now_fn or (lambda: datetime.now(timezone.utc))
    executed = 0

    while iterations is None or executed < iterations:
        now = now_provider()
        target = next_month_start(now, tz=tz)
        delay = max((target - now).total_seconds(), 0.0)
        logger.info("waiting for month boundary", extra={"boundary": target.isoformat(), "delay": delay})
        await sleep_fn(delay)
        await callback(target)
        executed += 1
