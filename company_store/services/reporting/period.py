"""Calendar month periods used to scope reports."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo


@dataclass(slots=True, frozen=True)
class ReportPeriod:
    """Half-open interval ``[start, end)`` covering one calendar month."""

    start: datetime
    end: datetime

    @property
    def label(self) -> str:
        return f"{self.start.year:04d}-{self.start.month:02d}"

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end

    def previous(self) -> "ReportPeriod":
        return resolve_period(self.start - timedelta(days=1))


def _first_of_next_month(moment: datetime) -> datetime:
    year = moment.year + (1 if moment.month == 12 else 0)
    month = 1 if moment.month == 12 else moment.month + 1
    return datetime(year, month, 1, tzinfo=moment.tzinfo)


def resolve_period(reference: datetime | date | None = None, *, tz: tzinfo | None = None) -> ReportPeriod:
    """Return the month containing ``reference`` as seen from time zone ``tz``.

    ``reference`` defaults to now. Naive datetimes and plain dates are read as
    wall-clock time in ``tz``; without ``tz`` an aware reference keeps its own
    zone and a naive one is read in the host's local zone.
    """

    if reference is None:
        local = datetime.now(tz).astimezone(tz)
    elif not isinstance(reference, datetime):
        local = datetime(reference.year, reference.month, reference.day)
        local = local.replace(tzinfo=tz) if tz is not None else local.astimezone()
    elif reference.tzinfo is None:
        local = reference.replace(tzinfo=tz) if tz is not None else reference.astimezone()
    else:
        local = reference.astimezone(tz) if tz is not None else reference

    start = datetime(local.year, local.month, 1, tzinfo=local.tzinfo)
    return ReportPeriod(start=start, end=_first_of_next_month(start))


__all__ = ["ReportPeriod", "resolve_period"]
