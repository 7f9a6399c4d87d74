"""Month boundary scheduling shared by periodic workers."""

from .scheduler import next_month_start, run_monthly_scheduler

__all__ = ["next_month_start", "run_monthly_scheduler"]
