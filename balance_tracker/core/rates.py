"""Rate schedule lookup and monthly-rate derivation."""

from __future__ import annotations

import datetime as dt
from typing import Iterable, List, Sequence

from balance_tracker.models import RateInterval, effective_schedule


def sort_schedule(schedule: Iterable[RateInterval]) -> List[RateInterval]:
    """Return intervals ordered by start date, keeping input order on ties."""
    return sorted(schedule, key=lambda interval: interval.start_date)


def rate_on_date(schedule: Sequence[RateInterval], day: dt.date) -> float:
    """
    Annual rate in effect on ``day``.

    Both interval ends are inclusive. When intervals overlap the
    earliest-starting one wins. Uncovered dates earn nothing, so the
    result is 0.0 rather than an error.
    """
    for interval in sort_schedule(schedule):
        if interval.covers(day):
            return interval.annual_rate
    return 0.0


def monthly_rate(apy: float) -> float:
    """Compounding-equivalent monthly rate: (1 + apy)^(1/12) - 1."""
    return (1.0 + apy) ** (1.0 / 12.0) - 1.0


__all__ = [
    "sort_schedule",
    "rate_on_date",
    "monthly_rate",
    "effective_schedule",
]
