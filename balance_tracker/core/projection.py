from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel

from balance_tracker.core.rates import monthly_rate

DEFAULT_PROJECTION_MONTHS = 12
MAX_PROJECTION_MONTHS = 600


class ProjectionPoint(BaseModel):
    month: int
    balance: float


def coerce_month_count(raw: Optional[object]) -> int:
    """Requested horizon as a positive month count, capped at 50 years; anything unusable becomes 12."""
    if raw is None or isinstance(raw, bool):
        return DEFAULT_PROJECTION_MONTHS
    try:
        months = int(str(raw).strip())
    except ValueError:
        return DEFAULT_PROJECTION_MONTHS
    if months <= 0:
        return DEFAULT_PROJECTION_MONTHS
    return min(months, MAX_PROJECTION_MONTHS)


def project(current_balance: float, current_apy: float, month_count: int) -> List[ProjectionPoint]:
    """
    Compound ``current_balance`` forward for ``month_count`` months.

    Uses one frozen rate for the whole horizon; future schedule changes are
    not modelled. Returns month_count + 1 points starting at month 0.
    """
    rate = monthly_rate(current_apy)

    balance = float(current_balance)
    points: List[ProjectionPoint] = [ProjectionPoint(month=0, balance=balance)]
    for month in range(1, max(month_count, 0) + 1):
        balance = balance * (1.0 + rate)
        points.append(ProjectionPoint(month=month, balance=balance))

    return points


__all__ = [
    "DEFAULT_PROJECTION_MONTHS",
    "MAX_PROJECTION_MONTHS",
    "ProjectionPoint",
    "coerce_month_count",
    "project",
]
