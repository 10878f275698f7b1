from __future__ import annotations

import calendar
import datetime as dt
import logging
from collections import defaultdict
from typing import Dict, List, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from balance_tracker.core.rates import monthly_rate, rate_on_date
from balance_tracker.models import RateInterval, Transaction, TransactionKind

logger = logging.getLogger(__name__)


class AccrualResult(BaseModel):
    """Balance and interest figures for one account as of a given day.

    All amounts are unrounded; callers round for display.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    base_balance: float = 0.0
    total_interest_credited: float = 0.0
    accrued_current_month: float = 0.0
    current_balance_with_interest: float = 0.0
    posted_interest_transactions: List[Transaction] = []
    start_of_current_month_balance: float = 0.0
    next_month_estimated_interest: float = 0.0
    current_annual_rate: float = 0.0


def first_of_month(day: dt.date) -> dt.date:
    return day.replace(day=1)


def days_in_month(day: dt.date) -> int:
    return calendar.monthrange(day.year, day.month)[1]


def last_of_month(day: dt.date) -> dt.date:
    return day.replace(day=days_in_month(day))


def next_month(day: dt.date) -> dt.date:
    """First day of the month after ``day``'s month."""
    return last_of_month(day) + dt.timedelta(days=1)


def _month_key(day: dt.date) -> Tuple[int, int]:
    return day.year, day.month


def compute_accrual(
    transactions: Sequence[Transaction],
    schedule: Sequence[RateInterval],
    as_of: dt.date,
) -> AccrualResult:
    """
    Replay an account month by month and post interest for each closed month.

    Order of operations (per closed month):
      1) Resolve the annual rate on the month's first day.
      2) Interest = balance carried INTO the month * monthly rate; the
         month's own transactions earn nothing until the next month.
      3) Post non-zero interest dated the month's last day.
      4) Carry balance + interest + the month's transactions forward.

    The current (open) month is prorated linearly by elapsed days instead
    of posted. Transactions dated after ``as_of`` are ignored.
    """
    ordered = sorted(transactions, key=lambda tx: tx.date)
    base_balance = sum(tx.signed_amount for tx in ordered)

    first_deposit = next((tx for tx in ordered if tx.signed_amount > 0), None)
    if first_deposit is None:
        # never funded: no interest, balance is whatever was withdrawn
        return AccrualResult(
            base_balance=base_balance,
            current_balance_with_interest=base_balance,
        )

    clock_start = first_of_month(first_deposit.date)
    current_month_start = first_of_month(as_of)
    last_full_month_end = current_month_start - dt.timedelta(days=1)

    seed_cutoff = min(clock_start, current_month_start)
    running_balance = sum(tx.signed_amount for tx in ordered if tx.date < seed_cutoff)

    month_totals: Dict[Tuple[int, int], float] = defaultdict(float)
    for tx in ordered:
        if seed_cutoff <= tx.date < current_month_start:
            month_totals[_month_key(tx.date)] += tx.signed_amount

    postings: List[Transaction] = []
    total_interest = 0.0

    month = clock_start
    while month <= last_full_month_end:
        interest = running_balance * monthly_rate(rate_on_date(schedule, month))
        if interest != 0:
            postings.append(
                Transaction(date=last_of_month(month), kind=TransactionKind.INTEREST, amount=interest)
            )
            total_interest += interest
        running_balance += interest + month_totals.get(_month_key(month), 0.0)
        month = next_month(month)

    start_of_month_balance = running_balance

    full_month_interest = start_of_month_balance * monthly_rate(rate_on_date(schedule, current_month_start))
    month_days = days_in_month(as_of)
    accrued = full_month_interest * min(month_days, as_of.day) / month_days

    month_to_date = sum(
        tx.signed_amount for tx in ordered if current_month_start <= tx.date <= as_of
    )

    predicted_next_start = start_of_month_balance + full_month_interest + month_to_date
    next_estimate = predicted_next_start * monthly_rate(rate_on_date(schedule, next_month(as_of)))

    logger.debug(
        "accrual computed",
        extra={"as_of": as_of.isoformat(), "postings": len(postings), "total_interest": total_interest},
    )

    return AccrualResult(
        base_balance=base_balance,
        total_interest_credited=total_interest,
        accrued_current_month=accrued,
        current_balance_with_interest=start_of_month_balance + month_to_date + accrued,
        posted_interest_transactions=postings,
        start_of_current_month_balance=start_of_month_balance,
        next_month_estimated_interest=next_estimate,
        current_annual_rate=rate_on_date(schedule, as_of),
    )


__all__ = [
    "AccrualResult",
    "compute_accrual",
    "first_of_month",
    "last_of_month",
    "next_month",
    "days_in_month",
]
