from __future__ import annotations

import datetime as dt
from typing import Dict, Sequence, Tuple

from balance_tracker.core.accrual import AccrualResult, compute_accrual
from balance_tracker.models import RateInterval, Transaction


class AccrualCache:
    """Latest accrual result per account, keyed by the calendar day it was computed for.

    Owned by the web layer; accounts themselves carry no cached state. A
    request for a different day replaces the account's entry, so the cache
    holds at most one result per account.
    """

    def __init__(self) -> None:
        self._results: Dict[int, Tuple[dt.date, AccrualResult]] = {}

    def __len__(self) -> int:
        return len(self._results)

    def get_or_compute(
        self,
        account_id: int,
        transactions: Sequence[Transaction],
        schedule: Sequence[RateInterval],
        as_of: dt.date,
    ) -> AccrualResult:
        cached = self._results.get(account_id)
        if cached is not None and cached[0] == as_of:
            return cached[1]

        result = compute_accrual(transactions, schedule, as_of)
        self._results[account_id] = (as_of, result)
        return result

    def clear(self) -> None:
        """Drop every entry; call whenever the underlying ledger changes."""
        self._results.clear()
