"""Running-balance history for the transaction table and graph."""

from __future__ import annotations

import datetime as dt
from typing import List, Sequence

from pydantic import BaseModel

from balance_tracker.models import Transaction, TransactionKind


class HistoryEntry(BaseModel):
    date: dt.date
    kind: TransactionKind
    amount: float
    # balance after this entry is applied
    balance: float


def build_history(
    transactions: Sequence[Transaction],
    postings: Sequence[Transaction],
) -> List[HistoryEntry]:
    """Merge recorded transactions with interest postings, oldest first.

    On a shared date recorded transactions come before postings.
    """
    combined = sorted([*transactions, *postings], key=lambda tx: tx.date)

    balance = 0.0
    entries: List[HistoryEntry] = []
    for tx in combined:
        balance += tx.signed_amount
        entries.append(HistoryEntry(date=tx.date, kind=tx.kind, amount=tx.amount, balance=balance))
    return entries
