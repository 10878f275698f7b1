from __future__ import annotations

import datetime as dt
from enum import Enum
from typing import List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, field_validator, model_validator


class TransactionKind(str, Enum):
    DEPOSIT = "deposit"
    WITHDRAWAL = "withdrawal"
    INTEREST = "interest"

    @property
    def sign(self) -> int:
        return -1 if self is TransactionKind.WITHDRAWAL else 1

    @classmethod
    def parse(cls, raw: str) -> Optional["TransactionKind"]:
        """Map a source label onto a kind; ``debit`` is the legacy withdrawal label."""
        label = (raw or "").strip().lower()
        if label == "debit":
            return cls.WITHDRAWAL
        try:
            return cls(label)
        except ValueError:
            return None


class Transaction(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    date: dt.date
    kind: TransactionKind
    # Interest postings may be negative (charged on an overdrawn balance).
    amount: float

    @model_validator(mode="after")
    def ensure_recorded_amount(self) -> "Transaction":
        if self.kind is not TransactionKind.INTEREST and self.amount < 0:
            raise ValueError(f"{self.kind.value} amount must be non-negative")
        return self

    @property
    def signed_amount(self) -> float:
        return self.kind.sign * self.amount


class RateInterval(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    start_date: dt.date
    end_date: dt.date
    annual_rate: float

    @field_validator("annual_rate")
    @classmethod
    def normalize_percentage(cls, value: float) -> float:
        # "5" and "0.05" both mean five percent.
        return value / 100 if value > 1 else value

    @model_validator(mode="after")
    def ensure_valid(self) -> "RateInterval":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        # below -100% the monthly rate has no real value
        if self.annual_rate < -1:
            raise ValueError("annual_rate must not be below -1")
        return self

    def covers(self, day: dt.date) -> bool:
        return self.start_date <= day <= self.end_date


def effective_schedule(
    own: Sequence[RateInterval], fallback: Sequence[RateInterval]
) -> List[RateInterval]:
    """An account's own schedule, or the global one if and only if its own is empty."""
    return list(own) if own else list(fallback)


class Account(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    id: int
    name: str
    transactions: List[Transaction] = []
    interest_rates: List[RateInterval] = []


class Ledger(BaseModel):
    """Every account loaded from one bank document plus the global rate schedule."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    accounts: List[Account] = []
    global_rates: List[RateInterval] = []

    def find(self, account_id: int) -> Optional[Account]:
        for account in self.accounts:
            if account.id == account_id:
                return account
        return None

    def schedule_for(self, account: Account) -> List[RateInterval]:
        return effective_schedule(account.interest_rates, self.global_rates)
