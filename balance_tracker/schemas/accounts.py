"""Data contracts for the account views."""

import datetime as dt
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class AccountQuery(BaseModel):
    """Query parameters shared by the account views."""

    model_config = ConfigDict(extra="ignore")

    asOf: Optional[dt.date] = Field(
        None,
        description="Calendar day to compute balances for; defaults to today.",
    )


class AccountSummary(BaseModel):
    id: int
    name: str


class BalanceResponse(BaseModel):
    """Figures for the balance view, rounded to cents."""

    id: int
    name: str
    asOf: dt.date
    currentBalance: float
    currentRate: float = Field(..., description="Annual rate on asOf, as a fraction.")
    totalInterest: float
    accruedThisMonth: float
    nextMonthInterest: float
    baseBalance: float = Field(..., description="Sum of recorded transactions, ignoring interest.")
    startOfMonthBalance: float


class HistoryRow(BaseModel):
    date: dt.date
    kind: str
    amount: float
    balance: float


class HistoryResponse(BaseModel):
    id: int
    name: str
    entries: List[HistoryRow]
