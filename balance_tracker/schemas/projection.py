"""Data contracts for the projection view."""

from typing import List, Optional

from pydantic import BaseModel, Field

from balance_tracker.core.projection import MAX_PROJECTION_MONTHS
from balance_tracker.schemas.accounts import AccountQuery


class ProjectionQuery(AccountQuery):
    # Kept raw: unusable values fall back to the default horizon instead of failing.
    months: Optional[str] = Field(None, description="Months to project; defaults to 12, capped at 600.")


class ProjectionRow(BaseModel):
    month: int = Field(..., ge=0)
    balance: float


class ProjectionResponse(BaseModel):
    """Month-by-month balance under today's rate."""

    id: int
    name: str
    startingBalance: float
    annualRate: float
    monthlyRate: float
    months: int = Field(..., ge=1, le=MAX_PROJECTION_MONTHS)
    points: List[ProjectionRow]
