"""Per-app state shared by the request handlers."""

from dataclasses import dataclass, field
from typing import Optional

from flask import current_app

from balance_tracker.core.cache import AccrualCache
from balance_tracker.exceptions import DataSourceError
from balance_tracker.models import Ledger

EXTENSION_KEY = "balance_tracker"


@dataclass
class TrackerState:
    """The ledger loaded at startup and the accrual cache keyed by calendar day."""

    ledger: Optional[Ledger]
    cache: AccrualCache = field(default_factory=AccrualCache)
    load_error: Optional[str] = None


def get_state() -> TrackerState:
    return current_app.extensions[EXTENSION_KEY]


def get_ledger() -> Ledger:
    """The loaded ledger; raises DataSourceError if startup loading failed."""
    state = get_state()
    if state.ledger is None:
        raise DataSourceError(state.load_error or "bank document not loaded")
    return state.ledger
