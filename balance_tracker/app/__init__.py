"""Application factory and app-wide configuration."""

import logging
from typing import Optional

from flask import Flask
from flask_cors import CORS

from balance_tracker.app.api.routes import api_bp
from balance_tracker.app.state import EXTENSION_KEY, TrackerState
from balance_tracker.config import Settings, settings as default_settings
from balance_tracker.data.loader import load_ledger
from balance_tracker.exceptions import DataSourceError
from balance_tracker.logging_config import setup_logging
from balance_tracker.models import Ledger

logger = logging.getLogger(__name__)


def create_app(settings: Optional[Settings] = None, ledger: Optional[Ledger] = None) -> Flask:
    """Build the Flask app instance, loading the bank document unless a ledger is given."""
    settings = settings or default_settings
    setup_logging(settings.log_level, service=settings.service_name)

    app = Flask(__name__)

    CORS(
        app,
        resources={r"/api/*": {"origins": settings.cors_origins}},
        supports_credentials=True,
    )

    state = TrackerState(ledger=ledger)
    if ledger is None:
        try:
            state.ledger = load_ledger(settings.data_source, timeout=settings.http_timeout_seconds)
        except DataSourceError as exc:
            logger.error("could not load bank document", extra={"source": settings.data_source, "error": str(exc)})
            state.load_error = str(exc)
    app.extensions[EXTENSION_KEY] = state

    app.register_blueprint(api_bp, url_prefix="/api")
    return app
