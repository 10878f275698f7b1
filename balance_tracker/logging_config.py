"""Structured JSON logging"""

import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict

from pythonjsonlogger.json import JsonFormatter


class ServiceJsonFormatter(JsonFormatter):
    """JSON formatter that stamps every record with timestamp, level and service"""

    def __init__(self, *args: Any, service: str = "balance-tracker", **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service


def setup_logging(level: str = "INFO", service: str = "balance-tracker") -> None:
    """
    Configure structured JSON logging on the root logger.

    Handlers installed by a host process are left alone, and repeated calls
    reuse the JSON handler added by the first one.
    """
    logger = logging.getLogger()
    logger.setLevel(level)

    for existing in logger.handlers:
        if isinstance(existing.formatter, ServiceJsonFormatter):
            existing.formatter.service = service
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ServiceJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service=service))
    logger.addHandler(handler)
