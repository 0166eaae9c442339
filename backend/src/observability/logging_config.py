"""Structured JSON logging configuration.

Provides centralized logging setup with request ID correlation and JSON formatting.
"""

import logging
import json
import sys
from datetime import datetime, timezone

from .request_id import get_request_id, get_org_id

# Extra attributes copied into the JSON line when present on the record
_EXTRA_FIELDS = (
    "org_id",
    "user_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "client_ip",
    "error_type",
)


class RequestIDFilter(logging.Filter):
    """Add request_id (and org_id when known) to all log records."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id()
        if not hasattr(record, "org_id"):
            org_id = get_org_id()
            if org_id:
                record.org_id = org_id
        return True


class JSONFormatter(logging.Formatter):
    """Format log records as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "request_id": getattr(record, "request_id", "no-request-id"),
            "logger": record.name,
            "function": record.funcName,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["error"] = str(record.exc_info[1])
            log_data["traceback"] = self.formatException(record.exc_info)

        for field in _EXTRA_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                log_data[field] = value if isinstance(value, (int, float)) else str(value)

        return json.dumps(log_data)


def configure_logging(level: str = "INFO", json_format: bool = True) -> None:
    """Configure application-wide logging.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: If True, use JSON formatter; otherwise use simple format
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(getattr(logging, level.upper()))

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            '%(asctime)s - %(levelname)s - %(request_id)s - %(name)s.%(funcName)s - %(message)s'
        )

    handler.setFormatter(formatter)
    handler.addFilter(RequestIDFilter())
    root_logger.addHandler(handler)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance (typically get_logger(__name__))."""
    return logging.getLogger(name)
