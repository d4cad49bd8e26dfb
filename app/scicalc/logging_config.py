"""
Logging Configuration

Logging for the calculator package. Records go to stderr (and optionally
a file) either as plain text or as one JSON object per line.

JSON records carry the request correlation ID set by the HTTP server and
the calculator context a caller attaches with ``extra``:

    logger.info("Action failed", extra={"session_id": sid, "action": "factorial"})
"""

import logging
import sys
import json
from typing import Optional, Dict, Any
from contextvars import ContextVar

PACKAGE_LOGGER = "scicalc"

# Calculator context lifted from ``extra`` into top-level JSON fields
CONTEXT_FIELDS = ("session_id", "action", "error_kind", "expression")

# Correlation ID of the HTTP request being handled, if any
_correlation_id_ctx: ContextVar[Optional[str]] = ContextVar("correlation_id", default=None)

_logging_configured = False


def set_correlation_id(correlation_id: Optional[str]) -> None:
    """Tag log records from the current request context."""
    _correlation_id_ctx.set(correlation_id)


class JSONFormatter(logging.Formatter):
    """Formats calculator log records as single-line JSON."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        correlation_id = _correlation_id_ctx.get()
        if correlation_id:
            log_data["correlation_id"] = correlation_id

        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                # ErrorKind and friends serialize by value
                log_data[field] = getattr(value, "value", value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = True,
) -> None:
    """
    Configure the ``scicalc`` logger once per process.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        log_file: Optional file to write logs to
        json_format: JSON lines instead of plain text (default: True)
    """
    global _logging_configured

    if _logging_configured:
        return

    if json_format:
        formatter = JSONFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    package_logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    # Keep per-request access lines out of calculator logs
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger for a calculator module, e.g. get_logger("session") -> scicalc.session."""
    return logging.getLogger(f"{PACKAGE_LOGGER}.{name}")
