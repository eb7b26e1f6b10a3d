"""
Observability module for the donations core.

Provides:
- Structured logging with JSON format and correlation IDs
- Request correlation ID (request_id) propagation
- Context management for the acting user
- configure_logging(), applying the log settings at process start

Usage:
    from donations.core.observability import (
        configure_logging,
        set_correlation_id,
        set_user_id,
    )
"""

import json
import logging
from contextvars import ContextVar
from datetime import UTC, datetime

from donations.core.config import settings

# ============================================================================
# Context Variables for Request Tracking
# ============================================================================

# Correlation ID - links all logs for a single request
_request_id_ctx: ContextVar[str] = ContextVar("request_id", default="")

# User ID from the decoded token - tracks the acting user
_user_id_ctx: ContextVar[str] = ContextVar("user_id", default="")


def get_request_id() -> str:
    """Get the current request ID from context."""
    return _request_id_ctx.get()


def set_correlation_id(request_id: str) -> None:
    """Set the correlation ID for the current request context."""
    _request_id_ctx.set(request_id)


def get_user_id() -> str:
    """Get the current user ID from context."""
    return _user_id_ctx.get()


def set_user_id(user_id: str) -> None:
    """Set the user ID for the current request context."""
    _user_id_ctx.set(user_id)


# ============================================================================
# Structured Logging Configuration
# ============================================================================

_RESERVED_RECORD_KEYS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "getMessage",
        "exc_info",
        "exc_text",
        "stack_info",
    }
)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - logger: Logger name
    - message: Log message
    - request_id: Correlation ID (if available)
    - user_id: Acting user (if available)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        request_id = get_request_id()
        if request_id:
            log_entry["request_id"] = request_id

        user_id = get_user_id()
        if user_id:
            log_entry["user_id"] = user_id

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        log_entry["file"] = record.pathname
        log_entry["line"] = record.lineno
        log_entry["function"] = record.funcName

        # These come from logger.info("msg", extra={"key": "value"})
        extra_keys = {
            k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS
        }
        if extra_keys:
            log_entry["extra"] = extra_keys

        return json.dumps(log_entry, default=str)


def configure_structured_logging(level: str = "INFO") -> None:
    """
    Configure root logger with structured JSON formatting.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    root_logger.addHandler(handler)


def configure_logging() -> None:
    """
    Apply the configured log level and format. Call once at process start.

    Structured JSON output is used when observability_structured_logs is set;
    otherwise only the root level is adjusted.
    """
    if settings.observability_structured_logs:
        configure_structured_logging(settings.app_log_level)
    else:
        logging.getLogger().setLevel(
            getattr(logging, settings.app_log_level.upper(), logging.INFO)
        )
