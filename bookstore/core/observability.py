"""
Logging setup for the bookstore API harness.

Provides:
- Structured JSON logging for CI runs
- A colorized console formatter for interactive pytest runs
- Test-name correlation via a context variable
- Header redaction and pretty JSON helpers used by HTTP exchange logging

Usage:
    from bookstore.core.observability import configure_logging

    configure_logging(settings.log_level, structured=settings.test_logging_structured)
"""

from __future__ import annotations

import json
import logging
from contextvars import ContextVar
from datetime import UTC, datetime
from typing import Any

# Name of the test whose logs are currently being emitted
_test_name_ctx: ContextVar[str] = ContextVar("test_name", default="")

SENSITIVE_HEADERS = {
    "authorization",
    "cookie",
    "set-cookie",
    "x-api-key",
    "x-auth-token",
}

_RESERVED_RECORD_KEYS = {
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
    "message",
    "asctime",
    "getMessage",
    "exc_info",
    "exc_text",
    "stack_info",
}


def get_test_name() -> str:
    """Get the test name bound to the current context."""
    return _test_name_ctx.get()


def set_test_name(test_name: str) -> None:
    """Bind a test name to the current context for log correlation."""
    _test_name_ctx.set(test_name)


def sanitize_headers(headers: dict[str, str]) -> dict[str, str]:
    """Redact sensitive headers."""
    return {
        k: "***REDACTED***" if k.lower() in SENSITIVE_HEADERS else v for k, v in headers.items()
    }


def format_json_pretty(data: Any, indent: int = 2) -> str:
    """Format JSON data with indentation; non-JSON strings are quoted as-is."""
    if data is None:
        return "null"
    if isinstance(data, (bytes, bytearray)):
        data = data.decode("utf-8", errors="replace")
    if isinstance(data, str):
        try:
            parsed = json.loads(data)
            return json.dumps(parsed, indent=indent, sort_keys=True)
        except (json.JSONDecodeError, TypeError):
            return json.dumps(data, indent=indent)
    return json.dumps(data, indent=indent, sort_keys=True, default=str)


def _extra_fields(record: logging.LogRecord) -> dict[str, Any]:
    return {k: v for k, v in record.__dict__.items() if k not in _RESERVED_RECORD_KEYS}


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs logs as JSON with standard fields:
    - timestamp: ISO 8601 format
    - level: Log level
    - logger: Logger name
    - message: Log message
    - test: Current test name (if bound)
    - extra: Any additional context from logging.extra
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        test_name = get_test_name()
        if test_name:
            log_entry["test"] = test_name

        if record.exc_info:
            log_entry["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
            }

        extra = _extra_fields(record)
        if extra:
            log_entry["extra"] = extra

        return json.dumps(log_entry, default=str)


class TestConsoleFormatter(logging.Formatter):
    """Human-readable formatter that renders nicely in pytest output."""

    __test__ = False

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        level_color = self.LEVEL_COLORS.get(record.levelname, "")
        msg = record.getMessage()

        extra_parts = []
        for key, value in _extra_fields(record).items():
            if isinstance(value, (dict, list)):
                extra_parts.append(f"{key}={format_json_pretty(value, indent=2)}")
            elif value is not None and value != "" and not str(value).startswith("<"):
                extra_parts.append(f"{key}={value}")

        if extra_parts:
            msg = f"{msg}\n  " + "\n  ".join(extra_parts)

        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"

        timestamp = datetime.fromtimestamp(record.created, tz=UTC).strftime("%H:%M:%S.%f")[:-3]
        return f"{level_color}[{timestamp}] [{record.levelname}]{self.RESET} {record.name}: {msg}"


def configure_logging(level: str = "INFO", structured: bool = False) -> None:
    """
    Configure the root logger with a single console handler.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        structured: Emit JSON lines instead of the console format
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter() if structured else TestConsoleFormatter())
    root_logger.addHandler(handler)

    # httpx logs every request at INFO; the harness does its own exchange logging
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

