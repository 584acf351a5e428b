"""
Unit tests for logging helpers and the error taxonomy.

Tests cover:
- Structured JSON formatting with test-name correlation
- Console formatting
- Header redaction and pretty JSON
- error_to_dict flattening
"""

import json
import logging
import sys

import pytest

from bookstore.core.errors import (
    BookstoreHarnessError,
    ConfigurationError,
    ContractViolation,
    TransportError,
    error_to_dict,
)
from bookstore.core.observability import (
    StructuredFormatter,
    TestConsoleFormatter,
    configure_logging,
    format_json_pretty,
    get_test_name,
    sanitize_headers,
    set_test_name,
)


def make_record(message="hello", level=logging.INFO, **extra):
    record = logging.LogRecord("bookstore.test", level, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture(autouse=True)
def clear_test_name():
    set_test_name("")
    yield
    set_test_name("")


class TestStructuredFormatter:
    def test_standard_fields(self):
        """Output is JSON with timestamp, level, logger and message."""
        payload = json.loads(StructuredFormatter().format(make_record()))
        assert payload["level"] == "INFO"
        assert payload["logger"] == "bookstore.test"
        assert payload["message"] == "hello"
        assert "timestamp" in payload

    def test_test_name_included_when_bound(self):
        """The bound test name correlates log lines."""
        set_test_name("TestBooksGet.test_get_all_books")
        assert get_test_name() == "TestBooksGet.test_get_all_books"
        payload = json.loads(StructuredFormatter().format(make_record()))
        assert payload["test"] == "TestBooksGet.test_get_all_books"

    def test_extra_fields(self):
        """Custom record attributes land under 'extra'."""
        payload = json.loads(StructuredFormatter().format(make_record(api_url="https://x")))
        assert payload["extra"] == {"api_url": "https://x"}

    def test_exception_info(self):
        """Exception type and message are included."""
        try:
            raise ValueError("bad")
        except ValueError:
            record = make_record(level=logging.ERROR)
            record.exc_info = sys.exc_info()
        payload = json.loads(StructuredFormatter().format(record))
        assert payload["exception"] == {"type": "ValueError", "message": "bad"}


class TestConsoleFormatting:
    def test_console_line(self):
        """Console lines show level, logger and message with extras below."""
        line = TestConsoleFormatter().format(make_record(body={"a": 1}))
        assert "[INFO]" in line
        assert "bookstore.test: hello" in line
        assert '"a": 1' in line

    def test_configure_logging_installs_single_handler(self):
        """configure_logging replaces root handlers and quiets httpx."""
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("DEBUG", structured=True)
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
            assert root.level == logging.DEBUG
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)


class TestHelpers:
    def test_sanitize_headers(self):
        """Sensitive headers are redacted regardless of case."""
        sanitized = sanitize_headers({"Authorization": "Bearer x", "Accept": "application/json"})
        assert sanitized == {"Authorization": "***REDACTED***", "Accept": "application/json"}

    def test_format_json_pretty(self):
        """Objects and JSON strings are pretty printed; other text is quoted."""
        assert format_json_pretty({"b": 1, "a": 2}) == '{\n  "a": 2,\n  "b": 1\n}'
        assert format_json_pretty('{"a":1}') == '{\n  "a": 1\n}'
        assert format_json_pretty("plain") == '"plain"'
        assert format_json_pretty(None) == "null"


class TestErrors:
    def test_contract_violation_dict(self):
        """Violations flatten with check, expected and actual."""
        error = ContractViolation("status_code", "expected 400 but was 200", 400, 200)
        assert error_to_dict(error) == {
            "error": "ContractViolation",
            "check": "status_code",
            "message": "expected 400 but was 200",
            "expected": 400,
            "actual": 200,
        }

    def test_transport_error_dict(self):
        """Transport errors carry method, URL and details."""
        error = TransportError("down", method="GET", url="https://x", details={"kind": "timeout"})
        assert isinstance(error, BookstoreHarnessError)
        assert error_to_dict(error) == {
            "error": "TransportError",
            "message": "down",
            "method": "GET",
            "url": "https://x",
            "details": {"kind": "timeout"},
        }

    def test_configuration_error_dict(self):
        """Errors without details omit the key."""
        assert error_to_dict(ConfigurationError("bad")) == {
            "error": "ConfigurationError",
            "message": "bad",
        }
