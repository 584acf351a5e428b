"""
Exceptions raised by the bookstore API harness.

Three kinds of failure are distinguished:

- configuration errors, fatal when settings are resolved
- transport errors, raised for the in-flight call only
- contract violations, raised by response checks and reported by pytest
  as ordinary test failures

HTTP error statuses are not exceptions here: a 404 or 400 from the remote
service is a normal ``ResponseHandle`` that the checks inspect.
"""

from typing import Any


class BookstoreHarnessError(Exception):
    """Base exception for all harness errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(BookstoreHarnessError):
    """
    Raised when the effective configuration cannot be resolved.

    Examples:
    - ``api.request.timeout=thirty``
    - ``test.logging.enabled=maybe``
    """

    pass


class TransportError(BookstoreHarnessError):
    """
    Raised when a request never produced an HTTP response.

    Examples:
    - DNS resolution failure
    - Connection refused
    - Connect or read timeout
    """

    def __init__(
        self,
        message: str,
        method: str,
        url: str,
        details: dict[str, Any] | None = None,
    ):
        self.method = method
        self.url = url
        super().__init__(message, details)


class ContractViolation(AssertionError):
    """
    Raised when a response does not satisfy a named check.

    Subclasses ``AssertionError`` so test runners record it as a failed
    assertion rather than an error.
    """

    def __init__(
        self,
        check: str,
        message: str,
        expected: Any = None,
        actual: Any = None,
    ):
        self.check = check
        self.message = message
        self.expected = expected
        self.actual = actual
        super().__init__(f"[{check}] {message}")


def error_to_dict(error: BookstoreHarnessError | ContractViolation) -> dict[str, Any]:
    """Flatten an error for structured logs and report entries."""
    if isinstance(error, ContractViolation):
        return {
            "error": "ContractViolation",
            "check": error.check,
            "message": error.message,
            "expected": error.expected,
            "actual": error.actual,
        }

    payload: dict[str, Any] = {
        "error": error.__class__.__name__,
        "message": error.message,
    }
    if isinstance(error, TransportError):
        payload["method"] = error.method
        payload["url"] = error.url
    if error.details:
        payload["details"] = error.details
    return payload
