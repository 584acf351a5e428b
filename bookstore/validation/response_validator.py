"""
Response checks for the bookstore API contract.

Each check inspects a ``ResponseHandle`` and raises ``ContractViolation``
naming the check (and the field, where there is one) on mismatch. Checks
never modify the response and can run in any order or combination.

Usage:
    from bookstore.validation import response_validator as rv

    response = books.get_by_id(1)
    rv.validate_book_response(response)
    rv.validate_response_time(response, 3000)
"""

from __future__ import annotations

from typing import Any

from bookstore.clients.response import ResponseHandle
from bookstore.core.errors import ContractViolation

BOOK_FIELDS = ("id", "title", "description", "pageCount", "excerpt", "publishDate")
AUTHOR_FIELDS = ("id", "idBook", "firstName", "lastName")


def _fail(check: str, message: str, expected: Any = None, actual: Any = None) -> None:
    raise ContractViolation(check, message, expected=expected, actual=actual)


def _json_array(response: ResponseHandle, check: str) -> list[Any]:
    data = response.json_or_none()
    if not isinstance(data, list):
        _fail(
            check,
            f"Response body is not a JSON array (status {response.status_code})",
            expected="JSON array",
            actual=type(data).__name__ if data is not None else response.text[:200],
        )
    return data


# ---------------------------------------------------------------------------
# Status
# ---------------------------------------------------------------------------


def validate_status_code(response: ResponseHandle, expected: int) -> None:
    actual = response.status_code
    if actual != expected:
        _fail(
            "status_code",
            f"Response status code expected {expected} but was {actual}",
            expected=expected,
            actual=actual,
        )


def validate_status_in(response: ResponseHandle, *allowed: int) -> None:
    """Status must be one of ``allowed``; used where several outcomes are acceptable."""
    actual = response.status_code
    if actual not in allowed:
        _fail(
            "status_in",
            f"Response status code {actual} not in expected {sorted(allowed)}",
            expected=sorted(allowed),
            actual=actual,
        )


def validate_successful_response(response: ResponseHandle) -> None:
    actual = response.status_code
    if not 200 <= actual <= 299:
        _fail(
            "successful_response",
            f"Response should be successful (2xx) but was {actual}",
            expected="200..299",
            actual=actual,
        )


def validate_client_error(response: ResponseHandle) -> None:
    actual = response.status_code
    if not 400 <= actual <= 499:
        _fail(
            "client_error",
            f"Response should be a client error (4xx) but was {actual}",
            expected="400..499",
            actual=actual,
        )


def validate_bad_request(response: ResponseHandle) -> None:
    actual = response.status_code
    if actual != 400:
        _fail(
            "bad_request",
            f"Response should be 400 Bad Request for invalid input data but was {actual}",
            expected=400,
            actual=actual,
        )


def validate_not_found(response: ResponseHandle) -> None:
    actual = response.status_code
    if actual != 404:
        _fail(
            "not_found",
            f"Response should be 404 Not Found for non-existent resource but was {actual}",
            expected=404,
            actual=actual,
        )


def validate_unprocessable_entity(response: ResponseHandle) -> None:
    actual = response.status_code
    if actual != 422:
        _fail(
            "unprocessable_entity",
            f"Response should be 422 Unprocessable Entity for logically invalid data "
            f"but was {actual}",
            expected=422,
            actual=actual,
        )


# ---------------------------------------------------------------------------
# Timing and headers
# ---------------------------------------------------------------------------


def validate_response_time(response: ResponseHandle, max_response_time_ms: float) -> None:
    actual = response.elapsed_ms
    if actual > max_response_time_ms:
        _fail(
            "response_time",
            f"Response time {actual:.0f}ms exceeds limit of {max_response_time_ms}ms",
            expected=max_response_time_ms,
            actual=round(actual, 2),
        )


def validate_header(response: ResponseHandle, header_name: str, expected_value: str) -> None:
    actual = response.header(header_name)
    if actual != expected_value:
        _fail(
            "header",
            f"Header '{header_name}' expected {expected_value!r} but was {actual!r}",
            expected=expected_value,
            actual=actual,
        )


def validate_json_content_type(response: ResponseHandle) -> None:
    content_type = response.header("content-type") or ""
    if "application/json" not in content_type.lower():
        _fail(
            "json_content_type",
            f"Content-Type header should indicate JSON but was {content_type!r}",
            expected="application/json",
            actual=content_type,
        )


# ---------------------------------------------------------------------------
# Body
# ---------------------------------------------------------------------------


def validate_response_body_not_empty(response: ResponseHandle) -> None:
    if not response.text:
        _fail("body_not_empty", "Response body should not be empty", actual="")


def validate_response_body_empty(response: ResponseHandle) -> None:
    if response.text:
        _fail(
            "body_empty",
            "Response body should be empty",
            expected="",
            actual=response.text[:200],
        )


def validate_json_field_exists(response: ResponseHandle, json_path: str) -> None:
    """Field must be present and non-null."""
    if response.json_path(json_path) is None:
        _fail(
            "json_field_exists",
            f"JSON field '{json_path}' should exist",
            expected=json_path,
            actual=None,
        )


def validate_json_field_value(response: ResponseHandle, json_path: str, expected_value: Any) -> None:
    actual = response.json_path(json_path)
    if actual != expected_value:
        _fail(
            "json_field_value",
            f"JSON field '{json_path}' expected {expected_value!r} but was {actual!r}",
            expected=expected_value,
            actual=actual,
        )


def validate_json_array(response: ResponseHandle) -> None:
    """Syntactic check on the body text: ``[`` ... ``]``."""
    body = response.text.strip()
    if not (body.startswith("[") and body.endswith("]")):
        _fail(
            "json_array",
            "Response should be a JSON array",
            expected="[...]",
            actual=body[:200],
        )


def validate_json_array_size(response: ResponseHandle, expected_size: int) -> None:
    actual = len(_json_array(response, "json_array_size"))
    if actual != expected_size:
        _fail(
            "json_array_size",
            f"JSON array size expected {expected_size} but was {actual}",
            expected=expected_size,
            actual=actual,
        )


def validate_json_array_not_empty(response: ResponseHandle) -> None:
    if not _json_array(response, "json_array_not_empty"):
        _fail("json_array_not_empty", "JSON array should not be empty", expected="> 0", actual=0)


# ---------------------------------------------------------------------------
# Resource shapes
# ---------------------------------------------------------------------------


def validate_book_response(response: ResponseHandle) -> None:
    """Successful JSON response carrying every Book field."""
    validate_successful_response(response)
    validate_json_content_type(response)
    for field_name in BOOK_FIELDS:
        validate_json_field_exists(response, field_name)


def validate_author_response(response: ResponseHandle) -> None:
    """Successful JSON response carrying every Author field."""
    validate_successful_response(response)
    validate_json_content_type(response)
    for field_name in AUTHOR_FIELDS:
        validate_json_field_exists(response, field_name)
