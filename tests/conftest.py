"""
Pytest configuration and shared fixtures for the bookstore API suite.

Provides:
- ``--env`` / ``--api-option`` command line switches feeding the settings
- Session-scoped ``lifecycle`` (suite setup, HTML report flush at the end)
- Function-scoped ``test_context`` recording each test's outcome in the report
- ``books_client`` / ``authors_client`` for live tests
- ``mock_settings`` / ``mock_transport_factory`` for offline unit tests

Live tests carry the ``live_api`` marker and are deselected unless
``-m live_api`` is given.
"""

from __future__ import annotations

import sys
from collections.abc import Callable, Generator
from pathlib import Path
from typing import Any

ROOT = Path(__file__).resolve().parents[1]

# Make the package importable without installation
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import httpx  # noqa: E402 (import after path setup)
import pytest  # noqa: E402 (import after path setup)

from bookstore.clients import AuthorsApiClient, BooksApiClient  # noqa: E402
from bookstore.core.config import ApiSettings, get_settings  # noqa: E402
from bookstore.core.observability import configure_logging  # noqa: E402
from bookstore.lifecycle import TestContext, TestLifecycle, outcome_from_reports  # noqa: E402

MOCK_BASE_URL = "https://bookstore.test"


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("bookstore")
    group.addoption(
        "--env",
        action="store",
        default=None,
        help="Configuration overlay to apply (config-<env>.properties); defaults to BOOKSTORE_ENV or dev",
    )
    group.addoption(
        "--api-option",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Override a configuration key, e.g. --api-option api.request.timeout=5000",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "live_api: calls the real bookstore API over the network")


def _parse_api_options(values: list[str]) -> dict[str, str]:
    overrides: dict[str, str] = {}
    for item in values:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise pytest.UsageError(f"--api-option expects KEY=VALUE, got {item!r}")
        overrides[key.strip()] = value.strip()
    return overrides


@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item: pytest.Item, call: pytest.CallInfo) -> Generator[None, Any, None]:
    """Keep each phase's report on the item so fixtures can see the outcome."""
    outcome = yield
    report = outcome.get_result()
    setattr(item, f"rep_{report.when}", report)


# ---------------------------------------------------------------------------
# Live suite fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(scope="session")
def api_settings(request: pytest.FixtureRequest) -> ApiSettings:
    environment = request.config.getoption("--env")
    overrides = _parse_api_options(request.config.getoption("--api-option"))
    return get_settings(environment, overrides)


@pytest.fixture(scope="session")
def lifecycle(api_settings: ApiSettings) -> Generator[TestLifecycle, None, None]:
    configure_logging(api_settings.log_level, structured=api_settings.test_logging_structured)
    suite = TestLifecycle(settings_provider=lambda: api_settings)
    suite.suite_setup()
    yield suite
    suite.suite_teardown()


@pytest.fixture
def test_context(
    request: pytest.FixtureRequest, lifecycle: TestLifecycle
) -> Generator[TestContext, None, None]:
    node = request.node
    class_name = node.cls.__name__ if node.cls else node.module.__name__.rsplit(".", 1)[-1]
    context = lifecycle.test_setup(node.name, class_name, description=node.function.__doc__)
    yield context

    outcome, message, details = outcome_from_reports(
        getattr(node, "rep_setup", None), getattr(node, "rep_call", None)
    )
    lifecycle.test_teardown(context, outcome, message, details)


@pytest.fixture
def books_client(test_context: TestContext) -> BooksApiClient:
    return test_context.books


@pytest.fixture
def authors_client(test_context: TestContext) -> AuthorsApiClient:
    return test_context.authors


# ---------------------------------------------------------------------------
# Offline fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_settings() -> ApiSettings:
    """Settings pointing at a fake host; no files or environment involved."""
    return ApiSettings(api_base_url=MOCK_BASE_URL, test_report_path="unused")


@pytest.fixture
def mock_transport_factory() -> Callable[..., httpx.MockTransport]:
    """
    Build an ``httpx.MockTransport`` that records the requests it receives.

    The returned transport exposes ``requests`` (list of ``httpx.Request``).
    """

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.MockTransport:
        seen: list[httpx.Request] = []

        def _handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return handler(request)

        transport = httpx.MockTransport(_handler)
        transport.requests = seen  # type: ignore[attr-defined]
        return transport

    return _factory
