"""
Suite and per-test lifecycle for the live API suite.

``TestLifecycle`` owns the settings snapshot, both resource clients and the
report sink for one run. Each test gets a ``TestContext`` back from
``test_setup`` and hands it to ``test_teardown``; nothing is kept in
thread-local or global "current test" state.
"""

from __future__ import annotations

import logging
import re
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import httpx

from bookstore.clients import AuthorsApiClient, BooksApiClient
from bookstore.core.config import ApiSettings, get_settings
from bookstore.core.errors import BookstoreHarnessError, ContractViolation, error_to_dict
from bookstore.core.observability import format_json_pretty, set_test_name
from bookstore.reporting import ReportEntry, ReportSink

logger = logging.getLogger(__name__)

DEFAULT_AUTHOR = "API Test Framework"

OUTCOME_PASSED = "passed"
OUTCOME_FAILED = "failed"
OUTCOME_SKIPPED = "skipped"


def humanize_test_name(test_name: str) -> str:
    """``test_getBookById_notFound`` -> ``test get Book By Id not Found``."""
    spaced = re.sub(r"([A-Z])", r" \1", test_name.replace("_", " "))
    return " ".join(spaced.split())


def _failure_message(report: Any) -> str:
    crash = getattr(report.longrepr, "reprcrash", None)
    if crash is not None:
        return crash.message
    return str(report.longrepr).splitlines()[-1] if report.longrepr else "Unknown error"


def _skip_reason(report: Any) -> str:
    if isinstance(report.longrepr, tuple):
        return str(report.longrepr[2]).removeprefix("Skipped: ")
    return str(report.longrepr or "")


def outcome_from_reports(
    setup_report: Any | None, call_report: Any | None
) -> tuple[str, str | None, str | None]:
    """
    Map pytest phase reports to ``(outcome, message, details)``.

    A failed or skipped setup decides the outcome when the call never ran.
    """
    if call_report is None:
        if setup_report is not None and setup_report.failed:
            return (
                OUTCOME_FAILED,
                f"Setup failed: {_failure_message(setup_report)}",
                setup_report.longreprtext,
            )
        if setup_report is not None and setup_report.skipped:
            return OUTCOME_SKIPPED, _skip_reason(setup_report), None
        return OUTCOME_SKIPPED, "Test did not run", None
    if call_report.passed:
        return OUTCOME_PASSED, None, None
    if call_report.skipped:
        return OUTCOME_SKIPPED, _skip_reason(call_report), None
    return OUTCOME_FAILED, _failure_message(call_report), call_report.longreprtext


@dataclass
class TestContext:
    """Everything a single test needs, passed explicitly."""

    __test__ = False

    name: str
    class_name: str
    settings: ApiSettings
    books: BooksApiClient
    authors: AuthorsApiClient
    entry: ReportEntry

    @property
    def qualified_name(self) -> str:
        return f"{self.class_name}.{self.name}"

    def step(self, name: str, description: str) -> None:
        self.entry.info(f"{name} - {description}")
        logger.info("Step: %s - %s", name, description)

    def info(self, message: str) -> None:
        logger.info(message)
        self.entry.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)
        self.entry.warning(message)

    def error(self, message: str, exc: BaseException) -> None:
        if isinstance(exc, (BookstoreHarnessError, ContractViolation)):
            flattened = error_to_dict(exc)
            logger.error(message, exc_info=exc, extra={"error_details": flattened})
            self.entry.fail(f"{message}\n{exc}", format_json_pretty(flattened))
            return
        logger.error(message, exc_info=exc)
        self.entry.fail(f"{message}\n{exc}")

    @staticmethod
    def timestamp() -> str:
        """Milliseconds since the epoch, for unique test data."""
        return str(int(time.time() * 1000))

    @staticmethod
    def wait_for(milliseconds: int) -> None:
        """Pause between calls that depend on the previous one settling."""
        time.sleep(milliseconds / 1000)


class TestLifecycle:
    """Suite-wide setup and teardown plus per-test bookkeeping."""

    __test__ = False

    def __init__(
        self,
        settings_provider: Callable[[], ApiSettings] = get_settings,
        transport: httpx.BaseTransport | None = None,
    ):
        self.settings_provider = settings_provider
        self.transport = transport
        self.settings: ApiSettings | None = None
        self.books: BooksApiClient | None = None
        self.authors: AuthorsApiClient | None = None
        self.sink: ReportSink | None = None
        self._init_lock = threading.Lock()

    def _initialize(self) -> None:
        self.settings = self.settings_provider()
        self.books = BooksApiClient(self.settings, transport=self.transport)
        self.authors = AuthorsApiClient(self.settings, transport=self.transport)
        self.sink = ReportSink(
            self.settings.test_report_path,
            system_info={
                "Environment": self.settings.test_environment,
                "Base URL": self.settings.api_base_url,
            },
        )

    def suite_setup(self) -> None:
        logger.info("=== Starting API Test Suite ===")
        with self._init_lock:
            self._initialize()
        logger.info("Configuration loaded for environment: %s", self.settings.test_environment)
        reachable = self.verify_connectivity()
        self.sink.set_system_info("API Status", "Reachable" if reachable else "Unreachable")
        logger.info("=== Suite Setup Complete ===")

    def verify_connectivity(self) -> bool:
        """Check both collections; an unreachable API is a warning, not a failure."""
        logger.info("Verifying API connectivity...")
        books_ok = self.books.is_reachable()
        authors_ok = self.authors.is_reachable()
        if books_ok and authors_ok:
            logger.info("API connectivity verified successfully")
            return True
        logger.warning(
            "API connectivity check failed, but continuing with tests. Books API: %s, Authors API: %s",
            "OK" if books_ok else "FAILED",
            "OK" if authors_ok else "FAILED",
        )
        return False

    def test_setup(
        self,
        test_name: str,
        class_name: str,
        description: str | None = None,
    ) -> TestContext:
        if self.settings is None:
            with self._init_lock:
                if self.settings is None:
                    logger.warning("Suite setup did not run, initializing in test setup")
                    self._initialize()

        set_test_name(f"{class_name}.{test_name}")
        logger.info("Starting test: %s.%s", class_name, test_name)

        entry = self.sink.create_entry(
            test_name, description or f"API Test: {humanize_test_name(test_name)}"
        )
        entry.assign_category(class_name)
        entry.assign_author(DEFAULT_AUTHOR)
        entry.info(f"Environment: {self.settings.test_environment}")
        entry.info(f"API Base URL: {self.settings.api_base_url}")
        entry.info(f"Test Started at: {datetime.now().isoformat(timespec='seconds')}")

        return TestContext(
            name=test_name,
            class_name=class_name,
            settings=self.settings,
            books=self.books,
            authors=self.authors,
            entry=entry,
        )

    def test_teardown(
        self,
        context: TestContext,
        outcome: str,
        message: str | None = None,
        details: str | None = None,
    ) -> None:
        """
        Record the final outcome on the test's report entry.

        Args:
            context: Context returned by ``test_setup``
            outcome: ``passed``, ``failed`` or ``skipped``
            message: Failure or skip reason
            details: Longer failure output (traceback)
        """
        if outcome == OUTCOME_PASSED:
            context.entry.passed("Test passed successfully")
        elif outcome == OUTCOME_FAILED:
            context.entry.fail(f"Test failed: {message or 'Unknown error'}", details)
        elif outcome == OUTCOME_SKIPPED:
            context.entry.skip(f"Test skipped: {message or 'No reason given'}")
        else:
            raise ValueError(f"Unknown test outcome: {outcome!r}")

        logger.info("Completed test: %s (%s)", context.qualified_name, outcome)
        set_test_name("")

    def suite_teardown(self) -> Path | None:
        logger.info("=== Finalizing Test Suite ===")
        report_path = None
        try:
            if self.sink is not None:
                report_path = self.sink.flush()
                logger.info("Test report generated at: %s", report_path)
        finally:
            for client in (self.books, self.authors):
                if client is not None:
                    client.close()
        logger.info("=== Test Suite Complete ===")
        return report_path
