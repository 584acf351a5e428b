"""
HTML reporting sink for test runs.

Collects one ``ReportEntry`` per test (status, categories, step log) and
writes a single self-contained, timestamped HTML file when flushed.

Entries are handed back to the caller rather than tracked as an ambient
"current test"; whoever runs the test keeps the entry and logs to it.
"""

from __future__ import annotations

import html
import platform
import threading
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path

REPORT_FILE_PREFIX = "BookstoreAPI_TestReport_"


class ReportStatus(str, Enum):
    """Status of a log line or of a whole entry."""

    INFO = "info"
    PASS = "pass"
    FAIL = "fail"
    WARNING = "warning"
    SKIP = "skip"


@dataclass
class LogLine:
    status: ReportStatus
    message: str
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    details: str | None = None


@dataclass
class ReportEntry:
    """Report record for a single test."""

    name: str
    description: str = ""
    categories: list[str] = field(default_factory=list)
    authors: list[str] = field(default_factory=list)
    logs: list[LogLine] = field(default_factory=list)
    status: ReportStatus = ReportStatus.INFO
    start_time: datetime = field(default_factory=lambda: datetime.now(UTC))
    end_time: datetime | None = None

    def _log(self, status: ReportStatus, message: str, details: str | None = None) -> None:
        self.logs.append(LogLine(status=status, message=message, details=details))

    def info(self, message: str) -> None:
        self._log(ReportStatus.INFO, message)

    def warning(self, message: str) -> None:
        self._log(ReportStatus.WARNING, message)
        if self.status == ReportStatus.INFO:
            self.status = ReportStatus.WARNING

    def passed(self, message: str) -> None:
        self._log(ReportStatus.PASS, message)
        self.status = ReportStatus.PASS
        self.end_time = datetime.now(UTC)

    def fail(self, message: str, details: str | None = None) -> None:
        self._log(ReportStatus.FAIL, message, details)
        self.status = ReportStatus.FAIL
        self.end_time = datetime.now(UTC)

    def skip(self, message: str) -> None:
        self._log(ReportStatus.SKIP, message)
        self.status = ReportStatus.SKIP
        self.end_time = datetime.now(UTC)

    def assign_category(self, category: str) -> None:
        if category not in self.categories:
            self.categories.append(category)

    def assign_author(self, author: str) -> None:
        if author not in self.authors:
            self.authors.append(author)

    @property
    def duration_ms(self) -> float:
        if self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds() * 1000


class ReportSink:
    """Collects report entries and persists them as one HTML file."""

    def __init__(
        self,
        output_dir: str | Path,
        title: str = "Bookstore API Automation Test Results",
        system_info: dict[str, str] | None = None,
    ):
        self.output_dir = Path(output_dir)
        self.title = title
        self.created_at = datetime.now()
        self.system_info: dict[str, str] = {
            "Framework": "httpx + pytest",
            "API Under Test": "FakeRestAPI Bookstore",
            "Python Version": platform.python_version(),
            "OS": platform.system(),
        }
        if system_info:
            self.system_info.update(system_info)
        self._entries: list[ReportEntry] = []
        self._lock = threading.Lock()

    @property
    def entries(self) -> list[ReportEntry]:
        with self._lock:
            return list(self._entries)

    @property
    def report_path(self) -> Path:
        stamp = self.created_at.strftime("%Y-%m-%d_%H-%M-%S")
        return self.output_dir / f"{REPORT_FILE_PREFIX}{stamp}.html"

    def set_system_info(self, key: str, value: str) -> None:
        self.system_info[key] = value

    def create_entry(self, name: str, description: str = "") -> ReportEntry:
        entry = ReportEntry(name=name, description=description)
        with self._lock:
            self._entries.append(entry)
        return entry

    def counts(self) -> dict[ReportStatus, int]:
        counts = {status: 0 for status in ReportStatus}
        for entry in self.entries:
            counts[entry.status] += 1
        return counts

    def flush(self) -> Path:
        """Write the report file (overwriting any earlier flush) and return its path."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.report_path
        path.write_text(self._render_html(), encoding="utf-8")
        return path

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_html(self) -> str:
        entries = self.entries
        return f"""<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <title>{self._escape(self.title)}</title>
    <style>{self._get_css()}</style>
</head>
<body>
    <div class="container">
        <header>
            <h1>{self._escape(self.title)}</h1>
            <div class="meta">Generated: {datetime.now(UTC).strftime("%Y-%m-%d %H:%M:%S UTC")}</div>
        </header>
        {self._render_summary_section(entries)}
        {self._render_system_info()}
        {self._render_entries_section(entries)}
    </div>
</body>
</html>
"""

    def _render_summary_section(self, entries: list[ReportEntry]) -> str:
        counts = self.counts()
        total = len(entries)
        passed = counts[ReportStatus.PASS]
        pass_rate = (passed / total * 100) if total else 0
        return f"""
        <section class="summary">
            <h2>Summary</h2>
            <div class="cards">
                <div class="card">Total<br><strong>{total}</strong></div>
                <div class="card pass">Passed<br><strong>{passed}</strong></div>
                <div class="card fail">Failed<br><strong>{counts[ReportStatus.FAIL]}</strong></div>
                <div class="card skip">Skipped<br><strong>{counts[ReportStatus.SKIP]}</strong></div>
                <div class="card">Pass rate<br><strong>{pass_rate:.1f}%</strong></div>
            </div>
        </section>
"""

    def _render_system_info(self) -> str:
        rows = "".join(
            f"<tr><th>{self._escape(k)}</th><td>{self._escape(v)}</td></tr>"
            for k, v in self.system_info.items()
        )
        return f"""
        <section class="system-info">
            <h2>Environment</h2>
            <table>{rows}</table>
        </section>
"""

    def _render_entries_section(self, entries: list[ReportEntry]) -> str:
        if not entries:
            return '<div class="alert">No tests were recorded</div>'
        return (
            '<section class="tests"><h2>Tests</h2>'
            + "".join(self._render_entry(e) for e in entries)
            + "</section>"
        )

    def _render_entry(self, entry: ReportEntry) -> str:
        tags = "".join(
            f'<span class="tag">{self._escape(tag)}</span>'
            for tag in [*entry.categories, *entry.authors]
        )
        lines = "".join(self._render_log_line(line) for line in entry.logs)
        return f"""
            <details class="test {entry.status.value}"{" open" if entry.status == ReportStatus.FAIL else ""}>
                <summary>
                    <span class="status {entry.status.value}">{entry.status.value.upper()}</span>
                    {self._escape(entry.name)} {tags}
                    <span class="duration">{entry.duration_ms:.0f}ms</span>
                </summary>
                <div class="description">{self._escape(entry.description)}</div>
                <table class="log">{lines}</table>
            </details>
"""

    def _render_log_line(self, line: LogLine) -> str:
        details = (
            f"<details><summary>Details</summary><pre>{self._escape(line.details)}</pre></details>"
            if line.details
            else ""
        )
        return (
            f'<tr class="{line.status.value}">'
            f"<td>{line.timestamp.strftime('%H:%M:%S')}</td>"
            f"<td>{line.status.value.upper()}</td>"
            f"<td><pre>{self._escape(line.message)}</pre>{details}</td></tr>"
        )

    @staticmethod
    def _escape(value: str | None) -> str:
        return html.escape(value or "")

    @staticmethod
    def _get_css() -> str:
        return """
        body { font-family: -apple-system, Segoe UI, sans-serif; background: #f5f6f8; margin: 0; }
        .container { max-width: 1200px; margin: 0 auto; padding: 24px; }
        .meta { color: #666; font-size: 0.9em; }
        .cards { display: flex; gap: 12px; }
        .card { background: #fff; border-radius: 6px; padding: 12px 18px; }
        .card.pass strong, .status.pass { color: #2e7d32; }
        .card.fail strong, .status.fail { color: #c62828; }
        .card.skip strong, .status.skip, .status.warning { color: #ef6c00; }
        details.test { background: #fff; border-radius: 6px; margin: 8px 0; padding: 8px 12px; }
        .tag { background: #e3e7ee; border-radius: 3px; font-size: 0.8em; margin-left: 6px; padding: 1px 6px; }
        .duration { color: #888; float: right; }
        table { border-collapse: collapse; width: 100%; }
        td, th { border-bottom: 1px solid #eee; padding: 4px 8px; text-align: left; vertical-align: top; }
        pre { margin: 0; white-space: pre-wrap; word-break: break-word; }
        tr.fail td { background: #fdecea; }
        tr.warning td { background: #fff8e1; }
        """
