"""Reporting sink for test runs."""

from .reporter import LogLine, ReportEntry, ReportSink, ReportStatus

__all__ = ["LogLine", "ReportEntry", "ReportSink", "ReportStatus"]
