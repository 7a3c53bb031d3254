"""Lantern report rendering."""

from reporting.formatter import REPORT_VERSION, ReportFormatter

__all__ = ["REPORT_VERSION", "ReportFormatter"]
