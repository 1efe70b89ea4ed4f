"""Parsing of kubepug JSON reports."""

from .report_parser import ReportParseError, parse_scan_report

__all__ = ["ReportParseError", "parse_scan_report"]
