"""Reporting: file discovery, per-file reports and aggregation."""

from perlminver.report.checker import aggregate, check_file
from perlminver.report.discovery import discover_files, is_perl_file
from perlminver.report.models import BatchReport, FileReport, MarkerReport
from perlminver.report.render import render_table

__all__ = [
    "BatchReport",
    "FileReport",
    "MarkerReport",
    "aggregate",
    "check_file",
    "discover_files",
    "is_perl_file",
    "render_table",
]
