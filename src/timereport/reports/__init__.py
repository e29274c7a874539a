"""Report aggregation engine: clipping, issue normalization, aggregation, export."""

from .aggregator import ReportRow, aggregate, sanitize_csv_field
from .contracts import Clock, EntrySource, ReportSink, SystemClock
from .export import CsvReportExporter, build_report_filename, report_headers, to_rows
from .issues import first_token, issue_for_mode, normalize_issue
from .modes import ReportMode
from .window import ReportWindow, clip_entry

__all__ = [
    # Window
    "ReportWindow",
    "clip_entry",
    # Issues
    "normalize_issue",
    "first_token",
    "issue_for_mode",
    # Aggregation
    "ReportMode",
    "ReportRow",
    "aggregate",
    "sanitize_csv_field",
    # Export
    "CsvReportExporter",
    "build_report_filename",
    "report_headers",
    "to_rows",
    # Collaborators
    "Clock",
    "EntrySource",
    "ReportSink",
    "SystemClock",
]
