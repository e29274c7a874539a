"""Export handoff: flatten report rows and write them as CSV."""

from __future__ import annotations

import csv
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from ..core.time import FILENAME_FORMAT, localize_to_offset
from ..observability.loguru_config import get_logger
from .modes import ReportMode

if TYPE_CHECKING:
    from collections.abc import Sequence

    from .aggregator import ReportRow

__all__ = [
    "DETAILED_HEADERS",
    "GENERAL_HEADERS",
    "CsvReportExporter",
    "build_report_filename",
    "report_headers",
    "to_rows",
]

logger = get_logger("report")

GENERAL_HEADERS = ("User name", "Project name", "Issue", "Time")
DETAILED_HEADERS = (*GENERAL_HEADERS, "Start date", "End date")


def report_headers(mode: ReportMode | str) -> list[str]:
    """Column headers for a report mode."""
    if ReportMode(mode) == ReportMode.GENERAL:
        return list(GENERAL_HEADERS)
    return list(DETAILED_HEADERS)


def to_rows(rows: Sequence[ReportRow], mode: ReportMode | str) -> list[list[str]]:
    """Flatten report rows into column values in header order.

    Parameters
    ----------
    rows
        Aggregated rows
    mode
        Report mode the rows were aggregated with

    Returns
    -------
    list[list[str]]
        One list of column values per row (no header)
    """
    mode = ReportMode(mode)
    table: list[list[str]] = []

    for row in rows:
        values = [row.user_name, row.project_name, row.issue, row.time]
        if mode == ReportMode.DETAILED:
            values.extend([row.start_date or "", row.end_date or ""])
        table.append(values)

    return table


def build_report_filename(now: datetime, timezone_offset_minutes: int = 0) -> str:
    """Build a filesystem-safe report filename stamped with display time.

    >>> from datetime import timezone
    >>> build_report_filename(datetime(2025, 10, 8, 12, 30, tzinfo=timezone.utc), 120)
    'report_2025-10-08_14-30.csv'
    """
    stamp = localize_to_offset(now, timezone_offset_minutes).strftime(FILENAME_FORMAT)
    return f"report_{stamp}.csv"


class CsvReportExporter:
    """Writes report rows to comma-delimited files under a reports directory."""

    def __init__(self, reports_dir: Path | str = "reports", *, encoding: str = "utf-8") -> None:
        self.reports_dir = Path(reports_dir)
        self.encoding = encoding

    def export_rows(
        self,
        rows: Sequence[ReportRow],
        filename: str,
        mode: ReportMode | str = ReportMode.DETAILED,
    ) -> str:
        """Write rows with a header line and return the file path.

        Parameters
        ----------
        rows
            Aggregated rows
        filename
            File name (created inside ``reports_dir``)
        mode
            Report mode, selects the header and columns

        Returns
        -------
        str
            Path of the written file

        Raises
        ------
        OSError
            If the directory or file cannot be written
        """
        self.reports_dir.mkdir(parents=True, exist_ok=True)
        path = self.reports_dir / filename

        with open(path, "w", newline="", encoding=self.encoding) as f:
            writer = csv.writer(f)
            writer.writerow(report_headers(mode))
            writer.writerows(to_rows(rows, mode))

        logger.info("Report written", path=str(path), rows=len(rows))
        return str(path)
