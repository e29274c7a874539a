"""Time entry aggregation into report rows.

Clips entries to the report window, merges entries sharing an aggregation
key, sums their durations and shapes the result for the requested mode.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..core.time import format_duration, format_timestamp
from ..observability.loguru_config import get_logger
from .issues import issue_for_mode
from .modes import ReportMode

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ..core.entries import TimeEntry
    from .window import ReportWindow

__all__ = [
    "AggregationKey",
    "ReportRow",
    "aggregate",
    "sanitize_csv_field",
]

logger = get_logger("report")

AggregationKey = tuple[str, str, str]


def sanitize_csv_field(value: str) -> str:
    """Replace commas with semicolons so the value survives comma-delimited output."""
    return value.replace(",", ";")


@dataclass(frozen=True)
class ReportRow:
    """One aggregated report line.

    Attributes
    ----------
    user_name : str
        Username, commas replaced by semicolons
    project_name : str
        Project name, commas replaced by semicolons
    issue : str
        Normalized issue (first token only in general mode)
    time : str
        Accumulated duration as ``H:MM:SS``
    duration_ms : int
        Accumulated duration in milliseconds
    start_date : str | None
        Display start date (detailed mode only)
    end_date : str | None
        Display end date (detailed mode only)
    """

    user_name: str
    project_name: str
    issue: str
    time: str
    duration_ms: int
    start_date: str | None = None
    end_date: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (dates omitted for general rows)."""
        data: dict[str, Any] = {
            "user_name": self.user_name,
            "project_name": self.project_name,
            "issue": self.issue,
            "time": self.time,
        }
        if self.start_date is not None or self.end_date is not None:
            data["start_date"] = self.start_date
            data["end_date"] = self.end_date
        return data


class RowAccumulator:
    """Running totals for one aggregation key.

    The start timestamp and end display date are fixed by the first entry
    seen for the key; later entries only add to the duration.
    """

    def __init__(
        self,
        user_name: str,
        project_name: str,
        issue: str,
        start_ms: int,
        end_date: str | None,
    ) -> None:
        self.user_name = user_name
        self.project_name = project_name
        self.issue = issue
        self.start_ms = start_ms
        self.end_date = end_date
        self.total_ms = 0

    def add(self, duration_ms: int) -> None:
        """Add one entry's duration."""
        self.total_ms += duration_ms

    def to_row(self, mode: ReportMode, timezone_offset_minutes: int) -> ReportRow:
        """Format the accumulated values for output."""
        if mode == ReportMode.GENERAL:
            return ReportRow(
                user_name=self.user_name,
                project_name=self.project_name,
                issue=self.issue,
                time=format_duration(self.total_ms),
                duration_ms=self.total_ms,
            )

        return ReportRow(
            user_name=self.user_name,
            project_name=self.project_name,
            issue=self.issue,
            time=format_duration(self.total_ms),
            duration_ms=self.total_ms,
            start_date=format_timestamp(self.start_ms, timezone_offset_minutes),
            end_date=self.end_date,
        )


def _sort_accumulators(accumulators: list[RowAccumulator], mode: ReportMode) -> list[RowAccumulator]:
    if mode == ReportMode.GENERAL:
        # Stable: rows of the same project keep insertion order
        return sorted(accumulators, key=lambda acc: acc.project_name)

    # Ascending by raw start then reversed, so equal starts flip order too
    ordered = sorted(accumulators, key=lambda acc: acc.start_ms)
    ordered.reverse()
    return ordered


def aggregate(
    entries: Iterable[TimeEntry],
    window: ReportWindow,
    mode: ReportMode | str = ReportMode.DETAILED,
    *,
    clamp_negative: bool = False,
) -> list[ReportRow]:
    """Collapse time entries into deduplicated, clipped, sorted report rows.

    Each entry is clipped to the window (in place), its issue normalized for
    the mode, and its duration added to the row for its aggregation key
    ``(issue, project name, user email)``.

    Parameters
    ----------
    entries
        Time entries, processed in iteration order
    window
        Report window (clipping bounds and display offset)
    mode
        DETAILED (rows with dates, newest first) or GENERAL (rows by issue
        token, sorted by project name)
    clamp_negative
        If True, spans whose clipped end precedes the clipped start count
        as zero instead of being subtracted

    Returns
    -------
    list[ReportRow]
        Formatted rows in output order

    Raises
    ------
    MalformedEntryError
        If any entry lacks project or user data
    """
    mode = ReportMode(mode)
    offset = window.timezone_offset_minutes
    accumulators: dict[AggregationKey, RowAccumulator] = {}
    outside_window = 0

    for entry in entries:
        entry.validate()

        if not window.overlaps(entry):
            outside_window += 1
        window.clip(entry)

        duration_ms = entry.duration_ms
        if clamp_negative and duration_ms < 0:
            duration_ms = 0

        issue = issue_for_mode(entry.issue, mode)
        key: AggregationKey = (issue, entry.project.name, entry.user.email)

        accumulator = accumulators.get(key)
        if accumulator is None:
            accumulator = RowAccumulator(
                user_name=sanitize_csv_field(entry.user.username),
                project_name=sanitize_csv_field(entry.project.name),
                issue=issue,
                start_ms=entry.start_ms,
                end_date=format_timestamp(entry.end_ms, offset) if mode == ReportMode.DETAILED else None,
            )
            accumulators[key] = accumulator

        accumulator.add(duration_ms)

    if outside_window:
        logger.debug("Entries outside report window", count=outside_window, mode=mode.value)

    ordered = _sort_accumulators(list(accumulators.values()), mode)
    rows = [accumulator.to_row(mode, offset) for accumulator in ordered]

    logger.debug("Aggregated report rows", rows=len(rows), mode=mode.value)
    return rows
