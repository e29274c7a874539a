"""Report window and interval clipping.

A report window is the inclusive ``[start, end]`` range a report covers plus
the fixed timezone offset used to display its timestamps.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from ..core.entries import TimeEntry
from ..core.time import MAX_OFFSET_MINUTES, ensure_utc, parse_utc_iso8601

__all__ = [
    "ReportWindow",
    "clip_entry",
]


def clip_entry(entry: TimeEntry, window_start: datetime, window_end: datetime) -> TimeEntry:
    """Truncate an entry's timestamps to lie within the window.

    The entry is mutated in place and returned. Entries with no overlap are
    not filtered: a span ending before the window gets its start pulled up to
    ``window_start`` (and vice versa), leaving a zero or negative duration.

    Parameters
    ----------
    entry
        Entry to clip
    window_start
        Window start (inclusive)
    window_end
        Window end (inclusive)

    Returns
    -------
    TimeEntry
        The same entry object
    """
    window_start = ensure_utc(window_start)
    window_end = ensure_utc(window_end)

    if entry.start_datetime < window_start:
        entry.start_datetime = window_start

    if entry.end_datetime > window_end:
        entry.end_datetime = window_end

    return entry


@dataclass(frozen=True)
class ReportWindow:
    """Immutable filter and display parameters for one report run.

    Attributes
    ----------
    start : datetime
        Window start (UTC, inclusive)
    end : datetime
        Window end (UTC, inclusive)
    timezone_offset_minutes : int
        Minutes east of UTC used to display timestamps
    """

    start: datetime
    end: datetime
    timezone_offset_minutes: int = 0

    def __post_init__(self):
        # Naive bounds are UTC
        object.__setattr__(self, "start", ensure_utc(self.start))
        object.__setattr__(self, "end", ensure_utc(self.end))

        if not -MAX_OFFSET_MINUTES <= self.timezone_offset_minutes <= MAX_OFFSET_MINUTES:
            raise ValueError(
                f"Timezone offset must be within ±{MAX_OFFSET_MINUTES} minutes, got: {self.timezone_offset_minutes}"
            )

    @classmethod
    def from_strings(cls, start_date: str, end_date: str, timezone_offset: int = 0) -> ReportWindow:
        """Build a window from ISO-8601 strings.

        Raises
        ------
        ValueError
            If either date is not valid ISO-8601 or the offset is beyond UTC±14:00
        """
        return cls(
            start=parse_utc_iso8601(start_date),
            end=parse_utc_iso8601(end_date),
            timezone_offset_minutes=int(timezone_offset),
        )

    def overlaps(self, entry: TimeEntry) -> bool:
        """Check whether the entry intersects the window at all."""
        return not (entry.end_datetime < self.start or entry.start_datetime > self.end)

    def clip(self, entry: TimeEntry) -> TimeEntry:
        """Clip entry to this window (see :func:`clip_entry`)."""
        return clip_entry(entry, self.start, self.end)
