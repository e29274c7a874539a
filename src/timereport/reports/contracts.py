"""Collaborator interfaces around the aggregation engine.

The engine itself is a pure transformation; fetching entries, writing the
export file and reading the clock are delegated to these collaborators.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

from ..core.time import get_current_utc

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..core.entries import TimeEntry
    from .aggregator import ReportRow
    from .modes import ReportMode

__all__ = [
    "Clock",
    "EntrySource",
    "ReportSink",
    "SystemClock",
]


class EntrySource(Protocol):
    """Supplies time entries for a team and date window.

    Failures (transport, query) must propagate to the caller unchanged.
    """

    async def fetch_time_entries(
        self,
        team_id: str,
        user_emails: Sequence[str],
        project_names: Sequence[str],
        start_date: str,
        end_date: str,
    ) -> list[TimeEntry]: ...


class ReportSink(Protocol):
    """Persists flattened report rows and returns the written path."""

    def export_rows(self, rows: Sequence[ReportRow], filename: str, mode: ReportMode) -> str: ...


class Clock(Protocol):
    """Time source used to stamp report filenames."""

    def now(self) -> datetime: ...


class SystemClock:
    """Clock backed by the system UTC time."""

    def now(self) -> datetime:
        return get_current_utc()
