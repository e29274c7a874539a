"""Core types and time handling for report generation."""

from .entries import MalformedEntryError, ProjectRef, TimeEntry, UserRef, parse_time_entries
from .time import (
    ensure_utc,
    format_duration,
    format_timestamp,
    format_utc_iso8601,
    from_epoch_millis,
    get_current_utc,
    parse_utc_iso8601,
    to_epoch_millis,
)

__all__ = [
    # Entries
    "MalformedEntryError",
    "ProjectRef",
    "TimeEntry",
    "UserRef",
    "parse_time_entries",
    # Time
    "ensure_utc",
    "format_duration",
    "format_timestamp",
    "format_utc_iso8601",
    "from_epoch_millis",
    "get_current_utc",
    "parse_utc_iso8601",
    "to_epoch_millis",
]
