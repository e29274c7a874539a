"""Time utilities for report generation.

Provides consistent timestamp handling across the engine with:
- UTC discipline: all entry timestamps are normalized to UTC
- Epoch-millisecond arithmetic for durations
- Offset-driven display formatting (never host timezone or locale)
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytz

__all__ = [
    "DISPLAY_FORMAT",
    "FILENAME_FORMAT",
    "MAX_OFFSET_MINUTES",
    "ensure_utc",
    "format_duration",
    "format_timestamp",
    "format_utc_iso8601",
    "from_epoch_millis",
    "get_current_utc",
    "localize_to_offset",
    "parse_utc_iso8601",
    "to_epoch_millis",
]

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"
FILENAME_FORMAT = "%Y-%m-%d_%H-%M"

# UTC-14:00 .. UTC+14:00
MAX_OFFSET_MINUTES = 14 * 60

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_ONE_MS = timedelta(milliseconds=1)


def get_current_utc() -> datetime:
    """Get current time in UTC.

    Returns
    -------
    datetime
        Current time in UTC with timezone info
    """
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Attach UTC to a naive datetime; aware values are returned unchanged."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt


def parse_utc_iso8601(iso_string: str) -> datetime:
    """Parse ISO-8601 string to UTC datetime.

    Naive values are taken to be UTC already.

    Parameters
    ----------
    iso_string
        ISO-8601 formatted string

    Returns
    -------
    datetime
        Datetime in UTC

    Raises
    ------
    ValueError
        If string is not valid ISO-8601

    Example
    -------
    >>> dt = parse_utc_iso8601("2025-10-08T14:30:00+02:00")
    >>> dt.hour
    12
    """
    # Handle 'Z' suffix (Zulu time = UTC)
    iso_string = iso_string.strip().replace("Z", "+00:00")

    dt = datetime.fromisoformat(iso_string)

    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def format_utc_iso8601(dt: datetime) -> str:
    """Format datetime as ISO-8601 UTC string.

    Example
    -------
    >>> dt = datetime(2025, 10, 8, 12, 30, 0, tzinfo=timezone.utc)
    >>> format_utc_iso8601(dt)
    '2025-10-08T12:30:00+00:00'
    """
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.isoformat()


def to_epoch_millis(dt: datetime) -> int:
    """Convert a datetime to integer milliseconds since the Unix epoch.

    Example
    -------
    >>> to_epoch_millis(datetime(1970, 1, 1, 0, 0, 1, tzinfo=timezone.utc))
    1000
    """
    return (ensure_utc(dt) - _EPOCH) // _ONE_MS


def from_epoch_millis(epoch_ms: int) -> datetime:
    """Convert milliseconds since the Unix epoch to a UTC datetime."""
    return _EPOCH + timedelta(milliseconds=epoch_ms)


def localize_to_offset(utc_dt: datetime, timezone_offset_minutes: int) -> datetime:
    """Shift a UTC datetime into a fixed-offset display zone.

    Parameters
    ----------
    utc_dt
        Aware (or naive UTC) datetime
    timezone_offset_minutes
        Minutes east of UTC (negative for west)

    Returns
    -------
    datetime
        Datetime expressed in the fixed-offset zone
    """
    return ensure_utc(utc_dt).astimezone(pytz.FixedOffset(timezone_offset_minutes))


def format_timestamp(epoch_ms: int, timezone_offset_minutes: int = 0) -> str:
    """Render an absolute timestamp as ``YYYY-MM-DD HH:mm`` in a fixed offset.

    Parameters
    ----------
    epoch_ms
        Milliseconds since the Unix epoch
    timezone_offset_minutes
        Minutes east of UTC used for display

    Returns
    -------
    str
        Display string, independent of host timezone and locale

    Example
    -------
    >>> format_timestamp(0, 120)
    '1970-01-01 02:00'
    >>> format_timestamp(0, -90)
    '1969-12-31 22:30'
    """
    local_dt = localize_to_offset(from_epoch_millis(epoch_ms), timezone_offset_minutes)
    return local_dt.strftime(DISPLAY_FORMAT)


def format_duration(total_ms: int) -> str:
    """Render a duration in milliseconds as ``H:MM:SS``.

    Hours are not wrapped into days. Sub-second remainders are truncated.
    Negative durations keep a leading minus sign.

    Example
    -------
    >>> format_duration(5_400_000)
    '1:30:00'
    >>> format_duration(90_061_999)
    '25:01:01'
    >>> format_duration(-1_800_000)
    '-0:30:00'
    """
    sign = "-" if total_ms < 0 else ""
    total_seconds = abs(int(total_ms)) // 1000
    hours, remainder = divmod(total_seconds, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{sign}{hours}:{minutes:02d}:{seconds:02d}"
