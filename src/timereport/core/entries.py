"""Time entry model parsed from the GraphQL ``timer_v2`` payload.

Entries are owned by the caller. The only mutation the engine performs is
clipping ``start_datetime``/``end_datetime`` to the report window.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .time import ensure_utc, parse_utc_iso8601, to_epoch_millis

__all__ = [
    "MalformedEntryError",
    "ProjectRef",
    "TimeEntry",
    "UserRef",
    "parse_time_entries",
]


class MalformedEntryError(ValueError):
    """Raised when a time entry lacks a field the report needs.

    Aborts the whole aggregation rather than dropping the entry.
    """

    def __init__(self, field_name: str, entry: Any = None) -> None:
        self.field_name = field_name
        self.entry = entry
        super().__init__(f"Malformed time entry: missing or invalid '{field_name}'")


@dataclass(frozen=True)
class ProjectRef:
    """Project the entry was logged against."""

    name: str


@dataclass(frozen=True)
class UserRef:
    """User who logged the entry."""

    email: str
    username: str


@dataclass
class TimeEntry:
    """Single recorded interval of work.

    Attributes
    ----------
    issue : str | None
        Free-text issue, possibly URL-encoded and prefixed with an estimate
    start_datetime : datetime
        Start timestamp (UTC, aware)
    end_datetime : datetime
        End timestamp (UTC, aware); not guaranteed to follow the start
    project : ProjectRef
        Project reference
    user : UserRef
        User reference
    """

    issue: str | None
    start_datetime: datetime
    end_datetime: datetime
    project: ProjectRef
    user: UserRef

    def __post_init__(self):
        # Naive timestamps are UTC
        if isinstance(self.start_datetime, datetime):
            self.start_datetime = ensure_utc(self.start_datetime)
        if isinstance(self.end_datetime, datetime):
            self.end_datetime = ensure_utc(self.end_datetime)

    @property
    def start_ms(self) -> int:
        return to_epoch_millis(self.start_datetime)

    @property
    def end_ms(self) -> int:
        return to_epoch_millis(self.end_datetime)

    @property
    def duration_ms(self) -> int:
        """Signed span in milliseconds; negative when end precedes start."""
        return self.end_ms - self.start_ms

    def validate(self) -> None:
        """Fail fast on entries missing project or user data.

        Raises
        ------
        MalformedEntryError
            If project name, user email or username is missing
        """
        if self.project is None or not isinstance(self.project.name, str):
            raise MalformedEntryError("project.name", self)
        if self.user is None:
            raise MalformedEntryError("user", self)
        if not isinstance(self.user.email, str):
            raise MalformedEntryError("user.email", self)
        if not isinstance(self.user.username, str):
            raise MalformedEntryError("user.username", self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TimeEntry:
        """Build an entry from one ``timer_v2`` record.

        Parameters
        ----------
        data
            Record with ``issue``, ``start_datetime``, ``end_datetime``,
            ``project {name}`` and ``user {email username}``

        Returns
        -------
        TimeEntry
            Parsed entry

        Raises
        ------
        MalformedEntryError
            If a required field is missing or a timestamp cannot be parsed
        """
        project = data.get("project")
        if not isinstance(project, dict) or not isinstance(project.get("name"), str):
            raise MalformedEntryError("project.name", data)

        user = data.get("user")
        if not isinstance(user, dict):
            raise MalformedEntryError("user", data)
        if not isinstance(user.get("email"), str):
            raise MalformedEntryError("user.email", data)
        if not isinstance(user.get("username"), str):
            raise MalformedEntryError("user.username", data)

        return cls(
            issue=data.get("issue"),
            start_datetime=_parse_timestamp(data, "start_datetime"),
            end_datetime=_parse_timestamp(data, "end_datetime"),
            project=ProjectRef(name=project["name"]),
            user=UserRef(email=user["email"], username=user["username"]),
        )


def _parse_timestamp(data: dict[str, Any], key: str) -> datetime:
    value = data.get(key)
    if isinstance(value, datetime):
        return ensure_utc(value)
    if not isinstance(value, str) or not value:
        raise MalformedEntryError(key, data)
    try:
        return parse_utc_iso8601(value)
    except ValueError as exc:
        raise MalformedEntryError(key, data) from exc


def parse_time_entries(records: list[dict[str, Any]]) -> list[TimeEntry]:
    """Parse a list of ``timer_v2`` records, preserving order."""
    return [TimeEntry.from_dict(record) for record in records]
