"""Shared fixtures for timereport tests."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from timereport.core.entries import TimeEntry
from timereport.reports.window import ReportWindow


def make_record(
    issue: str | None,
    start: str,
    end: str,
    *,
    project: str = "Website",
    email: str = "dev@example.com",
    username: str = "dev",
) -> dict[str, Any]:
    """Build one ``timer_v2`` record as returned by the data service."""
    return {
        "issue": issue,
        "start_datetime": start,
        "end_datetime": end,
        "project": {"name": project},
        "user": {"email": email, "username": username},
    }


class FixedClock:
    """Clock returning a constant instant."""

    def __init__(self, instant: datetime) -> None:
        self.instant = instant

    def now(self) -> datetime:
        return self.instant


@pytest.fixture
def record_factory():
    """Factory building raw ``timer_v2`` records."""
    return make_record


@pytest.fixture
def entry_factory():
    """Factory building fresh TimeEntry objects from record arguments."""

    def factory(issue: str | None, start: str, end: str, **kwargs: Any) -> TimeEntry:
        return TimeEntry.from_dict(make_record(issue, start, end, **kwargs))

    return factory


@pytest.fixture
def october_window() -> ReportWindow:
    """Window covering October 2025 in UTC."""
    return ReportWindow(
        start=datetime(2025, 10, 1, 0, 0, 0, tzinfo=timezone.utc),
        end=datetime(2025, 10, 31, 23, 59, 59, tzinfo=timezone.utc),
    )


@pytest.fixture
def fixed_clock() -> FixedClock:
    return FixedClock(datetime(2025, 10, 8, 12, 30, 0, tzinfo=timezone.utc))


@pytest.fixture(autouse=True)
def reset_settings():
    """Reset the global settings instance around each test."""
    import timereport.config.settings as settings_module

    settings_module._settings = None
    yield
    settings_module._settings = None
