"""Tests for TimeEntry parsing and validation."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from timereport.core.entries import MalformedEntryError, ProjectRef, TimeEntry, UserRef, parse_time_entries


def test_from_dict(record_factory):
    record = record_factory("WOB-1", "2025-10-08T10:00:00Z", "2025-10-08T10:30:00+00:00", username="alice")

    entry = TimeEntry.from_dict(record)

    assert entry.issue == "WOB-1"
    assert entry.start_datetime == datetime(2025, 10, 8, 10, 0, tzinfo=timezone.utc)
    assert entry.end_datetime == datetime(2025, 10, 8, 10, 30, tzinfo=timezone.utc)
    assert entry.project == ProjectRef(name="Website")
    assert entry.user == UserRef(email="dev@example.com", username="alice")


def test_duration_ms(record_factory):
    entry = TimeEntry.from_dict(record_factory(None, "2025-10-08T10:00:00Z", "2025-10-08T10:30:00Z"))

    assert entry.duration_ms == 1_800_000


def test_duration_negative_when_end_precedes_start(record_factory):
    entry = TimeEntry.from_dict(record_factory(None, "2025-10-08T11:00:00Z", "2025-10-08T10:00:00Z"))

    assert entry.duration_ms == -3_600_000


def test_issue_may_be_missing(record_factory):
    record = record_factory(None, "2025-10-08T10:00:00Z", "2025-10-08T10:30:00Z")
    del record["issue"]

    assert TimeEntry.from_dict(record).issue is None


@pytest.mark.parametrize(
    ("mutate", "field_name"),
    [
        (lambda r: r.update(project=None), "project.name"),
        (lambda r: r["project"].pop("name"), "project.name"),
        (lambda r: r.update(user=None), "user"),
        (lambda r: r["user"].pop("email"), "user.email"),
        (lambda r: r["user"].update(username=None), "user.username"),
        (lambda r: r.update(start_datetime=None), "start_datetime"),
        (lambda r: r.update(end_datetime="yesterday"), "end_datetime"),
    ],
)
def test_malformed_records(record_factory, mutate, field_name):
    record = record_factory("WOB-1", "2025-10-08T10:00:00Z", "2025-10-08T10:30:00Z")
    mutate(record)

    with pytest.raises(MalformedEntryError) as exc_info:
        TimeEntry.from_dict(record)

    assert exc_info.value.field_name == field_name
    assert field_name in str(exc_info.value)


def test_malformed_entry_is_value_error():
    assert issubclass(MalformedEntryError, ValueError)


def test_validate_rejects_missing_user():
    entry = TimeEntry(
        issue="WOB-1",
        start_datetime=datetime(2025, 10, 8, 10, tzinfo=timezone.utc),
        end_datetime=datetime(2025, 10, 8, 11, tzinfo=timezone.utc),
        project=ProjectRef(name="Website"),
        user=None,  # type: ignore[arg-type]
    )

    with pytest.raises(MalformedEntryError, match="user"):
        entry.validate()


def test_parse_time_entries_preserves_order(record_factory):
    records = [
        record_factory("B", "2025-10-09T10:00:00Z", "2025-10-09T11:00:00Z"),
        record_factory("A", "2025-10-08T10:00:00Z", "2025-10-08T11:00:00Z"),
    ]

    entries = parse_time_entries(records)

    assert [e.issue for e in entries] == ["B", "A"]


def test_direct_construction_attaches_utc_to_naive_timestamps():
    entry = TimeEntry(
        issue="WOB-1",
        start_datetime=datetime(2025, 10, 8, 10, 0),
        end_datetime=datetime(2025, 10, 8, 10, 30),
        project=ProjectRef(name="Website"),
        user=UserRef(email="dev@example.com", username="dev"),
    )

    assert entry.start_datetime == datetime(2025, 10, 8, 10, 0, tzinfo=timezone.utc)
    assert entry.end_datetime.tzinfo == timezone.utc
    assert entry.duration_ms == 1_800_000
