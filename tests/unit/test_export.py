"""Tests for report flattening and CSV export."""

from __future__ import annotations

import csv
from datetime import datetime, timezone

import pytest

from timereport.reports.aggregator import ReportRow
from timereport.reports.export import (
    DETAILED_HEADERS,
    GENERAL_HEADERS,
    CsvReportExporter,
    build_report_filename,
    report_headers,
    to_rows,
)
from timereport.reports.modes import ReportMode


@pytest.fixture
def detailed_row() -> ReportRow:
    return ReportRow(
        user_name="dev",
        project_name="Website",
        issue="WOB-1252",
        time="1:30:00",
        duration_ms=5_400_000,
        start_date="2025-10-08 10:00",
        end_date="2025-10-08 10:30",
    )


@pytest.fixture
def general_row() -> ReportRow:
    return ReportRow(
        user_name="dev",
        project_name="Website",
        issue="WOB-1252",
        time="1:30:00",
        duration_ms=5_400_000,
    )


def test_headers_per_mode():
    assert report_headers(ReportMode.GENERAL) == ["User name", "Project name", "Issue", "Time"]
    assert report_headers("detailed") == [
        "User name",
        "Project name",
        "Issue",
        "Time",
        "Start date",
        "End date",
    ]
    assert DETAILED_HEADERS[: len(GENERAL_HEADERS)] == GENERAL_HEADERS


def test_to_rows_detailed(detailed_row):
    assert to_rows([detailed_row], ReportMode.DETAILED) == [
        ["dev", "Website", "WOB-1252", "1:30:00", "2025-10-08 10:00", "2025-10-08 10:30"]
    ]


def test_to_rows_general(general_row):
    assert to_rows([general_row], ReportMode.GENERAL) == [["dev", "Website", "WOB-1252", "1:30:00"]]


def test_to_rows_empty():
    assert to_rows([], ReportMode.DETAILED) == []


@pytest.mark.parametrize(
    ("offset", "expected"),
    [
        (0, "report_2025-10-08_12-30.csv"),
        (120, "report_2025-10-08_14-30.csv"),
        (-780, "report_2025-10-07_23-30.csv"),
    ],
)
def test_build_report_filename(offset, expected):
    now = datetime(2025, 10, 8, 12, 30, 45, tzinfo=timezone.utc)

    assert build_report_filename(now, offset) == expected


def test_filename_has_no_colons():
    name = build_report_filename(datetime(2025, 1, 2, 3, 4, tzinfo=timezone.utc))

    assert ":" not in name


class TestCsvReportExporter:
    def test_writes_header_and_rows(self, tmp_path, detailed_row):
        exporter = CsvReportExporter(tmp_path / "reports")

        path = exporter.export_rows([detailed_row], "report.csv", ReportMode.DETAILED)

        assert path == str(tmp_path / "reports" / "report.csv")
        with open(path, newline="", encoding="utf-8") as f:
            content = list(csv.reader(f))
        assert content == [
            list(DETAILED_HEADERS),
            ["dev", "Website", "WOB-1252", "1:30:00", "2025-10-08 10:00", "2025-10-08 10:30"],
        ]

    def test_general_mode_columns(self, tmp_path, general_row):
        exporter = CsvReportExporter(tmp_path)

        path = exporter.export_rows([general_row], "general.csv", "general")

        with open(path, newline="", encoding="utf-8") as f:
            content = list(csv.reader(f))
        assert content[0] == list(GENERAL_HEADERS)
        assert len(content[1]) == 4

    def test_empty_report_has_header_only(self, tmp_path):
        path = CsvReportExporter(tmp_path).export_rows([], "empty.csv")

        with open(path, encoding="utf-8") as f:
            lines = f.read().splitlines()
        assert lines == [",".join(DETAILED_HEADERS)]

    def test_unicode_issue(self, tmp_path):
        row = ReportRow(
            user_name="민수",
            project_name="Сайт",
            issue="WOB-1 수정",
            time="0:10:00",
            duration_ms=600_000,
        )

        path = CsvReportExporter(tmp_path).export_rows([row], "unicode.csv", ReportMode.GENERAL)

        with open(path, newline="", encoding="utf-8") as f:
            content = list(csv.reader(f))
        assert content[1] == ["민수", "Сайт", "WOB-1 수정", "0:10:00"]

    def test_unwritable_directory_raises(self, tmp_path, general_row):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("occupied")

        with pytest.raises(OSError):
            CsvReportExporter(blocker).export_rows([general_row], "report.csv", ReportMode.GENERAL)
