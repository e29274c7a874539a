"""Tests for loguru configuration and stage timing."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import pytest
from loguru import logger

from timereport.observability.loguru_config import COMPONENTS, configure_loguru, get_logger, timing_context


@pytest.fixture
def restore_logger():
    """Put loguru back to a single stderr handler after the test."""
    yield
    logger.remove()
    logger.configure(extra={})
    logger.add(sys.stderr)


def read_jsonl(path: Path) -> list[dict]:
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line]


class TestConfigureLoguru:
    def test_creates_component_files(self, tmp_path, restore_logger):
        log_dir = tmp_path / "logs"

        configure_loguru(log_dir=log_dir, level="DEBUG", enable_console=False)
        get_logger("graphql").info("Fetched timer entries", count=3)
        get_logger("report").info("Report written", rows=2)
        logger.remove()

        assert (log_dir / "timereport.jsonl").exists()
        for component in COMPONENTS:
            assert (log_dir / f"{component}.jsonl").exists()

        graphql_records = read_jsonl(log_dir / "graphql.jsonl")
        assert [r["record"]["message"] for r in graphql_records] == ["Fetched timer entries"]
        assert graphql_records[0]["record"]["extra"]["count"] == 3

        messages = [r["record"]["message"] for r in read_jsonl(log_dir / "timereport.jsonl")]
        assert "Fetched timer entries" in messages
        assert "Report written" in messages

    def test_level_filters_main_file(self, tmp_path, restore_logger):
        configure_loguru(log_dir=tmp_path, level="WARNING", enable_console=False)
        get_logger("pipeline").info("Report requested")
        get_logger("pipeline").warning("Slow upstream")
        logger.remove()

        messages = [r["record"]["message"] for r in read_jsonl(tmp_path / "pipeline.jsonl")]
        assert messages == ["Slow upstream"]

    def test_timing_file_only_has_timing_records(self, tmp_path, restore_logger):
        configure_loguru(log_dir=tmp_path, level="INFO", enable_console=False)
        with timing_context("aggregate", component="pipeline", trace_id="t-1"):
            get_logger("report").info("inside")
        logger.remove()

        records = read_jsonl(tmp_path / "timing.jsonl")
        assert [r["record"]["message"] for r in records] == ["START: aggregate", "END: aggregate"]
        assert all(r["record"]["extra"]["trace_id"] == "t-1" for r in records)

    def test_console_only_by_default(self, tmp_path, monkeypatch, restore_logger):
        monkeypatch.chdir(tmp_path)

        configure_loguru(level="INFO")
        get_logger("cli").info("hello")

        assert list(tmp_path.iterdir()) == []


class TestTimingContext:
    def test_records_duration_and_context(self):
        captured: list[dict] = []
        handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
        try:
            with timing_context("fetch_entries", component="pipeline", trace_id="abc", team_id="t1") as ctx:
                ctx["entries"] = 5
        finally:
            logger.remove(handler_id)

        start, end = captured
        assert start["extra"]["phase"] == "start"
        assert start["extra"]["team_id"] == "t1"
        assert end["extra"]["phase"] == "end"
        assert end["extra"]["entries"] == 5
        assert end["extra"]["duration_ms"] >= 0
        assert end["extra"]["component"] == "pipeline"

    def test_end_logged_on_error(self):
        captured: list[dict] = []
        handler_id = logger.add(lambda message: captured.append(message.record), level="DEBUG")
        try:
            with pytest.raises(RuntimeError):
                with timing_context("export", component="pipeline"):
                    raise RuntimeError("disk full")
        finally:
            logger.remove(handler_id)

        assert [r["message"] for r in captured] == ["START: export", "END: export"]
