"""Loguru configuration with timing for report runs.

This module provides centralized loguru configuration with:
- Console output plus optional structured JSON log files
- Per-component log files (report, graphql, pipeline, cli)
- Context manager for timing pipeline stages

Focus areas:
- GraphQL fetch -> aggregation -> CSV export
"""

from __future__ import annotations

import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

from loguru import logger

if TYPE_CHECKING:
    from collections.abc import Generator

__all__ = [
    "COMPONENTS",
    "configure_loguru",
    "get_logger",
    "timing_context",
]

COMPONENTS = ("report", "graphql", "pipeline", "cli")


def configure_loguru(
    *,
    log_dir: Path | None = None,
    level: str = "INFO",
    rotation: str = "100 MB",
    retention: str = "10 days",
    compression: str = "zip",
    enable_console: bool = True,
) -> None:
    """Configure loguru with console output and structured log files.

    Parameters
    ----------
    log_dir
        Directory for JSONL log files (None = console only)
    level
        Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    rotation
        Log rotation policy (e.g., "100 MB", "1 day")
    retention
        Log retention policy (e.g., "10 days", "1 week")
    compression
        Compression for rotated logs (zip, gz, bz2, xz)
    enable_console
        Enable console output on stderr

    Example
    -------
    >>> configure_loguru(log_dir=Path("logs"), level="DEBUG")
    """
    # Remove default handler
    logger.remove()
    logger.configure(extra={"component": "timereport"})

    if enable_console:
        logger.add(
            sys.stderr,
            format="<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{extra[component]}</cyan> | "
            "<level>{message}</level>",
            level=level,
            colorize=True,
            backtrace=True,
            diagnose=False,
        )

    if log_dir is None:
        logger.debug("Loguru configured", level=level)
        return

    log_dir.mkdir(parents=True, exist_ok=True)

    # Main application log file (structured JSON)
    logger.add(
        log_dir / "timereport.jsonl",
        format="{message}",
        level=level,
        rotation=rotation,
        retention=retention,
        compression=compression,
        serialize=True,
        backtrace=True,
        diagnose=False,
    )

    # Timing-only log file
    logger.add(
        log_dir / "timing.jsonl",
        format="{message}",
        level="DEBUG",
        rotation=rotation,
        retention=retention,
        compression=compression,
        serialize=True,
        filter=lambda record: record["extra"].get("timing", False),
    )

    for component in COMPONENTS:
        logger.add(
            log_dir / f"{component}.jsonl",
            format="{message}",
            level=level,
            rotation=rotation,
            retention=retention,
            compression=compression,
            serialize=True,
            filter=lambda record, comp=component: record["extra"].get("component") == comp,
        )

    logger.debug("Loguru configured", log_dir=str(log_dir), level=level)


def get_logger(component: str = "timereport") -> Any:
    """Get logger instance bound to a component.

    Parameters
    ----------
    component
        Component name (report, graphql, pipeline, cli)

    Returns
    -------
    Logger
        Loguru logger bound to component
    """
    return logger.bind(component=component)


@contextmanager
def timing_context(
    operation: str,
    *,
    component: str = "timereport",
    trace_id: str | None = None,
    **metadata: Any,
) -> Generator[dict[str, Any], None, None]:
    """Time an operation and log START/END records.

    Parameters
    ----------
    operation
        Name of the operation being timed
    component
        Component name for filtering logs
    trace_id
        Trace ID for correlating one report run
    **metadata
        Additional metadata to log

    Yields
    ------
    dict
        Context dictionary; keys added inside the block are logged at END

    Example
    -------
    >>> with timing_context("fetch_entries", component="pipeline", trace_id="abc") as ctx:
    ...     entries = fetch()
    ...     ctx["entries"] = len(entries)
    """
    start_ns = time.perf_counter_ns()
    context: dict[str, Any] = dict(metadata)
    bound = logger.bind(component=component, timing=True, operation=operation, trace_id=trace_id)

    bound.debug(f"START: {operation}", phase="start", **metadata)

    try:
        yield context
    finally:
        duration_ns = time.perf_counter_ns() - start_ns
        context["duration_ms"] = duration_ns / 1_000_000
        bound.debug(f"END: {operation}", phase="end", **context)
