"""Common CLI utilities: JSON output, trace IDs and stable exit codes."""

from __future__ import annotations

import json
import uuid
from enum import IntEnum
from typing import Any

import click
import httpx

from ..adapters.graphql import GraphQLQueryError
from ..config.settings import ConfigError
from ..core.entries import MalformedEntryError

__all__ = [
    "CLIContext",
    "ExitCode",
    "exit_code_for",
]


class ExitCode(IntEnum):
    """Stable exit codes for CLI commands."""

    SUCCESS = 0
    VALIDATION_ERROR = 2  # Bad arguments or malformed entries
    UPSTREAM_ERROR = 4  # Data service unreachable or query rejected
    IO_ERROR = 5  # Report could not be written
    CONFIG_ERROR = 6
    UNKNOWN_ERROR = 7


def exit_code_for(exc: BaseException) -> ExitCode:
    """Map an exception to its exit code."""
    if isinstance(exc, ConfigError):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, (httpx.HTTPError, GraphQLQueryError)):
        return ExitCode.UPSTREAM_ERROR
    if isinstance(exc, (MalformedEntryError, ValueError)):
        return ExitCode.VALIDATION_ERROR
    if isinstance(exc, OSError):
        return ExitCode.IO_ERROR
    return ExitCode.UNKNOWN_ERROR


class CLIContext:
    """Context for CLI execution with JSON output and trace ID."""

    def __init__(self, json_output: bool = False, trace_id: str | None = None, verbose: bool = False):
        self.json_output = json_output
        self.trace_id = trace_id or f"trace-{uuid.uuid4().hex[:12]}"
        self.verbose = verbose

    def output(
        self, data: Any, status: str = "success", error: str | None = None, meta: dict[str, Any] | None = None
    ) -> None:
        """Output result in JSON or human-readable form.

        Args:
            data: Result data
            status: Status ("success" or "error")
            error: Error message if status is error
            meta: Additional metadata
        """
        if self.json_output:
            result: dict[str, Any] = {"status": status, "trace_id": self.trace_id}

            if error:
                result["error"] = error
            else:
                result["data"] = data

            if meta:
                result["meta"] = meta

            click.echo(json.dumps(result, ensure_ascii=False, indent=2))
            return

        if status == "error":
            click.echo(f"Error: {error}", err=True)
        elif isinstance(data, dict):
            for key, value in data.items():
                click.echo(f"{key}: {value}")
        else:
            click.echo(data)

    def fail(self, exc: BaseException) -> int:
        """Report an exception and return its exit code."""
        code = exit_code_for(exc)
        self.output(
            None,
            status="error",
            error=str(exc),
            meta={"exit_code": int(code), "error_type": type(exc).__name__},
        )
        return int(code)
