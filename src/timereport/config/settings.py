"""Centralized configuration for report generation.

Loads configuration from a .env file and the environment and provides typed
access to settings.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from ..core.time import MAX_OFFSET_MINUTES

__all__ = [
    "ConfigError",
    "Settings",
    "generate_example_env",
    "get_settings",
    "load_env_file",
    "load_settings",
    "parse_bool",
]


class ConfigError(Exception):
    """Raised when configuration is missing or invalid."""

    pass


@dataclass
class Settings:
    """Settings for timereport.

    Attributes
    ----------
    graphql_url : str
        GraphQL endpoint of the timer data service (required)
    graphql_admin_secret : str | None
        Value for the ``x-hasura-admin-secret`` header
    graphql_timeout : float
        Request timeout in seconds
    reports_dir : Path
        Directory CSV reports are written to
    default_timezone_offset : int
        Display offset in minutes east of UTC when a request gives none
    clamp_negative_durations : bool
        Count negative clipped spans as zero instead of subtracting them
    log_level : str
        Logging level
    log_dir : Path | None
        Directory for JSONL log files (console only if unset)
    """

    graphql_url: str
    graphql_admin_secret: str | None = None
    graphql_timeout: float = 30.0
    reports_dir: Path = Path("reports")
    default_timezone_offset: int = 0
    clamp_negative_durations: bool = False
    log_level: str = "INFO"
    log_dir: Path | None = None

    def __post_init__(self):
        """Validate settings after initialization."""
        if isinstance(self.reports_dir, str):
            self.reports_dir = Path(self.reports_dir)

        if self.log_dir and isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

        if not self.graphql_url:
            raise ConfigError(
                "graphql_url is required. "
                "Set TIMEREPORT_GRAPHQL_URL in .env or environment "
                "(e.g., TIMEREPORT_GRAPHQL_URL=https://timer.example.com/v1/graphql)"
            )

        if not self.graphql_url.startswith(("http://", "https://")):
            raise ConfigError(f"TIMEREPORT_GRAPHQL_URL must be an http(s) URL, got: {self.graphql_url}")

        if self.graphql_timeout <= 0:
            raise ConfigError("TIMEREPORT_GRAPHQL_TIMEOUT must be positive")

        if not -MAX_OFFSET_MINUTES <= self.default_timezone_offset <= MAX_OFFSET_MINUTES:
            raise ConfigError(
                f"TIMEREPORT_DEFAULT_TZ_OFFSET out of range: {self.default_timezone_offset} minutes"
            )

        self.log_level = self.log_level.upper()

    @classmethod
    def from_env(cls, env_file: Path | str | None = None) -> Settings:
        """Load settings from environment.

        Loads from .env file if present, otherwise from os.environ.

        Parameters
        ----------
        env_file
            Path to .env file (default: .env in current directory)

        Returns
        -------
        Settings
            Loaded settings

        Raises
        ------
        ConfigError
            If required settings are missing or invalid
        """
        if env_file is None:
            env_file = Path(".env")
        if isinstance(env_file, str):
            env_file = Path(env_file)

        if env_file.exists():
            load_env_file(env_file)

        graphql_url = os.environ.get("TIMEREPORT_GRAPHQL_URL")
        if not graphql_url:
            raise ConfigError(
                "TIMEREPORT_GRAPHQL_URL is required.\n\n"
                "Quick fix:\n"
                "  1. Run `timereport init-env` to write an example .env\n"
                "  2. Set TIMEREPORT_GRAPHQL_URL in .env\n"
                "  3. Run your command again\n\n"
                "Or set it in environment: export TIMEREPORT_GRAPHQL_URL=https://..."
            )

        try:
            return cls(
                graphql_url=graphql_url,
                graphql_admin_secret=os.environ.get("TIMEREPORT_GRAPHQL_ADMIN_SECRET") or None,
                graphql_timeout=float(os.environ.get("TIMEREPORT_GRAPHQL_TIMEOUT", "30")),
                reports_dir=Path(os.environ.get("TIMEREPORT_REPORTS_DIR", "reports")),
                default_timezone_offset=int(os.environ.get("TIMEREPORT_DEFAULT_TZ_OFFSET", "0")),
                clamp_negative_durations=parse_bool(
                    os.environ.get("TIMEREPORT_CLAMP_NEGATIVE_DURATIONS", "false")
                ),
                log_level=os.environ.get("TIMEREPORT_LOG_LEVEL", "INFO"),
                log_dir=Path(os.environ["TIMEREPORT_LOG_DIR"]) if os.environ.get("TIMEREPORT_LOG_DIR") else None,
            )
        except ValueError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


def parse_bool(value: str) -> bool:
    """Parse an environment flag ("true"/"1"/"yes"/"on" are true)."""
    return value.strip().lower() in {"true", "1", "yes", "on"}


def load_env_file(env_file: Path) -> None:
    """Load environment variables from .env file.

    Parameters
    ----------
    env_file
        Path to .env file
    """
    with open(env_file, encoding="utf-8") as f:
        for line in f:
            line = line.strip()

            # Skip comments and empty lines
            if not line or line.startswith("#"):
                continue

            if "=" in line:
                key, value = line.split("=", 1)
                key = key.strip()
                value = value.strip()

                # Remove quotes
                if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
                    value = value[1:-1]

                os.environ[key] = value


# Global settings instance
_settings: Settings | None = None


def load_settings(env_file: Path | str | None = None) -> Settings:
    """Load settings from environment and remember them.

    Raises
    ------
    ConfigError
        If required settings missing
    """
    global _settings
    _settings = Settings.from_env(env_file)
    return _settings


def get_settings() -> Settings:
    """Get current settings.

    Raises
    ------
    ConfigError
        If settings not loaded
    """
    if _settings is None:
        raise ConfigError("Settings not loaded. Call load_settings() first or set TIMEREPORT_GRAPHQL_URL.")
    return _settings


def generate_example_env(output_path: Path | None = None) -> str:
    """Generate example .env file with all settings.

    Parameters
    ----------
    output_path
        Optional path to write .env file

    Returns
    -------
    str
        Example .env contents
    """
    example = """# timereport configuration
# Copy this to .env and adjust values

# ====================
# Timer data service
# ====================

# GraphQL endpoint (required)
TIMEREPORT_GRAPHQL_URL=http://localhost:8080/v1/graphql

# Admin secret sent as x-hasura-admin-secret (optional)
# TIMEREPORT_GRAPHQL_ADMIN_SECRET=change-me

# Request timeout in seconds (optional, default: 30)
TIMEREPORT_GRAPHQL_TIMEOUT=30

# ====================
# Reports
# ====================

# Output directory for CSV reports (optional, default: reports)
TIMEREPORT_REPORTS_DIR=reports

# Display offset in minutes east of UTC (optional, default: 0)
# Examples: 120 (UTC+2), -300 (UTC-5)
TIMEREPORT_DEFAULT_TZ_OFFSET=0

# Count negative clipped spans as zero (optional, default: false)
TIMEREPORT_CLAMP_NEGATIVE_DURATIONS=false

# ====================
# Logging
# ====================

# Log level (optional, default: INFO)
# Options: DEBUG, INFO, WARNING, ERROR, CRITICAL
TIMEREPORT_LOG_LEVEL=INFO

# Directory for JSONL log files (optional, console only if not set)
# TIMEREPORT_LOG_DIR=logs
"""

    if output_path:
        output_path.write_text(example, encoding="utf-8")

    return example
