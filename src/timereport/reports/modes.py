"""Report output modes."""

from __future__ import annotations

from enum import Enum

__all__ = ["ReportMode"]


class ReportMode(str, Enum):
    """Output shape of a report.

    DETAILED rows carry start/end dates and group by the full issue.
    GENERAL rows omit dates and group by the issue's first token.
    """

    DETAILED = "detailed"
    GENERAL = "general"

    @classmethod
    def from_flag(cls, detailed: bool) -> ReportMode:
        return cls.DETAILED if detailed else cls.GENERAL
