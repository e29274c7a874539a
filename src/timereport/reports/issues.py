"""Issue text normalization.

Issues arrive URL-encoded from the timer clients and are often prefixed
with a Jira estimate such as ``"2.5h | WOB-1252"`` or ``"6,5 시간 | WOB-1252"``.
The estimate has to go before the issue can be used as a grouping key.
"""

from __future__ import annotations

import re
from urllib.parse import unquote

from .modes import ReportMode

__all__ = [
    "ESTIMATE_PATTERN",
    "first_token",
    "issue_for_mode",
    "normalize_issue",
]

# digits/separators, unit in any script, then a pipe separator
ESTIMATE_PATTERN = re.compile(r"[\d*.,]+\s*(?:[|.]|[^\W\d_])+\s*\|+\s*")

_LINE_BREAKS = re.compile(r"[\r\n]")
_WHITESPACE = re.compile(r"\s")


def normalize_issue(raw_issue: str | None) -> tuple[str, bool]:
    """Decode an issue and strip every estimate annotation from it.

    Parameters
    ----------
    raw_issue
        Issue as stored by the timer (may be None or empty)

    Returns
    -------
    tuple[str, bool]
        (cleaned issue, whether an estimate annotation was found)

    Examples
    --------
    >>> normalize_issue("2.5h | WOB-1252")
    ('WOB-1252', True)
    >>> normalize_issue("WOB-1252%20fix%20login")
    ('WOB-1252 fix login', False)
    >>> normalize_issue(None)
    ('', False)
    """
    if not raw_issue:
        return "", False

    decoded = _LINE_BREAKS.sub("", unquote(raw_issue))

    if ESTIMATE_PATTERN.search(decoded) is None:
        return decoded, False

    return ESTIMATE_PATTERN.sub("", decoded), True


def first_token(issue: str) -> str:
    """Return the issue up to (not including) its first whitespace character.

    >>> first_token("WOB-1252 some extra text")
    'WOB-1252'
    """
    return _WHITESPACE.split(issue, maxsplit=1)[0]


def issue_for_mode(raw_issue: str | None, mode: ReportMode) -> str:
    """Normalize an issue and apply the mode-specific truncation."""
    cleaned, _ = normalize_issue(raw_issue)
    if mode == ReportMode.GENERAL:
        return first_token(cleaned)
    return cleaned
