"""GraphQL entry source for the timer data service.

Fetches ``timer_v2`` records overlapping a report window for one team.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx

from ...core.entries import TimeEntry, parse_time_entries
from ...observability.loguru_config import get_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

__all__ = [
    "TIMER_QUERY",
    "GraphQLEntrySource",
    "GraphQLQueryError",
    "build_timer_where",
]

logger = get_logger("graphql")

TIMER_QUERY = """query timer_v2($timerWhere: timer_v2_bool_exp){
    timer_v2(where: $timerWhere, order_by: {end_datetime: desc}) {
        issue
        start_datetime
        end_datetime
        project {
            name
        }
        user {
            email
            username
        }
    }
}"""


class GraphQLQueryError(Exception):
    """Raised when the data service answers with a GraphQL ``errors`` array."""

    def __init__(self, errors: list[dict[str, Any]]) -> None:
        self.errors = errors
        messages = "; ".join(str(error.get("message", error)) for error in errors) or "unknown error"
        super().__init__(f"GraphQL query failed: {messages}")


def build_timer_where(
    team_id: str,
    user_emails: Sequence[str],
    project_names: Sequence[str],
    start_date: str,
    end_date: str,
) -> dict[str, Any]:
    """Build the ``timer_v2`` filter for entries overlapping the window.

    An entry matches when it starts inside the window, ends inside it, or
    spans it entirely. User and project name filters apply only when given.

    Parameters
    ----------
    team_id
        Team whose projects are reported
    user_emails
        Restrict to these users (empty = all users)
    project_names
        Restrict to these projects (empty = all team projects)
    start_date
        Window start (ISO-8601)
    end_date
        Window end (ISO-8601)

    Returns
    -------
    dict[str, Any]
        Hasura-style boolean expression
    """
    where: dict[str, Any] = {
        "_or": [
            {"start_datetime": {"_gte": start_date, "_lte": end_date}},
            {"end_datetime": {"_gte": start_date, "_lte": end_date}},
            {"start_datetime": {"_lt": start_date}, "end_datetime": {"_gt": end_date}},
        ],
    }

    if user_emails:
        where["user"] = {"email": {"_in": list(user_emails)}}

    project: dict[str, Any] = {"team_id": {"_eq": team_id}}
    if project_names:
        project["name"] = {"_in": list(project_names)}
    where["project"] = project

    return where


class GraphQLEntrySource:
    """Entry source backed by the GraphQL data service.

    Transport and HTTP status errors from httpx propagate unchanged.
    """

    def __init__(
        self,
        url: str,
        *,
        admin_secret: str | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the entry source.

        Parameters
        ----------
        url
            GraphQL endpoint URL
        admin_secret
            Optional ``x-hasura-admin-secret`` header value
        timeout
            Request timeout in seconds
        transport
            Optional httpx transport (tests use ``httpx.MockTransport``)
        """
        self.url = url
        self.admin_secret = admin_secret
        self.timeout = timeout
        self.transport = transport

    def _make_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.admin_secret:
            headers["x-hasura-admin-secret"] = self.admin_secret
        return headers

    async def execute(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Run a GraphQL query and return its ``data`` payload.

        Raises
        ------
        httpx.HTTPStatusError
            On a 4xx/5xx response
        httpx.TransportError
            On connection problems or timeouts
        GraphQLQueryError
            If the response carries GraphQL errors
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            response = await client.post(
                self.url,
                headers=self._make_headers(),
                json={"query": query, "variables": variables},
            )

        response.raise_for_status()
        payload = response.json()

        errors = payload.get("errors")
        if errors:
            logger.warning("GraphQL errors in response", count=len(errors))
            raise GraphQLQueryError(errors)

        return payload.get("data") or {}

    async def fetch_time_entries(
        self,
        team_id: str,
        user_emails: Sequence[str],
        project_names: Sequence[str],
        start_date: str,
        end_date: str,
    ) -> list[TimeEntry]:
        """Fetch and parse time entries overlapping the window.

        Returns
        -------
        list[TimeEntry]
            Entries ordered by end timestamp, newest first
        """
        variables = {
            "timerWhere": build_timer_where(team_id, user_emails, project_names, start_date, end_date),
        }
        data = await self.execute(TIMER_QUERY, variables)
        records = data.get("timer_v2") or []

        logger.debug("Fetched timer entries", team_id=team_id, count=len(records))
        return parse_time_entries(records)
