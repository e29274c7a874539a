"""GraphQL adapter for the timer data service."""

from .client import TIMER_QUERY, GraphQLEntrySource, GraphQLQueryError, build_timer_where

__all__ = [
    "TIMER_QUERY",
    "GraphQLEntrySource",
    "GraphQLQueryError",
    "build_timer_where",
]
