"""
GraphQL field timing for field_timer.

This module flattens composite GraphQL documents into one standalone query per
terminal field, times each query against an endpoint, and ranks the results.
"""

from .flattener import (
    QueryFlattener,
    flatten,
    flatten_source,
    parse_document,
    prune_unused_variables,
)
from .models import GraphQLRequest, GraphQLResponse, Status, TimingResult
from .ranking import rank, rank_in_place
from .timer import FieldTimer, RoundTripClock, classify_response

__all__ = [
    # Flattener
    "QueryFlattener",
    "flatten",
    "flatten_source",
    "parse_document",
    "prune_unused_variables",
    # Models
    "GraphQLRequest",
    "GraphQLResponse",
    "Status",
    "TimingResult",
    # Ranking
    "rank",
    "rank_in_place",
    # Timer
    "FieldTimer",
    "RoundTripClock",
    "classify_response",
]
