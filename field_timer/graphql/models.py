"""
GraphQL timing models and data structures.

This module defines the wire payloads exchanged with the endpoint and the
per-query timing result produced by the execution engine.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

class Status(str, Enum):
    """Outcome of a single flattened query."""

    SUCCESS = "OK"
    FAILURE = "ERR"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class GraphQLRequest:
    """GraphQL request body."""

    query: str
    variables: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {"query": self.query, "variables": self.variables}

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), indent=2)


@dataclass(frozen=True)
class GraphQLResponse:
    """
    Decoded GraphQL response body.

    Both keys are optional on the wire and an explicit ``null`` counts as
    absent, so ``{"data": null, "errors": [...]}`` has errors but no data.
    """

    payload: Dict[str, Any] = field(default_factory=dict)

    @property
    def data(self) -> Any:
        return self.payload.get("data")

    @property
    def errors(self) -> Any:
        return self.payload.get("errors")

    @property
    def extensions(self) -> Optional[Dict[str, Any]]:
        return self.payload.get("extensions")

    @property
    def has_data(self) -> bool:
        return self.data is not None

    @property
    def has_errors(self) -> bool:
        return self.errors is not None

    @property
    def error_messages(self) -> List[str]:
        """Get list of error messages."""
        if not isinstance(self.errors, list):
            return []
        return [
            error.get("message", "Unknown error") if isinstance(error, dict) else str(error)
            for error in self.errors
        ]

    def to_dict(self) -> Dict[str, Any]:
        return dict(self.payload)


@dataclass(frozen=True)
class TimingResult:
    """
    Result of timing one flattened query.

    Attributes:
        duration: Seconds spent on the request/response exchange, excluding
            connection setup
        query: The standalone query that was sent
        response: The decoded response payload
        status: Success if the response carried data, Failure otherwise
        status_code: HTTP status code of the response
        headers: Response headers, kept for diagnosis
        sequence: Position of the query in execution order
    """

    duration: float
    query: str
    response: GraphQLResponse
    status: Status
    status_code: int = 200
    sequence: int = 0
    headers: Dict[str, str] = field(default_factory=dict, compare=False)

    @property
    def is_success(self) -> bool:
        return self.status is Status.SUCCESS

    @property
    def compact_query(self) -> str:
        """Query text collapsed onto a single line for display."""
        return " ".join(self.query.split())

    def dump_response(self) -> str:
        """Pretty JSON dump of the decoded response."""
        return json.dumps(self.response.to_dict(), indent=2, default=str)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "duration": self.duration,
            "query": self.query,
            "status_code": self.status_code,
            "response": self.response.to_dict(),
        }
