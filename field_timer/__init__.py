"""
GraphQL field timing utility.

This package splits a composite GraphQL query into one standalone query per
leaf field, sends each to an endpoint in turn, and ranks the fields by how
long they took and whether they failed. It is meant for finding the single
slow or failing field inside a large query.

Features:
- Flattening through nested fields, fragment spreads and inline fragments
- Async HTTP with AIOHTTP, excluding connection setup from timings
- Structured configuration models with Pydantic
- Rich terminal report with progress display
"""

from .exceptions import (
    ConfigurationError,
    ConnectionError,
    DocumentParseError,
    DuplicateFragmentError,
    FieldTimerError,
    FlattenError,
    FragmentCycleError,
    FragmentNotFoundError,
    ResponseDecodeError,
    SerializationError,
    TimeoutError,
    TransportError,
    UnexpectedResponseError,
)
from .config import EndpointConfig, GlobalConfig, LoggingConfig, SecurityConfig
from .graphql import (
    FieldTimer,
    GraphQLResponse,
    QueryFlattener,
    Status,
    TimingResult,
    flatten,
    flatten_source,
    parse_document,
    rank,
)

__version__ = "0.1.0"

__all__ = [
    # Exceptions
    "FieldTimerError",
    "ConfigurationError",
    "DocumentParseError",
    "FlattenError",
    "FragmentNotFoundError",
    "DuplicateFragmentError",
    "FragmentCycleError",
    "SerializationError",
    "TransportError",
    "ConnectionError",
    "TimeoutError",
    "ResponseDecodeError",
    "UnexpectedResponseError",
    # Config
    "EndpointConfig",
    "GlobalConfig",
    "LoggingConfig",
    "SecurityConfig",
    # Core
    "QueryFlattener",
    "flatten",
    "flatten_source",
    "parse_document",
    "FieldTimer",
    "GraphQLResponse",
    "Status",
    "TimingResult",
    "rank",
]
