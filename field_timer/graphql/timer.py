"""
Sequential GraphQL query timer.

This module sends flattened queries to an endpoint one at a time, measures
the round trip of each, and classifies the responses.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import Any, Callable, Iterable, List, Optional

import aiohttp
from multidict import CIMultiDict

from ..config.models import EndpointConfig
from ..exceptions import (
    ErrorHandler,
    FieldTimerError,
    ResponseDecodeError,
    UnexpectedResponseError,
)
from .models import GraphQLRequest, GraphQLResponse, Status, TimingResult
from .ranking import rank_in_place

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[TimingResult], None]


class RoundTripClock:
    """
    Per-request stopwatch.

    The clock starts when the request is dispatched and is restarted by the
    connection trace hooks once a connection is ready, so DNS, TCP and TLS
    setup never count towards the measured duration.
    """

    def __init__(self, now: Callable[[], float] = time.perf_counter) -> None:
        self._now = now
        self.started = now()
        self.connected_at: Optional[float] = None

    def mark_connected(self) -> None:
        self.connected_at = self._now()

    def elapsed(self) -> float:
        start = self.connected_at if self.connected_at is not None else self.started
        return self._now() - start


async def _on_connection_ready(
    session: aiohttp.ClientSession,
    trace_config_ctx: Any,
    params: Any,
) -> None:
    clock = trace_config_ctx.trace_request_ctx
    if isinstance(clock, RoundTripClock):
        clock.mark_connected()


def create_trace_config() -> aiohttp.TraceConfig:
    """Trace config that restarts the request clock when a connection is ready."""
    trace_config = aiohttp.TraceConfig()
    trace_config.on_connection_create_end.append(_on_connection_ready)
    trace_config.on_connection_reuseconn.append(_on_connection_ready)
    return trace_config


def classify_response(body: bytes, status_code: Optional[int] = None) -> GraphQLResponse:
    """
    Decode a response body and check it is a GraphQL response.

    Raises:
        ResponseDecodeError: If the body is not a JSON object
        UnexpectedResponseError: If the object has neither data nor errors
    """
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ResponseDecodeError(
            f"error parsing response: {e}", raw_body=body, status_code=status_code
        )

    if not isinstance(payload, dict):
        raise ResponseDecodeError(
            "error parsing response: expected a JSON object",
            raw_body=body,
            status_code=status_code,
        )

    response = GraphQLResponse(payload=payload)
    if not response.has_data and not response.has_errors:
        raise UnexpectedResponseError(
            "unknown response: neither data nor errors present",
            raw_body=body,
            status_code=status_code,
        )
    return response


class FieldTimer:
    """
    Times standalone GraphQL queries against one endpoint.

    Queries are executed strictly one after another. Every request carries the
    same headers and variables. Results accumulate in execution order and are
    ranked when ``results()`` is called.

    Examples:
        ```python
        config = EndpointConfig.from_url(
            "https://api.example.com/graphql",
            headers=["Authorization: Bearer token"],
            variables='{"id": "123"}',
        )

        async with FieldTimer(config) as timer:
            await timer.run(flatten_source(document))

        for result in timer.results():
            print(result.status, f"{result.duration:.3f}s", result.compact_query)
        ```
    """

    def __init__(
        self,
        config: EndpointConfig,
        session: Optional[aiohttp.ClientSession] = None,
        clock_factory: Callable[[], RoundTripClock] = RoundTripClock,
    ):
        """
        Initialize the timer.

        Args:
            config: Endpoint configuration
            session: Optional pre-built session; the caller keeps ownership
            clock_factory: Builds the per-request clock
        """
        self.config = config
        self._clock_factory = clock_factory
        self._session = session
        self._owns_session = session is None
        self._results: List[TimingResult] = []

    async def __aenter__(self) -> "FieldTimer":
        if self._session is None:
            await self._create_session()
        return self

    async def __aexit__(
        self,
        _exc_type: Optional[type[BaseException]],
        _exc_val: Optional[BaseException],
        _exc_tb: Optional[Any],
    ) -> None:
        await self.close()

    async def _create_session(self) -> aiohttp.ClientSession:
        """Create the HTTP session with a single pooled connection."""
        ssl_context = (
            self.config.security.create_ssl_context() if self.config.is_secure else True
        )
        connector = aiohttp.TCPConnector(limit=1, ssl=ssl_context)
        self._session = aiohttp.ClientSession(
            connector=connector,
            timeout=aiohttp.ClientTimeout(total=self.config.timeout),
            trace_configs=[create_trace_config()],
            raise_for_status=False,
        )
        self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        if self._owns_session:
            self._session = None

    def _build_headers(self) -> CIMultiDict:
        headers: CIMultiDict = CIMultiDict()
        headers["Host"] = self.config.host_header
        headers["Content-Type"] = "application/json; charset=utf-8"
        for name, value in self.config.headers:
            headers.add(name, value)
        return headers

    async def execute(self, query: str) -> TimingResult:
        """
        Send one query and record its timing.

        Args:
            query: Standalone query string

        Returns:
            The recorded TimingResult

        Raises:
            TransportError: If the request could not be completed
            ResponseDecodeError: If the response is not a GraphQL response
        """
        session = self._session
        if session is None:
            session = await self._create_session()

        request = GraphQLRequest(query=query, variables=self.config.variables)
        clock = self._clock_factory()
        try:
            async with session.post(
                self.config.url,
                data=request.to_json().encode("utf-8"),
                headers=self._build_headers(),
                trace_request_ctx=clock,
            ) as response:
                body = await response.read()
                duration = clock.elapsed()
                status_code = response.status
                response_headers = dict(response.headers)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise ErrorHandler.handle_aiohttp_error(
                e, url=self.config.url, timeout_value=self.config.timeout
            ) from e

        decoded = classify_response(body, status_code)
        status = Status.SUCCESS if decoded.has_data else Status.FAILURE

        result = TimingResult(
            duration=duration,
            query=query,
            response=decoded,
            status=status,
            status_code=status_code,
            sequence=len(self._results),
            headers=response_headers,
        )
        self._results.append(result)

        logger.debug(
            "%s %.3fs (HTTP %d) %s", status, duration, status_code, result.compact_query
        )
        if status is Status.FAILURE:
            logger.info("Query failed: %s", "; ".join(decoded.error_messages))
        return result

    async def run(
        self,
        queries: Iterable[str],
        on_progress: Optional[ProgressCallback] = None,
    ) -> List[TimingResult]:
        """
        Execute every query in order and return the ranked results.

        A fatal error stops the run; results recorded so far stay available
        through ``completed``.
        """
        for query in queries:
            try:
                result = await self.execute(query)
            except FieldTimerError:
                logger.error(
                    "Run aborted after %d of the queries completed", len(self._results)
                )
                raise
            if on_progress is not None:
                on_progress(result)
        return self.results()

    @property
    def completed(self) -> List[TimingResult]:
        """Results recorded so far, in execution order."""
        return sorted(self._results, key=lambda result: result.sequence)

    def results(self) -> List[TimingResult]:
        """Rank the accumulated results in place and return them."""
        return list(rank_in_place(self._results))
