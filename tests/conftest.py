"""
Shared test fixtures and configuration for the field_timer test suite.
"""

from io import StringIO
from typing import Callable, Iterator, List

import pytest
from rich.console import Console

from field_timer.cli.formatting import Formatter
from field_timer.config.models import EndpointConfig
from field_timer.graphql.timer import RoundTripClock

GRAPHQL_URL = "https://api.example.com/graphql"


class ScriptedClock:
    """Clock source that returns pre-recorded readings."""

    def __init__(self, readings: List[float]) -> None:
        self._readings: Iterator[float] = iter(readings)

    def __call__(self) -> float:
        return next(self._readings)


def scripted_clock_factory(durations: List[float]) -> Callable[[], RoundTripClock]:
    """Clock factory whose n-th clock measures ``durations[n]``."""
    readings: List[float] = []
    for index, duration in enumerate(durations):
        start = index * 100.0
        readings.extend([start, start + duration])
    source = ScriptedClock(readings)
    return lambda: RoundTripClock(now=source)


@pytest.fixture
def graphql_url() -> str:
    return GRAPHQL_URL


@pytest.fixture
def endpoint_config() -> EndpointConfig:
    """Default endpoint used by engine tests."""
    return EndpointConfig.from_url(
        GRAPHQL_URL,
        headers=["Authorization: Bearer test-token", "X-Trace: on"],
        variables='{"id": "42"}',
    )


@pytest.fixture
def formatter() -> Formatter:
    """Formatter writing to in-memory consoles."""
    return Formatter(
        console=Console(file=StringIO(), width=200, no_color=True),
        err_console=Console(file=StringIO(), width=200, no_color=True),
    )


@pytest.fixture
def composite_document() -> str:
    return """
    query UserProfile($id: ID!) {
        user(id: $id) {
            name
            friends(first: 2) {
                name
            }
            ...Contact
            ... on Admin {
                permissions
            }
        }
    }

    fragment Contact on User {
        email
        phone
    }
    """


@pytest.fixture
def make_clock_factory() -> Callable[[List[float]], Callable[[], RoundTripClock]]:
    """Build clock factories with scripted durations."""
    return scripted_clock_factory
