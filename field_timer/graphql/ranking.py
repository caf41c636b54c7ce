"""
Ranking of timing results.

Successes come first, then failures; each group is ordered by ascending
duration. Sorting is stable, so equal durations keep their execution order
and the slowest or failing fields end up at the bottom of the report.
"""

from __future__ import annotations

from typing import Iterable, List, Tuple

from .models import Status, TimingResult


def rank_key(result: TimingResult) -> Tuple[bool, float]:
    return (result.status is Status.FAILURE, result.duration)


def rank(results: Iterable[TimingResult]) -> List[TimingResult]:
    """Return a new list of results in report order."""
    return sorted(results, key=rank_key)


def rank_in_place(results: List[TimingResult]) -> List[TimingResult]:
    """Sort ``results`` into report order and return it."""
    results.sort(key=rank_key)
    return results
