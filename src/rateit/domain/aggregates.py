"""Aggregate statistics over the watched list."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from math import fsum

from rateit.domain.entities.movie import WatchedEntry, WatchedSummary


def average(values: Iterable[float]) -> float:
    """Arithmetic mean of *values*; ``0.0`` for empty input."""
    items = list(values)
    if not items:
        return 0.0
    return fsum(items) / len(items)


def summarize(entries: Sequence[WatchedEntry]) -> WatchedSummary:
    return WatchedSummary(
        count=len(entries),
        avg_imdb_rating=average(e.imdb_rating for e in entries),
        avg_user_rating=average(e.user_rating for e in entries),
        avg_runtime_minutes=average(e.runtime_minutes for e in entries),
    )
