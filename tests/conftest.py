"""Shared test fixtures for the RateIt test suite."""

from __future__ import annotations

import asyncio
from typing import Any

import pytest

from rateit.domain.entities import (
    CancelToken,
    MovieDetail,
    SearchPage,
    SearchResult,
    WatchedEntry,
)

# ---------------------------------------------------------------------------
# Controllable catalog
# ---------------------------------------------------------------------------


class ControlledCatalog:
    """CatalogClientPort fake whose calls stay pending until resolved.

    Deliberately ignores the cancel token, so a superseded call still
    "arrives" late; the coordinators must drop it on their own.
    """

    def __init__(self) -> None:
        self.search_calls: list[tuple[str, CancelToken]] = []
        self.detail_calls: list[tuple[str, CancelToken]] = []
        self._pending: dict[str, asyncio.Future[Any]] = {}

    def _future(self, key: str) -> asyncio.Future[Any]:
        if key not in self._pending:
            self._pending[key] = asyncio.get_running_loop().create_future()
        return self._pending[key]

    async def search_by_title(self, query: str, token: CancelToken) -> SearchPage:
        self.search_calls.append((query, token))
        return await self._future(f"search:{query}")

    async def fetch_detail_by_id(self, movie_id: str, token: CancelToken) -> MovieDetail:
        self.detail_calls.append((movie_id, token))
        return await self._future(f"detail:{movie_id}")

    def resolve_search(self, query: str, page: SearchPage) -> None:
        self._future(f"search:{query}").set_result(page)

    def fail_search(self, query: str, exc: BaseException) -> None:
        self._future(f"search:{query}").set_exception(exc)

    def resolve_detail(self, movie_id: str, detail: MovieDetail) -> None:
        self._future(f"detail:{movie_id}").set_result(detail)

    def fail_detail(self, movie_id: str, exc: BaseException) -> None:
        self._future(f"detail:{movie_id}").set_exception(exc)


@pytest.fixture()
def catalog() -> ControlledCatalog:
    return ControlledCatalog()


# ---------------------------------------------------------------------------
# Domain entity fixtures
# ---------------------------------------------------------------------------


def make_detail(movie_id: str, title: str = "", **overrides: Any) -> MovieDetail:
    fields: dict[str, Any] = {
        "id": movie_id,
        "title": title or f"Movie {movie_id}",
        "year": "1997",
        "poster_url": f"https://img.example.com/{movie_id}.jpg",
        "runtime_minutes": 120,
        "imdb_rating": 7.5,
        "plot": "A plot.",
        "released": "19 Dec 1997",
        "actors": "Someone",
        "director": "Someone Else",
        "genre": "Drama",
    }
    fields.update(overrides)
    return MovieDetail(**fields)


@pytest.fixture()
def detail_factory():
    return make_detail


@pytest.fixture()
def titanic_page() -> SearchPage:
    """Two-hit search page."""
    return SearchPage(
        found=True,
        results=(
            SearchResult(id="tt0120338", title="Titanic", year="1997"),
            SearchResult(id="tt0046435", title="Titanic", year="1953"),
        ),
    )


@pytest.fixture()
def not_found_page() -> SearchPage:
    return SearchPage(found=False, error="Movie not found!")


@pytest.fixture()
def watched_pair() -> tuple[WatchedEntry, WatchedEntry]:
    return (
        WatchedEntry(
            id="tt1", title="One", year="2001",
            imdb_rating=8, user_rating=9, runtime_minutes=120,
        ),
        WatchedEntry(
            id="tt2", title="Two", year="2002",
            imdb_rating=6, user_rating=7, runtime_minutes=100,
        ),
    )
