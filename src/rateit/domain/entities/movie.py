"""Domain entities for the movie catalog and the watched list.

Pure value objects. No framework dependencies, no I/O.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SearchResult:
    """A single hit from a title search."""

    id: str  # Catalog (IMDb) ID, e.g. "tt0120338"
    title: str
    year: str  # Kept verbatim, series use ranges like "2008–2013"
    poster_url: str = ""


@dataclass(frozen=True)
class SearchPage:
    """Outcome of a title search that reached the catalog.

    ``found=False`` is the catalog's own "nothing matched" answer and is
    distinct from an empty ``results`` tuple.
    """

    found: bool
    results: tuple[SearchResult, ...] = ()
    error: str = ""  # Catalog-supplied reason when found is False


@dataclass(frozen=True)
class MovieDetail:
    """Normalized detail record for one catalog item."""

    id: str
    title: str
    year: str
    poster_url: str = ""
    runtime_minutes: int = 0
    imdb_rating: float = 0.0
    plot: str = ""
    released: str = ""
    actors: str = ""
    director: str = ""
    genre: str = ""


@dataclass(frozen=True)
class WatchedEntry:
    """A movie the user has watched and rated."""

    id: str
    title: str
    year: str
    poster_url: str = ""
    imdb_rating: float = 0.0
    runtime_minutes: int = 0
    user_rating: int = 0

    @classmethod
    def from_detail(cls, detail: MovieDetail, user_rating: int) -> WatchedEntry:
        return cls(
            id=detail.id,
            title=detail.title,
            year=detail.year,
            poster_url=detail.poster_url,
            imdb_rating=detail.imdb_rating,
            runtime_minutes=detail.runtime_minutes,
            user_rating=user_rating,
        )


@dataclass(frozen=True)
class WatchedSummary:
    """Aggregates over the watched list (always recomputed)."""

    count: int = 0
    avg_imdb_rating: float = 0.0
    avg_user_rating: float = 0.0
    avg_runtime_minutes: float = 0.0


class CatalogError(Exception):
    """Base error for catalog lookups."""


class CatalogNotFound(CatalogError):
    """The catalog answered, but nothing matched."""


class CatalogTransportError(CatalogError):
    """Network, HTTP status or payload failure."""


class CatalogCancelled(CatalogError):
    """The request's cancel token fired before it completed."""


class RatingOutOfRange(ValueError):
    pass
