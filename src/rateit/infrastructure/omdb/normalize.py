"""Raw OMDb JSON -> domain entities."""

from __future__ import annotations

import re
from typing import Any

from rateit.domain.entities.movie import MovieDetail, SearchResult

_NOT_AVAILABLE = "N/A"
_LEADING_INT_RE = re.compile(r"\s*(\d+)")


def text(value: Any) -> str:
    """OMDb uses ``"N/A"`` for missing fields; map that to ``""``."""
    if value is None or value == _NOT_AVAILABLE:
        return ""
    return str(value).strip()


def parse_runtime_minutes(value: Any) -> int:
    """``"142 min"`` -> ``142``; anything unparseable -> ``0``."""
    match = _LEADING_INT_RE.match(text(value))
    return int(match.group(1)) if match else 0


def parse_rating(value: Any) -> float:
    """``"8.1"`` -> ``8.1``; ``"N/A"`` or garbage -> ``0.0``."""
    try:
        return float(text(value).replace(",", "."))
    except ValueError:
        return 0.0


def search_result_from_omdb(item: dict[str, Any]) -> SearchResult:
    return SearchResult(
        id=text(item.get("imdbID")),
        title=text(item.get("Title")),
        year=text(item.get("Year")),
        poster_url=text(item.get("Poster")),
    )


def movie_detail_from_omdb(data: dict[str, Any], *, fallback_id: str = "") -> MovieDetail:
    return MovieDetail(
        id=text(data.get("imdbID")) or fallback_id,
        title=text(data.get("Title")),
        year=text(data.get("Year")),
        poster_url=text(data.get("Poster")),
        runtime_minutes=parse_runtime_minutes(data.get("Runtime")),
        imdb_rating=parse_rating(data.get("imdbRating")),
        plot=text(data.get("Plot")),
        released=text(data.get("Released")),
        actors=text(data.get("Actors")),
        director=text(data.get("Director")),
        genre=text(data.get("Genre")),
    )
