"""Text rendering of an AppSnapshot.

Pure functions: snapshot in, strings out. No I/O.
"""

from __future__ import annotations

from rateit.application.orchestrator import AppSnapshot
from rateit.domain.entities.movie import MovieDetail, SearchResult, WatchedEntry, WatchedSummary

LOADING_TEXT = "Loading..."


def render_result_count(snapshot: AppSnapshot) -> str:
    return f"Found {len(snapshot.search.results)} results"


def render_error(message: str) -> str:
    return f"⚠️ {message}"


def render_search_result(result: SearchResult) -> str:
    return f"{result.title} 🗓 {result.year}"


def render_result_list(snapshot: AppSnapshot) -> list[str]:
    """Loading indicator, error line, or one line per result."""
    search = snapshot.search
    if search.is_loading:
        return [LOADING_TEXT]
    if search.error:
        return [render_error(search.error)]
    return [render_search_result(r) for r in search.results]


def render_summary(summary: WatchedSummary) -> list[str]:
    return [
        "Movies you watched",
        f"#️⃣ {summary.count} movies",
        f"⭐️ {summary.avg_imdb_rating:.2f}",
        f"🌟 {summary.avg_user_rating:.2f}",
        f"⏳ {summary.avg_runtime_minutes:.2f} min",
    ]


def render_watched_entry(entry: WatchedEntry) -> str:
    return (
        f"{entry.title} ⭐️ {entry.imdb_rating:g} 🌟 {entry.user_rating} "
        f"⏳ {entry.runtime_minutes} min"
    )


def render_detail(movie: MovieDetail, snapshot: AppSnapshot) -> list[str]:
    lines = [
        movie.title,
        f"{movie.released} • {movie.runtime_minutes} min",
        movie.genre,
        f"⭐ {movie.imdb_rating:g} IMDb rating",
    ]
    if snapshot.is_selected_watched:
        lines.append(f"You rated this movie {snapshot.watched_user_rating} ⭐")
    elif snapshot.can_add:
        lines.append("+ Add to list")
    lines.extend(
        [
            f'"{movie.plot}"',
            f"Starring {movie.actors}",
            f"Directed by {movie.director}",
        ]
    )
    return lines


def render_side_panel(snapshot: AppSnapshot) -> list[str]:
    """Detail view when a movie is open, otherwise the watched list."""
    selection = snapshot.selection
    if selection.selected_id is not None:
        if selection.is_loading:
            return [LOADING_TEXT]
        if selection.error:
            return [render_error(selection.error)]
        if selection.movie is not None:
            return render_detail(selection.movie, snapshot)
        return []
    lines = render_summary(snapshot.summary)
    lines.extend(render_watched_entry(e) for e in snapshot.watched)
    return lines


def render(snapshot: AppSnapshot) -> str:
    lines = [snapshot.page_title, render_result_count(snapshot)]
    lines.extend(render_result_list(snapshot))
    lines.append("")
    lines.extend(render_side_panel(snapshot))
    return "\n".join(lines)
