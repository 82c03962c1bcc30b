"""Application orchestrator: wires search, selection and the watched list."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

import structlog

from rateit.application.signals import Signal
from rateit.application.use_cases.search_coordinator import (
    MIN_QUERY_LENGTH,
    SearchCoordinator,
    SearchState,
)
from rateit.application.use_cases.selection_controller import (
    SelectionController,
    SelectionState,
)
from rateit.application.use_cases.watched_list import WatchedListStore
from rateit.domain.entities.movie import RatingOutOfRange, WatchedEntry, WatchedSummary
from rateit.domain.ports.catalog import CatalogClientPort

log = structlog.get_logger(__name__)

DEFAULT_PAGE_TITLE = "RateIt"
DEFAULT_RATING_MAX = 10


@dataclass(frozen=True)
class AppSnapshot:
    """Everything the rendering layer needs, as one immutable value."""

    search: SearchState
    selection: SelectionState
    watched: tuple[WatchedEntry, ...]
    summary: WatchedSummary
    user_rating: int | None = None
    watched_user_rating: int | None = None  # Set when the open movie is already watched

    @property
    def is_selected_watched(self) -> bool:
        return self.watched_user_rating is not None

    @property
    def can_add(self) -> bool:
        return (
            self.selection.movie is not None
            and not self.is_selected_watched
            and self.user_rating is not None
        )

    @property
    def page_title(self) -> str:
        movie = self.selection.movie
        if movie is None or not movie.title:
            return DEFAULT_PAGE_TITLE
        return f"Movie | {movie.title}"


class RateItApp:
    """Composes the search, selection and watched-list components.

    The search coordinator's ``search_started`` signal is connected to the
    selection controller so a new search closes the open detail view.
    ``changed`` fires after any component commits new state.
    """

    def __init__(
        self,
        catalog: CatalogClientPort,
        *,
        min_query_length: int = MIN_QUERY_LENGTH,
        debounce_seconds: float = 0.0,
        rating_max: int = DEFAULT_RATING_MAX,
        watched: WatchedListStore | None = None,
    ) -> None:
        self.search = SearchCoordinator(
            catalog,
            min_query_length=min_query_length,
            debounce_seconds=debounce_seconds,
        )
        self.selection = SelectionController(catalog)
        self.watched = watched if watched is not None else WatchedListStore()
        self._rating_max = rating_max
        # Pending rating from the rating widget, keyed to the movie it was given for.
        self._pending_rating: tuple[str, int] | None = None
        self.changed = Signal("app_changed")

        self.search.search_started.connect(self.selection.on_search_started)
        self.selection.changed.connect(self._drop_stale_rating)
        self.search.changed.connect(self._notify)
        self.selection.changed.connect(self._notify)
        self.watched.changed.connect(self._notify)

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def on_query_change(self, query: str) -> asyncio.Task[None] | None:
        return self.search.on_query_change(query)

    def toggle_select(self, movie_id: str) -> asyncio.Task[None] | None:
        return self.selection.toggle_select(movie_id)

    def close(self) -> None:
        self.selection.close()

    def handle_key(self, key: str) -> bool:
        return self.selection.handle_key(key)

    def set_user_rating(self, rating: int) -> None:
        """Callback for the rating widget (whole stars, 1..rating_max)."""
        if isinstance(rating, bool) or not isinstance(rating, int):
            raise RatingOutOfRange(f"rating must be a whole number of stars, got {rating!r}")
        if not 1 <= rating <= self._rating_max:
            raise RatingOutOfRange(
                f"rating must be between 1 and {self._rating_max}, got {rating}"
            )
        movie_id = self.selection.selected_id
        if movie_id is None:
            log.debug("rating_ignored_no_selection", rating=rating)
            return
        self._pending_rating = (movie_id, rating)
        self._notify()

    def add_watched(self) -> WatchedEntry | None:
        """Add the open movie with the pending rating, then close it.

        Returns the new entry, or ``None`` when nothing was added (no
        detail loaded, no rating given, or the movie is already watched).
        """
        movie = self.selection.state.movie
        rating = self._current_rating()
        if movie is None or rating is None:
            log.debug("watched_add_skipped", reason="incomplete")
            return None
        if self.watched.contains(movie.id):
            log.info("watched_add_skipped", reason="already_watched", movie_id=movie.id)
            return None

        entry = WatchedEntry.from_detail(movie, rating)
        self.watched.add(entry)
        self.selection.close()
        return entry

    def remove_watched(self, movie_id: str) -> bool:
        return self.watched.remove(movie_id)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def snapshot(self) -> AppSnapshot:
        selection = self.selection.state
        watched_rating = (
            self.watched.user_rating_for(selection.selected_id)
            if selection.selected_id is not None
            else None
        )
        return AppSnapshot(
            search=self.search.state,
            selection=selection,
            watched=self.watched.entries,
            summary=self.watched.summary(),
            user_rating=self._current_rating(),
            watched_user_rating=watched_rating,
        )

    async def aclose(self) -> None:
        await self.search.aclose()
        await self.selection.aclose()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _current_rating(self) -> int | None:
        if self._pending_rating is None:
            return None
        movie_id, rating = self._pending_rating
        if movie_id != self.selection.selected_id:
            return None
        return rating

    def _drop_stale_rating(self, state: SelectionState) -> None:
        if self._pending_rating is not None and self._pending_rating[0] != state.selected_id:
            self._pending_rating = None

    def _notify(self, *_: object) -> None:
        self.changed.emit()
