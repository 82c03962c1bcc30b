"""Watched-list store: the user's rated movies, in insertion order."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

import structlog

from rateit.application.signals import Signal
from rateit.domain.aggregates import summarize
from rateit.domain.entities.movie import WatchedEntry, WatchedSummary

log = structlog.get_logger(__name__)


class WatchedListStore:
    """Append-only list of ``WatchedEntry`` with delete by ID.

    The store does not reject duplicate IDs; callers that want one entry
    per movie check :meth:`contains` first. Aggregates are recomputed from
    the current entries on every :meth:`summary` call.
    """

    def __init__(self, entries: Iterable[WatchedEntry] = ()) -> None:
        self._entries: list[WatchedEntry] = list(entries)
        self.changed = Signal("watched_changed")

    @property
    def entries(self) -> tuple[WatchedEntry, ...]:
        return tuple(self._entries)

    def add(self, entry: WatchedEntry) -> None:
        if self.contains(entry.id):
            log.warning("watched_duplicate_appended", movie_id=entry.id)
        self._entries.append(entry)
        log.info("watched_added", movie_id=entry.id, user_rating=entry.user_rating)
        self.changed.emit(self.entries)

    def remove(self, movie_id: str) -> bool:
        """Remove the first entry with *movie_id*.

        Returns ``False`` (and changes nothing) when no entry matches.
        """
        for index, entry in enumerate(self._entries):
            if entry.id == movie_id:
                del self._entries[index]
                log.info("watched_removed", movie_id=movie_id)
                self.changed.emit(self.entries)
                return True
        log.debug("watched_remove_missing", movie_id=movie_id)
        return False

    def contains(self, movie_id: str) -> bool:
        return any(entry.id == movie_id for entry in self._entries)

    def user_rating_for(self, movie_id: str) -> int | None:
        for entry in self._entries:
            if entry.id == movie_id:
                return entry.user_rating
        return None

    def summary(self) -> WatchedSummary:
        return summarize(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[WatchedEntry]:
        return iter(self.entries)
