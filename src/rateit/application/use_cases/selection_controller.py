"""Selection controller: the currently opened movie and its detail fetch."""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass

import structlog

from rateit.application.signals import Signal
from rateit.domain.entities.cancellation import CancelToken
from rateit.domain.entities.movie import (
    CatalogCancelled,
    CatalogError,
    CatalogNotFound,
    MovieDetail,
)
from rateit.domain.entities.request_state import (
    IDLE,
    Failure,
    FailureKind,
    Loading,
    RequestState,
    Success,
)
from rateit.domain.ports.catalog import CatalogClientPort

log = structlog.get_logger(__name__)

CLOSE_KEYS = frozenset({"Escape"})


@dataclass(frozen=True)
class SelectionState:
    """Read-only snapshot of the selection and its detail stream."""

    selected_id: str | None = None
    detail: RequestState[MovieDetail] = IDLE

    @property
    def is_loading(self) -> bool:
        return isinstance(self.detail, Loading)

    @property
    def movie(self) -> MovieDetail | None:
        if isinstance(self.detail, Success):
            return self.detail.payload
        return None

    @property
    def error(self) -> str:
        if isinstance(self.detail, Failure):
            return self.detail.message
        return ""


class SelectionController:
    """Owns the selected catalog ID and the detail ``RequestState``.

    Each selection issues a fresh detail fetch (no caching across
    selections). Selecting another ID or closing cancels the previous
    fetch's token; a stale detail response is dropped.
    """

    def __init__(self, catalog: CatalogClientPort) -> None:
        self._catalog = catalog
        self._state = SelectionState()
        self._token: CancelToken | None = None
        self._task: asyncio.Task[None] | None = None
        self.changed = Signal("selection_changed")

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def selected_id(self) -> str | None:
        return self._state.selected_id

    def toggle_select(self, movie_id: str) -> asyncio.Task[None] | None:
        """Select *movie_id*, or clear the selection if it is already selected."""
        if movie_id == self._state.selected_id:
            self.close()
            return None
        return self._select(movie_id)

    def close(self) -> None:
        """Clear the selection unconditionally."""
        self._cancel_inflight()
        if self._state == SelectionState():
            return
        log.debug("selection_closed", movie_id=self._state.selected_id)
        self._commit(SelectionState())

    def handle_key(self, key: str) -> bool:
        """Keyboard hook; closes an open detail view on Escape.

        Returns ``True`` if the key was consumed.
        """
        if key in CLOSE_KEYS and self._state.selected_id is not None:
            self.close()
            return True
        return False

    def on_search_started(self, query: str) -> None:
        """A new search invalidates the current focus."""
        if self._state.selected_id is not None:
            log.debug("selection_closed_by_search", query=query)
        self.close()

    async def aclose(self) -> None:
        self._cancel_inflight()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _select(self, movie_id: str) -> asyncio.Task[None]:
        self._cancel_inflight()
        token = CancelToken(label=movie_id)
        self._token = token
        self._commit(SelectionState(selected_id=movie_id, detail=Loading(key=movie_id)))

        log.debug("detail_requested", movie_id=movie_id)
        self._task = asyncio.get_running_loop().create_task(
            self._load(movie_id, token), name=f"detail:{movie_id}"
        )
        return self._task

    def _cancel_inflight(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None

    async def _load(self, movie_id: str, token: CancelToken) -> None:
        try:
            detail = await self._catalog.fetch_detail_by_id(movie_id, token)
        except CatalogCancelled:
            log.debug("detail_cancelled", movie_id=movie_id)
            return
        except CatalogNotFound as exc:
            outcome: RequestState = Failure(FailureKind.NOT_FOUND, str(exc))
        except CatalogError as exc:
            log.info("detail_failed", movie_id=movie_id, error=str(exc))
            outcome = Failure(FailureKind.TRANSPORT, str(exc))
        except Exception as exc:
            log.warning("detail_unexpected_error", movie_id=movie_id, exc_info=True)
            outcome = Failure(FailureKind.TRANSPORT, str(exc) or type(exc).__name__)
        else:
            outcome = Success(detail)

        if token is not self._token:
            log.debug("detail_superseded", movie_id=movie_id)
            return

        self._token = None
        if isinstance(outcome, Success):
            log.info("detail_loaded", movie_id=movie_id, title=outcome.payload.title)
        self._commit(SelectionState(selected_id=movie_id, detail=outcome))

    def _commit(self, state: SelectionState) -> None:
        self._state = state
        self.changed.emit(state)
