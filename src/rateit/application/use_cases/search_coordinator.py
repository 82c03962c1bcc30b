"""Search coordinator: last-query-wins title search against the catalog."""

from __future__ import annotations

import asyncio
from contextlib import suppress
from dataclasses import dataclass, replace

import structlog

from rateit.application.signals import Signal
from rateit.domain.entities.cancellation import CancelToken
from rateit.domain.entities.movie import (
    CatalogCancelled,
    CatalogError,
    CatalogNotFound,
    SearchPage,
    SearchResult,
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

NOT_FOUND_MESSAGE = "Oops! Movie Not Found!"
MIN_QUERY_LENGTH = 3


@dataclass(frozen=True)
class SearchState:
    """Read-only snapshot of the search stream."""

    query: str = ""
    request: RequestState[tuple[SearchResult, ...]] = IDLE
    # Last committed result list; replaced atomically on success,
    # cleared when the query drops into the inactive zone.
    results: tuple[SearchResult, ...] = ()

    @property
    def is_loading(self) -> bool:
        return isinstance(self.request, Loading)

    @property
    def error(self) -> str:
        if isinstance(self.request, Failure):
            return self.request.message
        return ""


class SearchCoordinator:
    """Owns the query and the result-list state.

    Every search carries its own :class:`CancelToken`. A new query
    cancels the previous token, and a completion only commits while its
    token is still the active one, so a late response for an older query
    never touches state.

    Signals:
        ``search_started(query)``: a query left the inactive zone and a
        request is about to be issued.
        ``changed(state)``: the snapshot was replaced.
    """

    def __init__(
        self,
        catalog: CatalogClientPort,
        *,
        min_query_length: int = MIN_QUERY_LENGTH,
        debounce_seconds: float = 0.0,
    ) -> None:
        if min_query_length < MIN_QUERY_LENGTH:
            raise ValueError(
                f"min_query_length must be >= {MIN_QUERY_LENGTH}, got {min_query_length}"
            )
        self._catalog = catalog
        self._min_query_length = min_query_length
        self._debounce = debounce_seconds
        self._state = SearchState()
        self._token: CancelToken | None = None
        self._task: asyncio.Task[None] | None = None
        self.search_started = Signal("search_started")
        self.changed = Signal("search_changed")

    @property
    def state(self) -> SearchState:
        return self._state

    def on_query_change(self, query: str) -> asyncio.Task[None] | None:
        """Record *query* and (re)start the search.

        Returns the task driving the new request, or ``None`` when the
        query is in the inactive zone. Must be called with a running
        event loop.
        """
        self._cancel_inflight()

        if len(query) < self._min_query_length:
            log.debug("search_inactive_query", query=query)
            self._commit(SearchState(query=query))
            return None

        token = CancelToken(label=query)
        self._token = token
        self._commit(replace(self._state, query=query, request=Loading(key=query)))
        self.search_started.emit(query)

        log.debug("search_started", query=query)
        self._task = asyncio.get_running_loop().create_task(
            self._run(query, token), name=f"search:{query}"
        )
        return self._task

    async def aclose(self) -> None:
        """Cancel any in-flight search and wait for its task to finish."""
        self._cancel_inflight()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            with suppress(asyncio.CancelledError):
                await task

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _cancel_inflight(self) -> None:
        if self._token is not None:
            self._token.cancel()
            self._token = None

    async def _run(self, query: str, token: CancelToken) -> None:
        try:
            if self._debounce > 0:
                await asyncio.sleep(self._debounce)
                token.raise_if_cancelled()
            page = await self._catalog.search_by_title(query, token)
        except CatalogCancelled:
            log.debug("search_cancelled", query=query)
            return
        except CatalogNotFound as exc:
            outcome: RequestState = Failure(FailureKind.NOT_FOUND, str(exc) or NOT_FOUND_MESSAGE)
        except CatalogError as exc:
            log.info("search_failed", query=query, error=str(exc))
            outcome = Failure(FailureKind.TRANSPORT, str(exc))
        except Exception as exc:
            log.warning("search_unexpected_error", query=query, exc_info=True)
            outcome = Failure(FailureKind.TRANSPORT, str(exc) or type(exc).__name__)
        else:
            outcome = self._page_to_state(page)

        if token is not self._token:
            # Superseded while awaiting; the newer request owns the state.
            log.debug("search_superseded", query=query)
            return

        self._token = None
        if isinstance(outcome, Success):
            log.info("search_completed", query=query, results=len(outcome.payload))
            self._commit(replace(self._state, request=outcome, results=outcome.payload))
        else:
            self._commit(replace(self._state, request=outcome))

    @staticmethod
    def _page_to_state(page: SearchPage) -> RequestState:
        if not page.found:
            return Failure(FailureKind.NOT_FOUND, NOT_FOUND_MESSAGE)
        return Success(page.results)

    def _commit(self, state: SearchState) -> None:
        self._state = state
        self.changed.emit(state)
