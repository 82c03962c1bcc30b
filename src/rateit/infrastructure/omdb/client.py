"""OMDb API client: async httpx implementation with cooperative cancellation."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from rateit.domain.entities.cancellation import CancelToken
from rateit.domain.entities.movie import (
    CatalogCancelled,
    CatalogNotFound,
    CatalogTransportError,
    MovieDetail,
    SearchPage,
)
from rateit.infrastructure.common.retry_transport import CANCEL_TOKEN_EXTENSION
from rateit.infrastructure.omdb.normalize import (
    movie_detail_from_omdb,
    search_result_from_omdb,
)

log = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://www.omdbapi.com/"

HTTP_ERROR_MESSAGE = "Something went wrong with fetching movies!"
_DETAIL_NOT_FOUND_MESSAGE = "Movie not found!"


class HttpxOmdbClient:
    """Async OMDb client using a shared ``httpx.AsyncClient``.

    Implements ``CatalogClientPort`` from domain.ports.catalog.

    Each request races against its :class:`CancelToken`; when the token
    fires first the underlying httpx request is cancelled and
    ``CatalogCancelled`` is raised.
    """

    def __init__(
        self,
        *,
        api_key: str,
        http_client: httpx.AsyncClient,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._api_key = api_key
        self._http = http_client
        self._base_url = base_url

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        return {"apikey": self._api_key, **extra}

    async def _send(self, token: CancelToken, **extra: Any) -> httpx.Response:
        """Issue the GET, aborting it as soon as *token* is cancelled."""
        token.raise_if_cancelled()

        request = asyncio.ensure_future(
            self._http.get(
                self._base_url,
                params=self._params(**extra),
                extensions={CANCEL_TOKEN_EXTENSION: token},
            )
        )
        cancelled = asyncio.ensure_future(token.wait())
        try:
            await asyncio.wait(
                {request, cancelled}, return_when=asyncio.FIRST_COMPLETED
            )
        finally:
            pending = [fut for fut in (request, cancelled) if not fut.done()]
            for fut in pending:
                fut.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if token.cancelled:
            if request.done() and not request.cancelled():
                # Late arrival; mark any exception as retrieved and drop it.
                request.exception()
            log.debug("omdb_request_aborted", token=token.label)
            raise CatalogCancelled(token.label)

        try:
            return request.result()
        except httpx.HTTPError as exc:
            log.warning("omdb_network_error", token=token.label, exc_info=True)
            raise CatalogTransportError(str(exc) or HTTP_ERROR_MESSAGE) from exc

    async def _get(self, token: CancelToken, **extra: Any) -> dict[str, Any]:
        """GET with error handling. Returns the parsed JSON object."""
        resp = await self._send(token, **extra)

        if resp.status_code == 401:
            log.error("omdb_api_key_invalid", status=401)
            raise CatalogTransportError(HTTP_ERROR_MESSAGE)
        if resp.is_error:
            log.warning("omdb_http_error", status=resp.status_code)
            raise CatalogTransportError(HTTP_ERROR_MESSAGE)

        try:
            data = resp.json()
        except ValueError as exc:
            log.warning("omdb_invalid_json", token=token.label)
            raise CatalogTransportError("Invalid response from movie catalog") from exc
        if not isinstance(data, dict):
            raise CatalogTransportError("Invalid response from movie catalog")
        return data

    @staticmethod
    def _is_false_response(data: dict[str, Any]) -> bool:
        return str(data.get("Response", "")).lower() == "false"

    # ------------------------------------------------------------------
    # Public API (CatalogClientPort)
    # ------------------------------------------------------------------

    async def search_by_title(self, query: str, token: CancelToken) -> SearchPage:
        """Search movies by title substring."""
        data = await self._get(token, s=query)

        if self._is_false_response(data):
            error = str(data.get("Error", ""))
            log.debug("omdb_search_not_found", query=query, error=error)
            return SearchPage(found=False, error=error)

        results = tuple(search_result_from_omdb(item) for item in data.get("Search") or [])
        return SearchPage(found=True, results=results)

    async def fetch_detail_by_id(self, movie_id: str, token: CancelToken) -> MovieDetail:
        """Fetch one movie's full record by IMDb ID."""
        data = await self._get(token, i=movie_id, plot="short")

        if self._is_false_response(data):
            error = str(data.get("Error", "")) or _DETAIL_NOT_FOUND_MESSAGE
            log.debug("omdb_detail_not_found", movie_id=movie_id, error=error)
            raise CatalogNotFound(error)

        return movie_detail_from_omdb(data, fallback_id=movie_id)
