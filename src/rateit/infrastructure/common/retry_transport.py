"""httpx transport that retries throttled OMDb calls.

OMDb answers 429 when the daily key quota is hit in bursts and 503 while
it is overloaded. Both are retried with exponential backoff unless the
request's :class:`CancelToken` fires first, in which case the last
response is handed back and the caller drops it as superseded.
"""

from __future__ import annotations

import asyncio
import random

import httpx
import structlog

from rateit.domain.entities.cancellation import CancelToken

log = structlog.get_logger(__name__)

# Request extension key under which the OMDb client attaches the token.
CANCEL_TOKEN_EXTENSION = "rateit.cancel_token"

THROTTLED_STATUSES = frozenset({429, 503})


def _retry_after_seconds(response: httpx.Response) -> float | None:
    """Delta-seconds form of ``Retry-After``; HTTP-dates are ignored."""
    value = response.headers.get("retry-after")
    if value is None:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _lookup_context(request: httpx.Request) -> dict[str, str]:
    """``lookup``/``term`` log fields for an OMDb ``?s=`` or ``?i=`` call."""
    params = request.url.params
    if "s" in params:
        return {"lookup": "search", "term": params["s"]}
    if "i" in params:
        return {"lookup": "detail", "term": params["i"]}
    return {"lookup": "other", "term": request.url.path}


class RetryTransport(httpx.AsyncBaseTransport):
    """Retry 429/503 responses, giving up early once a search is superseded.

    Delay for attempt *n* is ``Retry-After`` when the server sends one,
    otherwise ``backoff_base * 2**n`` plus up to ``backoff_base`` of
    jitter; both are capped at *max_backoff*.
    """

    def __init__(
        self,
        wrapped: httpx.AsyncBaseTransport,
        *,
        max_retries: int = 2,
        backoff_base: float = 0.5,
        max_backoff: float = 10.0,
        retry_statuses: frozenset[int] = THROTTLED_STATUSES,
    ) -> None:
        self._wrapped = wrapped
        self._max_retries = max_retries
        self._backoff_base = backoff_base
        self._max_backoff = max_backoff
        self._retry_statuses = retry_statuses

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        token: CancelToken | None = request.extensions.get(CANCEL_TOKEN_EXTENSION)
        attempt = 0
        while True:
            response = await self._wrapped.handle_async_request(request)
            if response.status_code not in self._retry_statuses:
                return response
            if attempt >= self._max_retries:
                log.warning(
                    "omdb_retries_exhausted",
                    status=response.status_code,
                    attempts=attempt + 1,
                    **_lookup_context(request),
                )
                return response
            if token is not None and token.cancelled:
                return response

            # Drain before the next attempt so the connection can be reused.
            await response.aread()
            await response.aclose()

            delay = self._delay_for(response, attempt)
            log.info(
                "omdb_retry",
                status=response.status_code,
                attempt=attempt + 1,
                delay=round(delay, 2),
                **_lookup_context(request),
            )
            if not await self._backoff(delay, token):
                log.debug("omdb_retry_abandoned", **_lookup_context(request))
                return response
            attempt += 1

    def _delay_for(self, response: httpx.Response, attempt: int) -> float:
        delay = _retry_after_seconds(response)
        if delay is None:
            delay = self._backoff_base * (2**attempt)
            delay += random.uniform(0, self._backoff_base)  # noqa: S311
        return min(delay, self._max_backoff)

    @staticmethod
    async def _backoff(delay: float, token: CancelToken | None) -> bool:
        """Sleep for *delay*; ``False`` when *token* was cancelled meanwhile."""
        if token is None:
            await asyncio.sleep(delay)
            return True
        try:
            await asyncio.wait_for(token.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return True
        return False

    async def aclose(self) -> None:
        await self._wrapped.aclose()
