"""Port for movie catalog lookups."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from rateit.domain.entities.cancellation import CancelToken
from rateit.domain.entities.movie import MovieDetail, SearchPage


@runtime_checkable
class CatalogClientPort(Protocol):
    """Async interface for title search and detail lookup.

    Both methods raise ``CatalogCancelled`` once *token* is cancelled and
    ``CatalogTransportError`` on network, HTTP or payload failures.
    """

    async def search_by_title(self, query: str, token: CancelToken) -> SearchPage:
        """Search the catalog by title substring.

        A catalog-level "nothing matched" is reported as
        ``SearchPage(found=False)``, not raised.
        """
        ...

    async def fetch_detail_by_id(self, movie_id: str, token: CancelToken) -> MovieDetail:
        """Fetch the full detail record for a catalog ID.

        Raises ``CatalogNotFound`` when the catalog has no such ID.
        """
        ...
