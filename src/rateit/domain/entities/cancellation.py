"""Cooperative cancellation for in-flight catalog requests."""

from __future__ import annotations

import asyncio

from rateit.domain.entities.movie import CatalogCancelled


class CancelToken:
    """Handle tied to exactly one catalog request.

    The issuer calls :meth:`cancel` once the request is superseded.
    Catalog clients poll :attr:`cancelled` or await :meth:`wait` to abort
    early; coordinators compare tokens by identity before committing a
    result.

    Not thread-safe; meant for a single asyncio event loop.
    """

    __slots__ = ("label", "_event")

    def __init__(self, label: str = "") -> None:
        self.label = label
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    async def wait(self) -> None:
        """Block until the token is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise CatalogCancelled(self.label)

    def __repr__(self) -> str:
        state = "cancelled" if self.cancelled else "active"
        return f"CancelToken({self.label!r}, {state})"
