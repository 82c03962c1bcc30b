"""In-process signal for decoupled state-change notifications.

Listeners run synchronously, in connection order, on the emitting call.
Meant for a single asyncio event loop; there is no locking.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

log = structlog.get_logger(__name__)

Listener = Callable[..., None]


class Signal:
    """Named broadcast point. ``emit(*args)`` calls every listener."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def connect(self, listener: Listener) -> Callable[[], None]:
        """Subscribe *listener*; returns a callable that unsubscribes it."""
        self._listeners.append(listener)
        return lambda: self.disconnect(listener)

    def disconnect(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            log.debug("signal_listener_not_connected", signal=self.name)

    def emit(self, *args: Any) -> None:
        # Copy so listeners may disconnect themselves while being notified.
        for listener in list(self._listeners):
            listener(*args)

    def __len__(self) -> int:
        return len(self._listeners)
