"""Per-attempt ownership of timer registrations.

A :class:`TimerScope` wraps a :class:`TimerSource` and remembers every
handle registered through it.  Closing the scope cancels all of them in
one call, so a discarded mini-game attempt can never be touched by one
of its own late callbacks.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from .base import FrameCallback, TimerHandle, TimerSource

logger = logging.getLogger(__name__)


class TimerScope:
    """Scoped set of cancellable timer handles.

    Parameters
    ----------
    source : TimerSource
        Clock to schedule on.
    name : str
        Owner name used in log messages.
    """

    def __init__(self, source: TimerSource, name: str = "scope") -> None:
        self.source = source
        self.name = name
        self._handles: set[TimerHandle] = set()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def live_handles(self) -> int:
        """Number of registrations that may still fire."""
        return sum(1 for handle in self._handles if handle.active)

    def now(self) -> float:
        return self.source.now()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        self._check_open()
        handle: TimerHandle

        def _fire() -> None:
            self._handles.discard(handle)
            callback()

        handle = self.source.call_later(delay_ms, _fire)
        self._handles.add(handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        self._check_open()
        handle = self.source.call_every(interval_ms, callback)
        self._handles.add(handle)
        return handle

    def request_frame(self, callback: FrameCallback) -> TimerHandle:
        self._check_open()
        handle: TimerHandle

        def _fire(timestamp: float) -> None:
            self._handles.discard(handle)
            callback(timestamp)

        handle = self.source.request_frame(_fire)
        self._handles.add(handle)
        return handle

    def close(self) -> None:
        """Cancel every registration and refuse new ones.  Idempotent."""
        if self._closed:
            return
        self._closed = True
        cancelled = 0
        for handle in list(self._handles):
            if handle.active:
                handle.cancel()
                cancelled += 1
        self._handles.clear()
        logger.debug("Closed %s: cancelled %d pending callbacks", self.name, cancelled)

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError(f"Cannot schedule on closed timer scope {self.name!r}")

    def __enter__(self) -> "TimerScope":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:  # noqa: ANN001
        self.close()
        return False

    def __repr__(self) -> str:
        status = "closed" if self._closed else f"{self.live_handles} live"
        return f"<TimerScope({self.name!r}, {status})>"
