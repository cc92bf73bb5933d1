"""Event-loop timer source -- real time on a single-threaded asyncio loop.

Uses ``loop.time()`` as the monotonic clock and ``call_later`` /
``call_at`` for scheduling.  Interval callbacks are re-armed against an
absolute schedule (``start + n * interval``) so a slow callback does not
accumulate drift across a countdown.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from .base import FrameCallback, TimerHandle, TimerSource
from .manual import DEFAULT_FRAME_INTERVAL_MS

logger = logging.getLogger(__name__)


class LoopTimerSource(TimerSource):
    """Timer source backed by an :mod:`asyncio` event loop.

    Parameters
    ----------
    loop : asyncio.AbstractEventLoop or None
        Loop to schedule on.  If None, the running loop is used, falling
        back to a new event loop when none is running.  A loop created
        here is owned by the source and closed by :meth:`close`.
    frame_interval_ms : float
        Spacing of emulated animation frames.  Default is 1000/60.
    """

    def __init__(
        self,
        loop: asyncio.AbstractEventLoop | None = None,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
    ) -> None:
        self._owns_loop = False
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                loop = asyncio.new_event_loop()
                self._owns_loop = True
                logger.debug("No running event loop, created a private one")
        self.loop = loop
        self.frame_interval_ms = frame_interval_ms

    @property
    def owns_loop(self) -> bool:
        """True if the source created its loop and is responsible for closing it."""
        return self._owns_loop

    def close(self) -> None:
        """Close the loop if this source created it.  A borrowed loop is left alone."""
        if self._owns_loop and not self.loop.is_closed():
            self.loop.close()

    def now(self) -> float:
        return self.loop.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle: TimerHandle

        def _fire() -> None:
            handle._mark_done()
            callback()

        timer = self.loop.call_later(max(0.0, delay_ms) / 1000.0, _fire)
        handle = TimerHandle(timer.cancel, label=f"once+{delay_ms:.0f}ms")
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")

        start = self.loop.time()
        interval_s = interval_ms / 1000.0
        state: dict[str, object] = {"n": 1, "timer": None}

        def _arm() -> None:
            state["timer"] = self.loop.call_at(start + state["n"] * interval_s, _fire)

        def _fire() -> None:
            state["n"] = int(state["n"]) + 1
            _arm()
            callback()

        def _cancel() -> None:
            timer = state["timer"]
            if timer is not None:
                timer.cancel()

        _arm()
        return TimerHandle(_cancel, label=f"every {interval_ms:.0f}ms")

    def request_frame(self, callback: FrameCallback) -> TimerHandle:
        handle: TimerHandle

        def _fire() -> None:
            handle._mark_done()
            callback(self.now())

        timer = self.loop.call_later(self.frame_interval_ms / 1000.0, _fire)
        handle = TimerHandle(timer.cancel, label="frame")
        return handle
