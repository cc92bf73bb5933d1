"""Manual timer source -- virtual time for tests and headless play.

Time only moves when :meth:`ManualTimerSource.advance` is called.  Due
callbacks fire in due-time order (ties in registration order) and the
clock reads the due time of the callback being fired, so elapsed-time
arithmetic inside callbacks is exact.
"""

from __future__ import annotations

import heapq
import itertools
import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from .base import FrameCallback, TimerHandle, TimerSource

logger = logging.getLogger(__name__)

# 60 Hz display refresh.
DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0


@dataclass(order=True)
class _Entry:
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    handle: TimerHandle = field(compare=False)
    interval: float | None = field(default=None, compare=False)


class ManualTimerSource(TimerSource):
    """Deterministic virtual clock.

    Parameters
    ----------
    start_ms : float
        Initial clock reading.  Default is 0.
    frame_interval_ms : float
        Spacing of animation frames.  Default is 1000/60.
    """

    def __init__(
        self,
        start_ms: float = 0.0,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
    ) -> None:
        if frame_interval_ms <= 0:
            raise ValueError(f"frame_interval_ms must be > 0, got {frame_interval_ms}")
        self._now = float(start_ms)
        self.frame_interval_ms = float(frame_interval_ms)
        self._queue: list[_Entry] = []
        self._seq = itertools.count()

    # -- TimerSource ---------------------------------------------------

    def now(self) -> float:
        return self._now

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        handle = TimerHandle(label=f"once+{delay_ms:.0f}ms")
        self._push(self._now + max(0.0, delay_ms), callback, handle)
        return handle

    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        handle = TimerHandle(label=f"every {interval_ms:.0f}ms")
        self._push(self._now + interval_ms, callback, handle, interval=interval_ms)
        return handle

    def request_frame(self, callback: FrameCallback) -> TimerHandle:
        handle = TimerHandle(label="frame")
        self._push(
            self._now + self.frame_interval_ms,
            lambda: callback(self._now),
            handle,
        )
        return handle

    # -- Driving -------------------------------------------------------

    @property
    def pending(self) -> int:
        """Number of live (not cancelled, not fired) registrations."""
        return sum(1 for entry in self._queue if entry.handle.active)

    def advance(self, ms: float) -> int:
        """Move the clock forward by ``ms`` and fire everything that falls due.

        Parameters
        ----------
        ms : float
            Milliseconds to advance.  Must be non-negative.

        Returns
        -------
        int
            Number of callbacks fired.
        """
        if ms < 0:
            raise ValueError(f"Cannot advance by a negative amount: {ms}")
        return self.advance_to(self._now + ms)

    def advance_to(self, target_ms: float) -> int:
        """Fire every callback due at or before ``target_ms``.

        Callbacks scheduled by a firing callback are honoured in the same
        pass when they fall due before ``target_ms``.
        """
        fired = 0
        while self._queue and self._queue[0].due <= target_ms:
            entry = heapq.heappop(self._queue)
            if not entry.handle.active:
                continue
            self._now = max(self._now, entry.due)
            if entry.interval is not None:
                self._push(entry.due + entry.interval, entry.callback, entry.handle, entry.interval)
            else:
                entry.handle._mark_done()
            entry.callback()
            fired += 1
        self._now = max(self._now, target_ms)
        return fired

    def step_frames(self, count: int = 1) -> int:
        """Advance by ``count`` whole frame intervals."""
        return self.advance(self.frame_interval_ms * count)

    def _push(
        self,
        due: float,
        callback: Callable[[], None],
        handle: TimerHandle,
        interval: float | None = None,
    ) -> None:
        heapq.heappush(
            self._queue,
            _Entry(due=due, seq=next(self._seq), callback=callback, handle=handle, interval=interval),
        )
        logger.debug("Scheduled %r due at %.1fms", handle, due)
