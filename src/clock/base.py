"""Base TimerSource abstract class.

Every clock implementation exposes the same four capabilities: a
monotonic millisecond clock read, a one-shot delayed callback, a
repeating interval callback and a per-frame callback.  Each scheduling
call returns a :class:`TimerHandle` whose ``cancel()`` takes effect
synchronously: a cancelled callback never fires afterwards.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

FrameCallback = Callable[[float], None]


class TimerHandle:
    """Cancellable registration returned by every scheduling call.

    Parameters
    ----------
    cancel_fn : callable or None
        Backend hook that unregisters the callback.  Called at most once.
    label : str
        Short description used in logs and ``repr``.
    """

    def __init__(self, cancel_fn: Callable[[], None] | None = None, label: str = "") -> None:
        self._cancel_fn = cancel_fn
        self._cancelled = False
        self._done = False
        self.label = label

    @property
    def cancelled(self) -> bool:
        """Whether ``cancel()`` has been called."""
        return self._cancelled

    @property
    def active(self) -> bool:
        """Whether the callback may still fire."""
        return not self._cancelled and not self._done

    def cancel(self) -> None:
        """Cancel the registration.  Idempotent."""
        if self._cancelled:
            return
        self._cancelled = True
        if self._cancel_fn is not None:
            self._cancel_fn()
            self._cancel_fn = None

    def _mark_done(self) -> None:
        """Flag a one-shot registration as fired."""
        self._done = True

    def __repr__(self) -> str:
        if self._cancelled:
            status = "cancelled"
        elif self._done:
            status = "done"
        else:
            status = "pending"
        return f"<TimerHandle({self.label!r}, {status})>"


class TimerSource(ABC):
    """Abstract clock and scheduler used by mini-games.

    All times are milliseconds.  Implementations are single-threaded:
    callbacks run one at a time on the thread that drives the source.
    """

    @abstractmethod
    def now(self) -> float:
        """Return the current monotonic time in milliseconds."""

    @abstractmethod
    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` once after ``delay_ms`` milliseconds."""

    @abstractmethod
    def call_every(self, interval_ms: float, callback: Callable[[], None]) -> TimerHandle:
        """Run ``callback`` every ``interval_ms`` milliseconds until cancelled.

        The first call happens one full interval after registration.
        """

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> TimerHandle:
        """Run ``callback(timestamp_ms)`` once on the next animation frame."""
