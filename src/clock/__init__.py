"""Clock module -- monotonic time and cancellable scheduling for mini-games.

Provides the ``TimerSource`` contract (clock read, one-shot, interval and
per-frame callbacks), ``TimerScope`` for per-attempt handle ownership,
``ManualTimerSource`` (virtual time, advanced explicitly) and
``LoopTimerSource`` (real time on an asyncio event loop).
"""

from .base import TimerHandle, TimerSource
from .loop import LoopTimerSource
from .manual import ManualTimerSource
from .scope import TimerScope

__all__ = [
    "LoopTimerSource",
    "ManualTimerSource",
    "TimerHandle",
    "TimerScope",
    "TimerSource",
]
