"""
Cancellable timer services.

The simulation never sleeps; it asks a timer service for one-shot
(`call_later`) and periodic (`call_every`) callbacks and keeps the returned
handle so the callback can be cancelled deterministically.

- QtTimerService runs on the Qt event loop (QTimer).
- VirtualTimerService keeps its own clock and fires callbacks only when
  advance() is called, which makes runs reproducible.

Times are in seconds.
"""

import heapq
import itertools
import time
from typing import Callable, Optional

from PySide6.QtCore import QTimer


class TimerHandle:
    """Handle of a scheduled callback."""

    def cancel(self):
        raise NotImplementedError

    @property
    def active(self) -> bool:
        raise NotImplementedError


class _VirtualTimer(TimerHandle):
    def __init__(self, callback: Callable[[], None], interval: Optional[float]):
        self.callback = callback
        self.interval = interval
        self._active = True

    def cancel(self):
        self._active = False

    @property
    def active(self) -> bool:
        return self._active


class VirtualTimerService:
    """
    Deterministic timer service driven by an explicit clock.

    Callbacks due at the same time fire in scheduling order. While a callback
    runs, now() returns its due time.
    """

    def __init__(self, start: float = 0.0):
        self._now = float(start)
        self._queue = []
        self._seq = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = _VirtualTimer(callback, None)
        self._push(timer, self._now + max(0.0, delay))
        return timer

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        timer = _VirtualTimer(callback, interval)
        self._push(timer, self._now + interval)
        return timer

    def advance(self, seconds: float):
        """Move the clock forward, firing every callback that falls due."""
        target = self._now + max(0.0, seconds)
        while self._queue and self._queue[0][0] <= target:
            due, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._now = due
            if timer.interval is None:
                timer.cancel()
            else:
                self._push(timer, due + timer.interval)
            timer.callback()
        self._now = target

    def pending(self) -> int:
        """Number of scheduled callbacks that are still active."""
        return sum(1 for _, _, timer in self._queue if timer.active)

    def _push(self, timer: _VirtualTimer, due: float):
        heapq.heappush(self._queue, (due, next(self._seq), timer))


class _QtTimerHandle(TimerHandle):
    def __init__(self, service: "QtTimerService", timer: QTimer):
        self._service = service
        self._timer = timer

    def cancel(self):
        self._timer.stop()
        self._service._release(self._timer)

    @property
    def active(self) -> bool:
        return self._timer.isActive()


class QtTimerService:
    """
    Timer service on the Qt event loop.

    Requires a QCoreApplication/QApplication; callbacks run on its thread.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._clock = clock
        self._live = set()  # Keeps QTimer objects alive until fired/cancelled

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        timer = self._make_timer(delay, single_shot=True)

        def _fire():
            self._release(timer)
            callback()

        timer.timeout.connect(_fire)
        timer.start()
        return _QtTimerHandle(self, timer)

    def call_every(self, interval: float, callback: Callable[[], None]) -> TimerHandle:
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")
        timer = self._make_timer(interval, single_shot=False)
        timer.timeout.connect(callback)
        timer.start()
        return _QtTimerHandle(self, timer)

    def _make_timer(self, seconds: float, single_shot: bool) -> QTimer:
        timer = QTimer()
        timer.setSingleShot(single_shot)
        timer.setInterval(max(0, int(round(seconds * 1000))))
        self._live.add(timer)
        return timer

    def _release(self, timer: QTimer):
        self._live.discard(timer)
