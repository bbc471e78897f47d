"""
Timer facilities for delayed device transitions.

A scheduler hands out cancellable handles: call_later(delay, callback) -> handle,
handle.cancel(). ManualScheduler runs on a virtual clock advanced by the host
(frame loop, tests); AsyncioScheduler wraps a running asyncio event loop.
"""

import asyncio
import heapq
import itertools
import logging
from typing import Callable, List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle: ...

    def now(self) -> float: ...


class ManualTimer:
    """Handle returned by ManualScheduler.call_later."""

    __slots__ = ("deadline", "callback", "_cancelled", "_fired")

    def __init__(self, deadline: float, callback: Callable[[], None]) -> None:
        self.deadline = deadline
        self.callback = callback
        self._cancelled = False
        self._fired = False

    def cancel(self) -> None:
        self._cancelled = True

    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def active(self) -> bool:
        return not (self._cancelled or self._fired)


class ManualScheduler:
    """
    Virtual-clock scheduler, single threaded.

    advance(dt) and advance_to(time) move the clock forward and fire every
    active timer whose deadline falls inside the window, in deadline order
    (FIFO for ties), including timers scheduled by callbacks during the same
    advance. Deadlines within `tolerance` past the target count as due, so a
    clock driven by accumulated frame times does not miss a stage by one ulp.
    """

    def __init__(self, start: float = 0.0, tolerance: float = 1e-9) -> None:
        if tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {tolerance}")
        self._now = float(start)
        self.tolerance = float(tolerance)
        self._queue: List[Tuple[float, int, ManualTimer]] = []
        self._counter = itertools.count()

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[[], None]) -> ManualTimer:
        if delay < 0:
            raise ValueError(f"delay must be >= 0, got {delay}")
        timer = ManualTimer(self._now + float(delay), callback)
        heapq.heappush(self._queue, (timer.deadline, next(self._counter), timer))
        return timer

    def advance(self, dt: float) -> int:
        """
        Move the clock by dt and run due callbacks.

        Returns:
            Number of callbacks fired.
        """
        if dt < 0:
            raise ValueError(f"dt must be >= 0, got {dt}")
        return self.advance_to(self._now + float(dt))

    def advance_to(self, time: float) -> int:
        """
        Move the clock to an absolute time and run due callbacks.

        Hosts stepping at a fixed rate should pass start + frame * dt rather
        than summing dt, so the clock never drifts from the frame count.

        Returns:
            Number of callbacks fired.
        """
        target = float(time)
        if target < self._now:
            raise ValueError(f"cannot move the clock back from {self._now} to {target}")
        fired = 0
        while self._queue and self._queue[0][0] <= target + self.tolerance:
            deadline, _, timer = heapq.heappop(self._queue)
            if not timer.active:
                continue
            self._now = min(deadline, target)
            timer._fired = True
            timer.callback()
            fired += 1
        self._now = target
        return fired

    def run_until_idle(self, max_time: Optional[float] = None) -> int:
        """Advance straight to each next deadline until no active timer remains."""
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue:
                return fired
            deadline = self._queue[0][0]
            if max_time is not None and deadline > max_time:
                return fired
            fired += self.advance_to(max(deadline, self._now))

    def pending_count(self) -> int:
        return sum(1 for _, _, timer in self._queue if timer.active)

    def _drop_cancelled(self) -> None:
        while self._queue and not self._queue[0][2].active:
            heapq.heappop(self._queue)


class AsyncioScheduler:
    """Adapter over an asyncio event loop (wall-clock hosts)."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now(self) -> float:
        return self.loop.time()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)
