"""
Delayed callbacks for notification lifecycle timers

AsyncioScheduler runs callbacks on the service's event loop.
ManualScheduler keeps a virtual clock that only moves on advance(), for
replaying recorded sessions offline and for tests.
"""
import asyncio
import heapq
import itertools
from typing import Callable, List, Optional


class ScheduledTask:
    """Handle for a pending callback."""

    def __init__(self, due_ms: float, callback: Callable[[], None]):
        self.due_ms = due_ms
        self.callback = callback
        self.cancelled = False
        self._timer: Optional[asyncio.TimerHandle] = None

    def cancel(self):
        self.cancelled = True
        if self._timer is not None:
            self._timer.cancel()

    def _run(self):
        if not self.cancelled:
            self.callback()


class AsyncioScheduler:
    """Schedules on the running event loop; call from inside the loop."""

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        loop = asyncio.get_running_loop()
        task = ScheduledTask(loop.time() * 1000 + delay_ms, callback)
        task._timer = loop.call_later(max(delay_ms, 0) / 1000, task._run)
        return task

    def run_in_background(self, fn: Callable[[], None]):
        """Run blocking work (network calls) on the loop's default executor."""
        return asyncio.get_running_loop().run_in_executor(None, fn)


class ManualScheduler:
    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms
        self._queue: List = []
        self._counter = itertools.count()

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> ScheduledTask:
        task = ScheduledTask(self.now_ms + max(delay_ms, 0), callback)
        heapq.heappush(self._queue, (task.due_ms, next(self._counter), task))
        return task

    @property
    def pending(self) -> int:
        return sum(1 for _, _, task in self._queue if not task.cancelled)

    def advance(self, ms: float):
        """Move the clock forward, running every callback that falls due in order."""
        target = self.now_ms + ms
        while self._queue and self._queue[0][0] <= target:
            due_ms, _, task = heapq.heappop(self._queue)
            self.now_ms = due_ms
            task._run()
        self.now_ms = target

    def run_in_background(self, fn: Callable[[], None]):
        fn()

    def clock(self) -> float:
        return self.now_ms
