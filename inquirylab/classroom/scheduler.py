"""
Scheduler - Cancellable delayed callbacks for auto-advancing steps.

Two implementations share the call_later(delay, callback) -> handle contract,
where the handle has cancel():
- Scheduler: single-threaded timer queue driven by the host (terminal player,
  Streamlit reruns, tests with a virtual clock)
- AsyncioScheduler: thin adapter over an asyncio event loop
"""

import asyncio
import heapq
import itertools
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol


logger = logging.getLogger(__name__)


class CancellableTask(Protocol):
    def cancel(self) -> None: ...


class SchedulerLike(Protocol):
    def call_later(self, delay: float, callback: Callable[[], None]) -> CancellableTask: ...


@dataclass(order=True)
class ScheduledTask:
    """A callback due at a point on the scheduler's clock."""
    due: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    def cancel(self):
        self.cancelled = True


class Scheduler:
    """
    Timer queue run by its owner; nothing fires in the background.

    Tasks fire in due order; tasks due at the same time fire in the order they
    were scheduled. A callback may schedule further tasks.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Initialize scheduler.

        Args:
            clock: Time source in seconds (default: time.monotonic)
        """
        self.clock = clock
        self._queue: list[ScheduledTask] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[[], None]) -> ScheduledTask:
        """Schedule callback `delay` seconds from now."""
        task = ScheduledTask(
            due=self.clock() + max(delay, 0.0),
            seq=next(self._seq),
            callback=callback,
        )
        heapq.heappush(self._queue, task)
        return task

    def _drop_cancelled(self):
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)

    @property
    def pending(self) -> int:
        """Number of tasks still waiting to fire."""
        return sum(1 for task in self._queue if not task.cancelled)

    def next_due(self) -> Optional[float]:
        """Clock time of the next live task, or None if idle."""
        self._drop_cancelled()
        return self._queue[0].due if self._queue else None

    def _fire(self, task: ScheduledTask):
        task.fired = True
        task.callback()

    def run_due(self) -> int:
        """
        Fire every task already due on the clock.

        Returns:
            Number of callbacks fired
        """
        fired = 0
        while True:
            self._drop_cancelled()
            if not self._queue or self._queue[0].due > self.clock():
                return fired
            self._fire(heapq.heappop(self._queue))
            fired += 1

    def run_until_idle(
        self,
        sleep: Optional[Callable[[float], None]] = None,
        max_tasks: Optional[int] = None,
    ) -> int:
        """
        Fire tasks in due order until none are left.

        Args:
            sleep: Called with the remaining wait before a task that is not yet
                due (e.g. time.sleep); None fires it immediately
            max_tasks: Stop after this many callbacks

        Returns:
            Number of callbacks fired
        """
        fired = 0
        while max_tasks is None or fired < max_tasks:
            self._drop_cancelled()
            if not self._queue:
                break
            task = self._queue[0]
            wait = task.due - self.clock()
            if wait > 0 and sleep is not None:
                sleep(wait)
                # the callback may have been cancelled while we slept
                continue
            self._fire(heapq.heappop(self._queue))
            fired += 1
        return fired

    def cancel_all(self):
        for task in self._queue:
            task.cancel()
        self._queue.clear()


class AsyncioScheduler:
    """call_later on an asyncio event loop; the returned TimerHandle has cancel()."""

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop or asyncio.get_running_loop()

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay, 0.0), callback)
