"""
timers.py — Cancellable delayed callbacks driven by the frame loop.

Nothing here owns a thread or a real timer: the session calls
`Scheduler.run_due(now)` once per frame and due events fire inline.
"""

import heapq
import itertools
import logging
from typing import Callable

logger = logging.getLogger(__name__)


class ScheduledEvent:
    """Handle for one pending callback. `cancel()` may be called any number of times."""

    def __init__(self, due: float, callback: Callable[[], None], label: str = ""):
        self.due = due
        self.label = label
        self._callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        if self.pending:
            logger.debug(f"Cancelled scheduled event {self.label or '<anonymous>'}")
        self.cancelled = True

    def fire(self) -> bool:
        if not self.pending:
            return False
        self.fired = True
        self._callback()
        return True


class Scheduler:
    def __init__(self):
        self._queue: list[tuple[float, int, ScheduledEvent]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return sum(1 for _, _, event in self._queue if event.pending)

    def schedule(
        self,
        delay_ms: float,
        callback: Callable[[], None],
        now: float,
        label: str = "",
    ) -> ScheduledEvent:
        event = ScheduledEvent(now + delay_ms, callback, label)
        heapq.heappush(self._queue, (event.due, next(self._seq), event))
        return event

    def run_due(self, now: float) -> int:
        """Fire every pending event whose due time has passed; return how many fired."""
        fired = 0
        while self._queue and self._queue[0][0] <= now:
            _, _, event = heapq.heappop(self._queue)
            if event.fire():
                fired += 1
        return fired

    def cancel_all(self) -> None:
        for _, _, event in self._queue:
            event.cancel()
        self._queue.clear()
