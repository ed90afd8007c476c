"""
Event Scheduler

A queue of delayed engine events. Timers are messages posted back into this
queue; nothing runs concurrently, the owner pops due events and applies them
one at a time.
"""

import heapq
import itertools
import time
from typing import Callable, List, Optional, Tuple

from ..models.events import Event


def monotonic_ms() -> float:
    """Default clock in milliseconds."""
    return time.monotonic() * 1000.0


class Scheduler:
    """
    Heap-ordered queue of (due time, posting order, event).

    Events that fall due at the same time come out in the order they were
    posted. While a popped event is being applied, new posts are timed from
    that event's due time, so chained timers do not drift when the owner
    drains the queue late.
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self._clock = clock
        self._queue: List[Tuple[float, int, Event]] = []
        self._counter = itertools.count()
        self._base_ms: Optional[float] = None

    def now_ms(self) -> float:
        return self._clock()

    def post(self, event: Event, delay_ms: float = 0) -> None:
        base = self._base_ms if self._base_ms is not None else self.now_ms()
        heapq.heappush(self._queue, (base + delay_ms, next(self._counter), event))

    def pop_due(self) -> Optional[Event]:
        """Removes and returns the earliest due event, or None."""
        if self._queue and self._queue[0][0] <= self.now_ms():
            due_ms, _, event = heapq.heappop(self._queue)
            self._base_ms = due_ms
            return event
        self._base_ms = None
        return None

    def settle(self) -> None:
        """Ends the current drain; later posts are timed from the clock again."""
        self._base_ms = None

    def pending(self) -> int:
        return len(self._queue)

    def next_due_ms(self) -> Optional[float]:
        return self._queue[0][0] if self._queue else None

    def clear(self) -> None:
        self._queue.clear()
        self._base_ms = None
