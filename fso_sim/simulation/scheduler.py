"""
Virtual-time event scheduler.

A single-threaded discrete-event queue. The simulator is passed explicitly to
the components that need it; there is no global instance.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, List, Optional, Tuple

from .errors import SchedulingError

logger = logging.getLogger(__name__)


@dataclass
class Event:
    """A pending callback at a virtual time."""
    time: float
    uid: int
    callback: Callable[..., Any]
    args: Tuple = field(default_factory=tuple)
    cancelled: bool = False

    def cancel(self):
        self.cancelled = True


class Simulator:
    """
    Discrete-event simulator with a min-heap keyed by (time, insertion order).

    Events scheduled for the same virtual time run in the order they were
    scheduled.
    """

    def __init__(self, start_time: float = 0.0):
        self._now = start_time
        self._queue: List[Tuple[float, int, Event]] = []
        self._sequence = itertools.count()
        self._executed = 0

    @property
    def now(self) -> float:
        """Current virtual time in seconds."""
        return self._now

    @property
    def pending(self) -> int:
        """Number of scheduled events that have not been cancelled."""
        return sum(1 for _, _, event in self._queue if not event.cancelled)

    @property
    def executed(self) -> int:
        return self._executed

    def schedule(self, delay: float, callback: Callable[..., Any], *args) -> Event:
        """
        Schedule a callback after a delay relative to the current time.

        Args:
            delay: Non-negative delay in seconds
            callback: Callable invoked with *args when the event fires

        Returns:
            The scheduled Event, which can be cancelled
        """
        if delay < 0:
            raise SchedulingError(f"Cannot schedule with negative delay {delay}")
        return self.schedule_at(self._now + delay, callback, *args)

    def schedule_at(self, time: float, callback: Callable[..., Any], *args) -> Event:
        """Schedule a callback at an absolute virtual time."""
        if time < self._now:
            raise SchedulingError(
                f"Cannot schedule at t={time} which is before now={self._now}"
            )
        uid = next(self._sequence)
        event = Event(time=time, uid=uid, callback=callback, args=args)
        heapq.heappush(self._queue, (time, uid, event))
        return event

    def cancel(self, event: Event):
        event.cancel()

    def run(self, until: Optional[float] = None) -> int:
        """
        Execute events in virtual-time order.

        Args:
            until: Optional stop time; events after it stay queued

        Returns:
            Number of events executed during this call
        """
        executed = 0
        while self._queue:
            time, _, event = self._queue[0]
            if until is not None and time > until:
                break
            heapq.heappop(self._queue)
            if event.cancelled:
                continue

            self._now = time
            event.callback(*event.args)
            executed += 1

        if until is not None and until > self._now:
            self._now = until

        self._executed += executed
        logger.debug(f"Executed {executed} events, now={self._now:.9f} s")
        return executed
