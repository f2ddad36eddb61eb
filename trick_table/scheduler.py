# trick_table/scheduler.py
from __future__ import annotations

import asyncio
import heapq
import itertools
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Protocol, runtime_checkable

from .errors import ConfigurationError


@runtime_checkable
class TimerHandle(Protocol):
    def cancel(self) -> None:
        ...


@runtime_checkable
class Scheduler(Protocol):
    """
    Fires a callback once after a delay, on the engine's own thread.

    The returned handle must support cancel(); cancelling an already fired
    or cancelled handle is a no-op. check_ready() raises ConfigurationError
    when call_later would fail, so the engine can refuse a move up front.
    """

    def call_later(self, delay: float, callback: Callable[[], None]) -> TimerHandle:
        ...

    def check_ready(self) -> None:
        ...


class AsyncioScheduler:
    """
    Scheduler backed by an asyncio event loop's call_later.

    Without an explicit loop the running loop is picked up on first use, so
    the engine must be driven from inside that loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def check_ready(self) -> None:
        try:
            loop = self.loop
        except RuntimeError:
            raise ConfigurationError(
                "AsyncioScheduler needs a running event loop; drive the engine "
                "from inside one or pass a loop explicitly"
            ) from None
        if loop.is_closed():
            raise ConfigurationError("The scheduler's event loop is closed")

    def call_later(self, delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(delay, callback)


@dataclass(order=True)
class _ScheduledCall:
    when: float
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by a virtual clock.

    Nothing fires until the owner advances time, which makes timer-driven
    engine behaviour reproducible in tests and fast in simulations.
    """

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[_ScheduledCall] = []
        self._counter = itertools.count()

    def check_ready(self) -> None:
        pass

    def call_later(self, delay: float, callback: Callable[[], None]) -> _ScheduledCall:
        if delay < 0:
            raise ValueError("delay must not be negative")
        call = _ScheduledCall(self.now + delay, next(self._counter), callback)
        heapq.heappush(self._queue, call)
        return call

    @property
    def pending(self) -> int:
        """Number of scheduled, not yet cancelled callbacks."""
        return sum(1 for call in self._queue if not call.cancelled)

    def _pop_live(self) -> Optional[_ScheduledCall]:
        while self._queue:
            call = heapq.heappop(self._queue)
            if not call.cancelled:
                return call
        return None

    def run_next(self) -> bool:
        """
        Jump the clock to the next live callback and run it.

        Returns False when nothing is scheduled.
        """
        call = self._pop_live()
        if call is None:
            return False
        self.now = max(self.now, call.when)
        call.cancelled = True
        call.callback()
        return True

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, running every callback that falls due,
        including ones scheduled by callbacks along the way.

        Returns the number of callbacks run.
        """
        deadline = self.now + seconds
        ran = 0
        while True:
            while self._queue and self._queue[0].cancelled:
                heapq.heappop(self._queue)
            if not self._queue or self._queue[0].when > deadline:
                break
            self.run_next()
            ran += 1
        self.now = deadline
        return ran

    def run_until_idle(self, max_steps: int = 10_000) -> int:
        """Run callbacks until none are left; guards against endless chains."""
        ran = 0
        while self.run_next():
            ran += 1
            if ran >= max_steps:
                raise RuntimeError(
                    f"Scheduler still busy after {max_steps} callbacks"
                )
        return ran
