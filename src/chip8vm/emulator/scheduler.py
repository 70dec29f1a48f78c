"""
Event Scheduler for the CHIP-8 VM
=================================

Merges the three periodic event sources into one ordered stream:

- CLOCK:  instruction clock, configurable 1-500 Hz (one step() each)
- TIMER:  fixed 60 Hz timer tick (one timer_tick() each)
- RENDER: display refresh (reads a framebuffer snapshot)

Each source's n-th tick is due at start + n * period, computed from the
tick count rather than accumulated, so rates do not drift. Pending ticks
live in a single heap; next_tick() waits on the clock until the earliest
one is due and returns it. When the consumer falls behind, overdue ticks
are returned immediately, in due-time order, without being dropped.

The clock is injectable: MonotonicClock for real time, ManualClock for
tests, where sleeping simply advances virtual time. With a ManualClock the
tick sequence is fully deterministic and replayable.

Copyright (c) 2025 CHIP-8 VM Contributors
"""

import heapq
import time
from dataclasses import dataclass
from enum import IntEnum
from typing import Iterator, Optional, Protocol

from ..errors import ConfigurationError


MIN_CLOCK_HZ = 1
MAX_CLOCK_HZ = 500
TIMER_HZ = 60
RENDER_HZ = 60


class TickKind(IntEnum):
    """
    Event sources. The value orders ticks that fall due at the same time.
    """
    TIMER = 0
    CLOCK = 1
    RENDER = 2


@dataclass(frozen=True, order=True)
class Tick:
    """
    A scheduled event.

    Attributes:
        due: Time the tick fell due (clock seconds)
        kind: Event source
    """
    due: float
    kind: TickKind


class Clock(Protocol):
    """Time source used by the scheduler."""

    def now(self) -> float:
        """Current time in seconds."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for the given number of seconds."""
        ...


class MonotonicClock:
    """Real time, from time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


class ManualClock:
    """
    Virtual time for deterministic runs.

    sleep() advances time instead of blocking.
    """

    def __init__(self, start: float = 0.0):
        self._now = start

    def now(self) -> float:
        return self._now

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            self._now += seconds

    def advance(self, seconds: float) -> None:
        self._now += seconds


class Scheduler:
    """
    Merges the instruction clock, timer and render ticks into one stream.

    Example:
        >>> scheduler = Scheduler(clock_hz=120, clock=ManualClock())
        >>> [tick.kind.name for tick in scheduler.ticks(limit=4)]
        ['CLOCK', 'TIMER', 'CLOCK', 'RENDER']
    """

    def __init__(
        self,
        clock_hz: int,
        timer_hz: int = TIMER_HZ,
        render_hz: int = RENDER_HZ,
        clock: Optional[Clock] = None,
    ):
        """
        Initialize the scheduler.

        Args:
            clock_hz: Instruction clock rate (1-500 Hz)
            timer_hz: Timer tick rate
            render_hz: Render tick rate
            clock: Time source (default: MonotonicClock)

        Raises:
            ConfigurationError: If a rate is out of range
        """
        if not MIN_CLOCK_HZ <= clock_hz <= MAX_CLOCK_HZ:
            raise ConfigurationError(
                f"Unsupported clock speed: {clock_hz} Hz "
                f"(must be {MIN_CLOCK_HZ}-{MAX_CLOCK_HZ})"
            )
        if timer_hz <= 0 or render_hz <= 0:
            raise ConfigurationError("Timer and render rates must be positive")

        self.clock = clock or MonotonicClock()
        self._periods = {
            TickKind.CLOCK: 1.0 / clock_hz,
            TickKind.TIMER: 1.0 / timer_hz,
            TickKind.RENDER: 1.0 / render_hz,
        }
        self._counts = {kind: 0 for kind in TickKind}
        self._start = self.clock.now()
        self._queue: list[Tick] = []
        for kind in TickKind:
            self._schedule(kind)

    def _schedule(self, kind: TickKind) -> None:
        self._counts[kind] += 1
        due = self._start + self._counts[kind] * self._periods[kind]
        heapq.heappush(self._queue, Tick(due, kind))

    def rate(self, kind: TickKind) -> float:
        """Ticks per second of a source."""
        return 1.0 / self._periods[kind]

    def peek(self) -> Tick:
        """Earliest pending tick, without waiting for it."""
        return self._queue[0]

    def next_tick(self) -> Tick:
        """
        Wait until the earliest pending tick is due and return it.

        The source's following tick is scheduled before returning.
        """
        tick = heapq.heappop(self._queue)
        self._schedule(tick.kind)
        delay = tick.due - self.clock.now()
        if delay > 0:
            self.clock.sleep(delay)
        return tick

    def ticks(self, limit: Optional[int] = None) -> Iterator[Tick]:
        """
        Iterate over ticks in due-time order.

        Args:
            limit: Stop after this many ticks (None for endless)
        """
        produced = 0
        while limit is None or produced < limit:
            yield self.next_tick()
            produced += 1
