"""
Sequence number and previous-timestamp bookkeeping for timestamp notices.

A :class:`TimeKeeper` hands out :class:`TickReading` values. Reading a tick
increments the sequence number eagerly; the previous timestamp only moves
forward when the caller commits the reading after a successful emission.

The usual entry point is :meth:`TimeKeeper.stamp`, which holds the keeper's
lock for the whole tick -> emit -> commit cycle so that concurrent threads
see strictly increasing sequence numbers and consistent diffs.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from functools import lru_cache

Clock = Callable[[], float]


@dataclass(frozen=True, slots=True)
class TickReading:
    """
    One tick of the keeper.

    Attributes
    ----------
    sequence : int
        Sequence number of this tick (1 for the first tick).
    now : float
        Unix epoch seconds captured by the tick.
    previous : float
        Epoch seconds of the last committed tick (or of keeper creation).
    """

    sequence: int
    now: float
    previous: float

    @property
    def elapsed(self) -> float:
        return self.now - self.previous


class TimeKeeper:
    """Process-lifetime counter of timestamp notices."""

    __slots__ = ("_clock", "_lock", "_sequence", "_previous")

    def __init__(self, clock: Clock = time.time) -> None:
        self._clock = clock
        self._lock = threading.RLock()
        self._sequence: int = 0
        self._previous: float = clock()

    @property
    def sequence(self) -> int:
        return self._sequence

    @property
    def previous(self) -> float:
        return self._previous

    def tick(self) -> TickReading:
        """Increment the sequence number and read the clock.

        The previous timestamp is returned unchanged; call :meth:`commit`
        with the reading once it has been emitted.
        """
        with self._lock:
            self._sequence += 1
            return TickReading(sequence=self._sequence, now=self._clock(), previous=self._previous)

    def commit(self, reading: TickReading) -> None:
        """Record ``reading.now`` as the previous timestamp."""
        with self._lock:
            self._previous = reading.now

    @contextmanager
    def stamp(self) -> Iterator[TickReading]:
        """Yield a fresh tick and commit it if the block completes.

        The lock is re-entrant, so a sink that itself emits a timestamp
        notice does not deadlock.
        """
        with self._lock:
            reading = self.tick()
            yield reading
            self.commit(reading)


@lru_cache(maxsize=1)
def get_timekeeper() -> TimeKeeper:
    """Return the shared keeper, creating it on first access."""
    return TimeKeeper()


__all__ = ["Clock", "TickReading", "TimeKeeper", "get_timekeeper"]
