"""
Operation poller for the domain registrar system.

Turns a status-fetching coroutine into a bounded wait: fetch, check for a
terminal value, sleep, repeat until the deadline. The deadline is only
checked between iterations, never while a fetch is in flight, and a sleep
never runs past the deadline.
"""

from __future__ import annotations

import asyncio
import math
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, Optional, TypeVar

from .config import PollingConfig

T = TypeVar("T")

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


@dataclass
class PollResult(Generic[T]):
    """Result of a polling session."""

    completed: bool  # a terminal value was observed before the deadline
    value: Optional[T]  # last value fetched
    polls: int
    sleeps: int
    elapsed_seconds: float


class OperationPoller:
    """
    Polls until a terminal value is seen or the time budget is spent.

    With backoff_multiplier == 1.0 the interval is fixed; larger values grow
    the interval exponentially up to max_interval_seconds.
    """

    def __init__(
        self,
        interval_seconds: float,
        timeout_seconds: float,
        backoff_multiplier: float = 1.0,
        max_interval_seconds: Optional[float] = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        """
        Args:
            interval_seconds: Delay before the second poll
            timeout_seconds: Total wait budget, measured from the first poll
            backoff_multiplier: Growth factor applied per sleep
            max_interval_seconds: Cap on a single delay
            clock: Monotonic time source
            sleep: Coroutine used to suspend between polls
        """
        self._interval = interval_seconds
        self._timeout = timeout_seconds
        self._multiplier = backoff_multiplier
        self._max_interval = max(max_interval_seconds or interval_seconds, interval_seconds)
        self._clock = clock
        self._sleep = sleep

    @classmethod
    def from_config(
        cls,
        config: PollingConfig,
        interval_seconds: Optional[float] = None,
        timeout_seconds: Optional[float] = None,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ) -> "OperationPoller":
        """Build a poller from config defaults with optional per-call overrides."""
        return cls(
            interval_seconds=interval_seconds or config.interval_seconds,
            timeout_seconds=timeout_seconds or config.timeout_seconds,
            backoff_multiplier=config.backoff_multiplier,
            max_interval_seconds=config.max_interval_seconds,
            clock=clock,
            sleep=sleep,
        )

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _calculate_delay(self, sleeps_so_far: int) -> float:
        """delay(n) = interval * multiplier^n, capped at max_interval."""
        if self._multiplier <= 1.0:
            return self._interval
        # Past this exponent the delay is already at the cap.
        cap_exponent = math.ceil(
            math.log(self._max_interval / self._interval) / math.log(self._multiplier)
        ) + 1
        delay = self._interval * (self._multiplier ** min(sleeps_so_far, cap_exponent))
        return min(delay, self._max_interval)

    async def poll_until(
        self,
        fetch: Callable[[], Awaitable[T]],
        is_terminal: Callable[[T], bool],
        on_poll: Optional[Callable[[T, int], None]] = None,
    ) -> PollResult[T]:
        """
        Fetch repeatedly until is_terminal(value) or the deadline passes.

        Exceptions raised by fetch propagate unchanged; the caller decides
        what a failed fetch means.

        Args:
            fetch: Coroutine factory returning the current value
            is_terminal: Predicate ending the wait
            on_poll: Optional callback invoked with (value, poll_number)

        Returns:
            PollResult; completed is False when the budget ran out
        """
        start = self._clock()
        deadline = start + self._timeout
        polls = 0
        sleeps = 0
        value: Optional[T] = None

        while True:
            value = await fetch()
            polls += 1
            if on_poll is not None:
                on_poll(value, polls)

            if is_terminal(value):
                return PollResult(
                    completed=True,
                    value=value,
                    polls=polls,
                    sleeps=sleeps,
                    elapsed_seconds=self._clock() - start,
                )

            remaining = deadline - self._clock()
            if remaining <= 0:
                break

            await self._sleep(min(self._calculate_delay(sleeps), remaining))
            sleeps += 1

            if self._clock() >= deadline:
                break

        return PollResult(
            completed=False,
            value=value,
            polls=polls,
            sleeps=sleeps,
            elapsed_seconds=self._clock() - start,
        )
