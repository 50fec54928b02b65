"""
Property-based tests for the Operation Poller.

Tests delay calculation, deadline handling and error propagation of the
bounded wait loop.
"""

import asyncio

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from domain_registrar.config import PollingConfig
from domain_registrar.poller import OperationPoller

from helpers import FakeClock


def scripted(values):
    """Coroutine factory returning successive values; the last one repeats."""
    calls = {"n": 0}

    async def fetch():
        index = min(calls["n"], len(values) - 1)
        calls["n"] += 1
        return values[index]

    return fetch


class TestDelayCalculationProperty:
    """delay(n) = interval * multiplier^n, capped at max_interval."""

    @given(
        interval=st.floats(min_value=0.1, max_value=60.0),
        multiplier=st.floats(min_value=1.0, max_value=4.0),
        cap=st.floats(min_value=0.1, max_value=600.0),
        n=st.integers(min_value=0, max_value=20),
    )
    @settings(max_examples=200)
    def test_delay_never_exceeds_cap(
        self, interval: float, multiplier: float, cap: float, n: int
    ) -> None:
        poller = OperationPoller(interval, 100.0, backoff_multiplier=multiplier,
                                 max_interval_seconds=cap)

        delay = poller._calculate_delay(n)

        assert delay <= max(cap, interval)
        assert delay >= min(interval, max(cap, interval))

    @given(
        multiplier=st.floats(min_value=1.01, max_value=10.0),
        n=st.integers(min_value=1000, max_value=1_000_000),
    )
    @settings(max_examples=100)
    def test_large_sleep_counts_stay_at_cap(self, multiplier: float, n: int) -> None:
        poller = OperationPoller(10.0, 100.0, backoff_multiplier=multiplier,
                                 max_interval_seconds=60.0)

        assert poller._calculate_delay(n) == 60.0

    @given(n=st.integers(min_value=0, max_value=50))
    def test_fixed_interval_without_backoff(self, n: int) -> None:
        poller = OperationPoller(10.0, 100.0)

        assert poller._calculate_delay(n) == 10.0


class TestDeadlineProperty:
    """The wait never sleeps past the deadline and stops once it is reached."""

    @given(
        interval=st.integers(min_value=1, max_value=60),
        timeout=st.integers(min_value=1, max_value=600),
    )
    @settings(max_examples=200)
    def test_non_terminal_values_exhaust_budget(self, interval: int, timeout: int) -> None:
        clock = FakeClock()
        poller = OperationPoller(float(interval), float(timeout),
                                 clock=clock, sleep=clock.sleep)

        result = asyncio.run(poller.poll_until(scripted(["running"]), lambda v: False))

        assert not result.completed
        assert result.value == "running"
        assert clock.now == pytest.approx(float(timeout))
        assert result.polls == result.sleeps
        assert result.sleeps == -(-timeout // interval)

    @given(terminal_at=st.integers(min_value=1, max_value=10))
    @settings(max_examples=50)
    def test_terminal_value_stops_immediately(self, terminal_at: int) -> None:
        values = ["running"] * (terminal_at - 1) + ["done"]
        clock = FakeClock()
        poller = OperationPoller(10.0, 1000.0, clock=clock, sleep=clock.sleep)

        result = asyncio.run(poller.poll_until(scripted(values), lambda v: v == "done"))

        assert result.completed
        assert result.value == "done"
        assert result.polls == terminal_at
        assert result.sleeps == terminal_at - 1
        assert result.elapsed_seconds == 10.0 * (terminal_at - 1)

    def test_polls_at_zero_ten_and_twenty(self) -> None:
        clock = FakeClock()
        seen = []
        poller = OperationPoller(10.0, 30.0, clock=clock, sleep=clock.sleep)

        def on_poll(value, number):
            seen.append((clock.now, number))

        result = asyncio.run(
            poller.poll_until(scripted(["running"]), lambda v: False, on_poll=on_poll)
        )

        assert seen == [(0.0, 1), (10.0, 2), (20.0, 3)]
        assert result.elapsed_seconds == 30.0

    def test_day_long_budget_with_backoff(self) -> None:
        clock = FakeClock()
        poller = OperationPoller(10.0, 86400.0, backoff_multiplier=2.0,
                                 max_interval_seconds=60.0, clock=clock, sleep=clock.sleep)

        result = asyncio.run(poller.poll_until(scripted(["running"]), lambda v: False))

        assert not result.completed
        assert clock.sleeps[:4] == [10.0, 20.0, 40.0, 60.0]
        assert max(clock.sleeps) == 60.0
        assert clock.now == pytest.approx(86400.0)
        assert result.sleeps > 1024

    def test_slow_fetch_is_not_interrupted(self) -> None:
        clock = FakeClock()

        async def slow_fetch():
            clock.now += 45.0
            return "done"

        poller = OperationPoller(10.0, 30.0, clock=clock, sleep=clock.sleep)

        result = asyncio.run(poller.poll_until(slow_fetch, lambda v: v == "done"))

        assert result.completed
        assert clock.sleeps == []

    def test_overrun_fetch_ends_without_sleeping(self) -> None:
        clock = FakeClock()

        async def slow_fetch():
            clock.now += 45.0
            return "running"

        poller = OperationPoller(10.0, 30.0, clock=clock, sleep=clock.sleep)

        result = asyncio.run(poller.poll_until(slow_fetch, lambda v: False))

        assert not result.completed
        assert result.polls == 1
        assert clock.sleeps == []


class TestErrorPropagation:
    """Exceptions from fetch are the caller's to interpret."""

    def test_fetch_error_propagates(self) -> None:
        clock = FakeClock()

        async def broken():
            raise RuntimeError("boom")

        poller = OperationPoller(10.0, 30.0, clock=clock, sleep=clock.sleep)

        with pytest.raises(RuntimeError, match="boom"):
            asyncio.run(poller.poll_until(broken, lambda v: True))
        assert clock.sleeps == []


class TestFromConfig:
    """Per-call overrides win over config defaults."""

    def test_overrides(self) -> None:
        config = PollingConfig(interval_seconds=5.0, timeout_seconds=60.0)

        poller = OperationPoller.from_config(config, interval_seconds=2.0)

        assert poller.interval_seconds == 2.0
        assert poller.timeout_seconds == 60.0

    def test_defaults(self) -> None:
        poller = OperationPoller.from_config(PollingConfig())

        assert poller.interval_seconds == 10.0
        assert poller.timeout_seconds == 900.0
