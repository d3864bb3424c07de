"""
Tests for services/tick_scheduler.py - accumulator-based tick scheduling.

Intervals are binary fractions (0.25, 0.125) so accumulated time stays exact.
"""

import pytest
import sys
import os

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from services.tick_scheduler import SimulatedClock, TickScheduler


class Counter:
    def __init__(self):
        self.count = 0

    def __call__(self):
        self.count += 1


def make_scheduler(interval=0.25, **kwargs):
    counter = Counter()
    scheduler = TickScheduler(counter, interval, **kwargs)
    return scheduler, counter


class TestConstruction:

    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            TickScheduler(Counter(), 0)
        with pytest.raises(ValueError):
            TickScheduler(Counter(), -0.1)

    def test_rejects_zero_catch_up(self):
        with pytest.raises(ValueError):
            TickScheduler(Counter(), 0.25, max_catch_up_ticks=0)

    def test_start_with_interval_overrides(self):
        scheduler, _ = make_scheduler()
        scheduler.start(0.125)
        assert scheduler.interval == 0.125
        assert scheduler.running is True

    def test_start_rejects_bad_interval(self):
        scheduler, _ = make_scheduler()
        with pytest.raises(ValueError):
            scheduler.start(0)


class TestAccumulation:

    def test_not_running_fires_nothing(self):
        scheduler, counter = make_scheduler()
        assert scheduler.tick(1.0) == 0
        assert counter.count == 0

    def test_partial_intervals_accumulate(self):
        scheduler, counter = make_scheduler()
        scheduler.start()
        assert scheduler.tick(0.125) == 0
        assert scheduler.tick(0.125) == 1
        assert counter.count == 1
        assert scheduler.accumulated == 0.0

    def test_remainder_carries_over(self):
        scheduler, counter = make_scheduler()
        scheduler.start()
        assert scheduler.tick(0.375) == 1
        assert scheduler.accumulated == 0.125

    def test_non_positive_delta_is_ignored(self):
        scheduler, counter = make_scheduler()
        scheduler.start()
        assert scheduler.tick(0) == 0
        assert scheduler.tick(-1.0) == 0
        assert scheduler.accumulated == 0.0

    def test_long_stall_is_capped(self):
        """A five second stall fires only max_catch_up_ticks ticks."""
        scheduler, counter = make_scheduler(max_catch_up_ticks=2)
        scheduler.start()
        assert scheduler.tick(5.0) == 2
        assert counter.count == 2
        assert scheduler.accumulated == 0.0

    def test_cap_follows_catch_up_setting(self):
        scheduler, counter = make_scheduler(max_catch_up_ticks=3)
        scheduler.start()
        assert scheduler.tick(5.0) == 3


class TestIntervalChanges:

    def test_set_interval_keeps_accumulated_time(self):
        scheduler, counter = make_scheduler()
        scheduler.start()
        scheduler.tick(0.125)
        scheduler.set_interval(0.125)
        assert scheduler.accumulated == 0.125
        assert scheduler.tick(0.0625) == 1
        assert scheduler.accumulated == 0.0625

    def test_set_interval_rejects_bad_value(self):
        scheduler, _ = make_scheduler()
        with pytest.raises(ValueError):
            scheduler.set_interval(0)

    def test_interval_change_from_inside_tick_applies_to_remaining_backlog(self):
        counter = Counter()

        def on_tick():
            counter()
            scheduler.set_interval(0.5)

        scheduler = TickScheduler(on_tick, 0.25, max_catch_up_ticks=4)
        scheduler.start()
        # 0.75 accumulated: first tick leaves 0.5, which is exactly one new interval
        assert scheduler.tick(0.75) == 2


class TestStopAndReentry:

    def test_stop_discards_accumulated_time(self):
        scheduler, counter = make_scheduler()
        scheduler.start()
        scheduler.tick(0.125)
        scheduler.stop()
        assert scheduler.accumulated == 0.0
        scheduler.start()
        assert scheduler.tick(0.125) == 0

    def test_stop_inside_on_tick_halts_the_backlog(self):
        counter = Counter()

        def on_tick():
            counter()
            scheduler.stop()

        scheduler = TickScheduler(on_tick, 0.25)
        scheduler.start()
        assert scheduler.tick(0.5) == 1
        assert counter.count == 1
        assert scheduler.running is False

    def test_tick_from_inside_on_tick_fires_nothing(self):
        nested = []

        def on_tick():
            nested.append(scheduler.tick(1.0))

        scheduler = TickScheduler(on_tick, 0.25)
        scheduler.start()
        assert scheduler.tick(0.25) == 1
        assert nested == [0]

    def test_exception_in_on_tick_releases_guard(self):
        calls = []

        def on_tick():
            calls.append(1)
            if len(calls) == 1:
                raise RuntimeError("boom")

        scheduler = TickScheduler(on_tick, 0.25)
        scheduler.start()
        with pytest.raises(RuntimeError):
            scheduler.tick(0.25)
        assert scheduler.tick(0.25) == 1


class TestClock:

    def test_simulated_clock(self):
        clock = SimulatedClock(start=1.0)
        assert clock() == 1.0
        assert clock.advance(0.5) == 1.5
        assert clock() == 1.5

    def test_pump_uses_elapsed_clock_time(self):
        clock = SimulatedClock()
        scheduler, counter = make_scheduler(clock=clock)
        scheduler.start()
        clock.advance(0.25)
        assert scheduler.pump() == 1
        clock.advance(0.125)
        assert scheduler.pump() == 0
        clock.advance(0.125)
        assert scheduler.pump() == 1

    def test_pump_when_stopped_fires_nothing(self):
        clock = SimulatedClock()
        scheduler, counter = make_scheduler(clock=clock)
        clock.advance(1.0)
        assert scheduler.pump() == 0

    def test_time_while_stopped_is_not_counted(self):
        clock = SimulatedClock()
        scheduler, counter = make_scheduler(clock=clock)
        scheduler.start()
        scheduler.stop()
        clock.advance(10.0)
        scheduler.start()
        assert scheduler.pump() == 0

    def test_run_pumps_until_should_stop(self):
        clock = SimulatedClock()
        scheduler, counter = make_scheduler(clock=clock)
        scheduler.start()
        checks = []

        def should_stop():
            checks.append(clock.advance(0.25))
            return len(checks) > 3

        scheduler.run(should_stop, poll_interval=0)
        assert counter.count == 3

    def test_run_returns_when_scheduler_stops(self):
        clock = SimulatedClock()
        counter = Counter()

        def on_tick():
            counter()
            scheduler.stop()

        scheduler = TickScheduler(on_tick, 0.25, clock=clock)
        scheduler.start()
        scheduler.run(lambda: clock.advance(0.25) is None, poll_interval=0)
        assert counter.count == 1
