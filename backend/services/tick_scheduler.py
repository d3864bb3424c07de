"""
Accumulator-based tick scheduler.

Host code calls tick(delta) (or pump(), which reads the clock) as often as it
likes; the scheduler fires on_tick once per full interval of accumulated time.
After a long stall at most max_catch_up_ticks are fired and the rest of the
backlog is dropped.
"""

import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_MAX_CATCH_UP_TICKS = 2
DEFAULT_POLL_INTERVAL = 0.005


class SimulatedClock:
    """A manual clock for headless runs and tests."""

    def __init__(self, start: float = 0.0):
        self.now = start

    def advance(self, seconds: float) -> float:
        self.now += seconds
        return self.now

    def __call__(self) -> float:
        return self.now


class TickScheduler:
    def __init__(
        self,
        on_tick: Callable[[], None],
        interval: float,
        max_catch_up_ticks: int = DEFAULT_MAX_CATCH_UP_TICKS,
        clock: Callable[[], float] = time.monotonic,
    ):
        _check_interval(interval)
        if max_catch_up_ticks < 1:
            raise ValueError("max_catch_up_ticks must be at least 1.")
        self.on_tick = on_tick
        self.interval = interval
        self.max_catch_up_ticks = max_catch_up_ticks
        self.clock = clock
        self.running = False
        self.accumulated = 0.0
        self._last_pump: Optional[float] = None
        self._in_tick = False

    def start(self, interval: Optional[float] = None) -> None:
        if interval is not None:
            _check_interval(interval)
            self.interval = interval
        self.running = True
        self.accumulated = 0.0
        self._last_pump = self.clock()
        logger.debug("Tick scheduler started (interval %.3fs)", self.interval)

    def stop(self) -> None:
        """Stop firing and forget any accumulated time."""
        self.running = False
        self.accumulated = 0.0
        self._last_pump = None
        logger.debug("Tick scheduler stopped")

    def set_interval(self, interval: float) -> None:
        """Change the interval without touching the accumulated time."""
        _check_interval(interval)
        self.interval = interval

    def tick(self, delta: float) -> int:
        """
        Add delta seconds of elapsed time and fire every tick that became due.

        Returns the number of ticks fired. Calls made from inside on_tick fire nothing.
        """
        if not self.running or self._in_tick or delta <= 0:
            return 0

        self.accumulated = min(self.accumulated + delta, self.interval * self.max_catch_up_ticks)

        fired = 0
        self._in_tick = True
        try:
            while self.running and self.accumulated >= self.interval:
                self.accumulated -= self.interval
                fired += 1
                self.on_tick()
        finally:
            self._in_tick = False
        return fired

    def pump(self) -> int:
        """Tick with the time elapsed on the clock since the previous pump."""
        if not self.running:
            return 0
        now = self.clock()
        last = self._last_pump if self._last_pump is not None else now
        self._last_pump = now
        return self.tick(now - last)

    def run(
        self,
        should_stop: Callable[[], bool],
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        """Blocking host loop: pump until should_stop() is true or the scheduler stops."""
        while self.running and not should_stop():
            self.pump()
            time.sleep(poll_interval)


def _check_interval(interval: float) -> None:
    if interval <= 0:
        raise ValueError(f"Tick interval must be positive, got {interval}.")
