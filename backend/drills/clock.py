"""Countdown clock for timed drill sessions.

The clock itself never looks at the wall clock. Time passes only when
something calls ``tick()``, one second per call. Two drivers are provided:
``AsyncTicker`` for event-loop hosts (the HTTP service) and
``MonotonicTicker`` for blocking hosts (the terminal CLI) that catch up
on demand.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Callable
from enum import Enum

from backend.config import settings

logger = logging.getLogger(__name__)


class ClockState(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"
    STOPPED = "stopped"  # Stopped by the owner before expiry; never fires


def format_mmss(seconds: int) -> str:
    """Format seconds as MM:SS for display."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60:02d}:{seconds % 60:02d}"


class SessionClock:
    """A one-second-granularity countdown that signals expiry exactly once."""

    def __init__(self) -> None:
        self.state = ClockState.IDLE
        self.total_seconds = 0
        self._remaining = 0
        self._callbacks: list[Callable[[], None]] = []
        self._fired = False

    @property
    def is_live(self) -> bool:
        """True while the clock can still reach expiry."""
        return self.state in (ClockState.RUNNING, ClockState.PAUSED)

    def start(self, total_seconds: int) -> None:
        """Start counting down from ``total_seconds``.

        Raises:
            ValueError: If total_seconds is not positive.
            RuntimeError: If the clock was already started.
        """
        if total_seconds <= 0:
            raise ValueError(f"Clock duration must be positive, got {total_seconds}")
        if self.state is not ClockState.IDLE:
            raise RuntimeError(f"Clock already started (state={self.state.value})")

        self.total_seconds = int(total_seconds)
        self._remaining = self.total_seconds
        self.state = ClockState.RUNNING
        logger.debug("Clock started: %ds", self.total_seconds)

    def pause(self) -> None:
        if self.state is ClockState.RUNNING:
            self.state = ClockState.PAUSED

    def resume(self) -> None:
        if self.state is ClockState.PAUSED:
            self.state = ClockState.RUNNING

    def stop(self) -> None:
        """Stop the clock without firing expiry. Safe to call repeatedly."""
        if self.is_live or self.state is ClockState.IDLE:
            self.state = ClockState.STOPPED
            logger.debug("Clock stopped with %ds remaining", self._remaining)

    def remaining_seconds(self) -> int:
        return max(0, self._remaining)

    def elapsed_seconds(self) -> int:
        return self.total_seconds - self.remaining_seconds()

    def on_expire(self, callback: Callable[[], None]) -> None:
        """Register a callback fired once, on the tick that reaches zero."""
        self._callbacks.append(callback)

    def tick(self) -> None:
        """Advance the clock by one second if it is running."""
        if self.state is not ClockState.RUNNING:
            return

        self._remaining -= 1
        if self._remaining <= 0:
            self._remaining = 0
            self.state = ClockState.EXPIRED
            self._fire()

    def advance(self, seconds: int) -> None:
        """Apply several ticks at once, stopping early if the clock leaves RUNNING."""
        for _ in range(max(0, int(seconds))):
            if self.state is not ClockState.RUNNING:
                break
            self.tick()

    def _fire(self) -> None:
        if self._fired:
            return
        self._fired = True
        logger.info("Session clock expired after %ds", self.total_seconds)
        for callback in self._callbacks:
            callback()


class AsyncTicker:
    """Drives a SessionClock from an asyncio task, one tick per interval."""

    def __init__(self, clock: SessionClock, interval: float | None = None) -> None:
        self.clock = clock
        self.interval = settings.tick_interval_seconds if interval is None else interval
        self._task: asyncio.Task | None = None

    def start(self) -> None:
        """Schedule the ticking task on the running event loop."""
        if self._task is None:
            self._task = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while self.clock.is_live:
            await asyncio.sleep(self.interval)
            self.clock.tick()

    def cancel(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()


class MonotonicTicker:
    """Catches a SessionClock up with a monotonic time source on demand.

    Blocking hosts call ``sync()`` whenever they regain control, e.g. after
    ``input()`` returns; whole elapsed seconds are applied as ticks and the
    fractional remainder carries over to the next sync.
    """

    def __init__(self, clock: SessionClock, time_source: Callable[[], float] = time.monotonic) -> None:
        self.clock = clock
        self._time = time_source
        self._last: float | None = None

    def start(self) -> None:
        self._last = self._time()

    def sync(self) -> None:
        if self._last is None:
            self.start()
            return
        whole = int(self._time() - self._last)
        if whole > 0:
            self._last += whole
            self.clock.advance(whole)
