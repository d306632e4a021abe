"""
Time sources.

Every delay in the console (reconnects, poll cadence, debounce) goes
through a Clock so tests can drive time by hand:
- LoopClock: the running asyncio event loop
- ManualClock: virtual time, advanced explicitly
"""

from __future__ import annotations

import asyncio
import heapq
from abc import ABC, abstractmethod
from typing import Callable


class Clock(ABC):
    """Base class for time sources."""

    @abstractmethod
    def time(self) -> float:
        """Current time in seconds."""
        ...

    @abstractmethod
    def call_later(self, delay: float, callback: Callable, *args):
        """
        Schedule callback(*args) after delay seconds.

        Returns:
            Handle with a cancel() method.
        """
        ...

    @abstractmethod
    async def sleep(self, delay: float) -> None:
        ...


class LoopClock(Clock):
    """Clock backed by the running asyncio loop."""

    def time(self) -> float:
        return asyncio.get_running_loop().time()

    def call_later(self, delay: float, callback: Callable, *args):
        return asyncio.get_running_loop().call_later(delay, callback, *args)

    async def sleep(self, delay: float) -> None:
        await asyncio.sleep(delay)


class ManualTimer:
    """Timer handle returned by ManualClock.call_later."""

    def __init__(self, when: float, callback: Callable, args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class ManualClock(Clock):
    """
    Virtual clock for tests.

    Nothing fires until advance() is awaited. Between timers, advance()
    yields to the event loop so tasks woken by a timer can run (and
    schedule new timers) before time moves on.

    Usage:
        clock = ManualClock()
        debouncer = Debouncer(clock, 0.15, action)
        debouncer.push("hueMin", 30)
        await clock.advance(0.15)
    """

    SETTLE_ROUNDS = 50

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers: list[tuple[float, int, ManualTimer]] = []
        self._seq = 0

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable, *args) -> ManualTimer:
        timer = ManualTimer(self._now + max(0.0, delay), callback, args)
        self._seq += 1
        heapq.heappush(self._timers, (timer.when, self._seq, timer))
        return timer

    async def sleep(self, delay: float) -> None:
        future = asyncio.get_running_loop().create_future()
        timer = self.call_later(delay, _resolve, future)
        try:
            await future
        finally:
            timer.cancel()

    def pending(self) -> int:
        """Number of timers scheduled and not yet fired or cancelled."""
        return sum(1 for _, _, t in self._timers if not t.cancelled)

    async def advance(self, seconds: float) -> None:
        """Move time forward, firing due timers in order."""
        target = self._now + seconds
        await self.settle()
        while self._timers and self._timers[0][0] <= target:
            when, _, timer = heapq.heappop(self._timers)
            if timer.cancelled:
                continue
            self._now = when
            timer.cancelled = True  # fired
            timer.callback(*timer.args)
            await self.settle()
        self._now = target
        await self.settle()

    async def settle(self) -> None:
        """Let ready tasks run without moving time."""
        for _ in range(self.SETTLE_ROUNDS):
            await asyncio.sleep(0)


def _resolve(future: asyncio.Future):
    if not future.done():
        future.set_result(None)
