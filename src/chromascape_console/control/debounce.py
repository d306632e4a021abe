"""
Per-key debouncing.

Each key has its own timer. A new value inside the quiet period resets
that key's timer (it doesn't add to it) and replaces the pending value,
so a burst ends in exactly one action carrying the last value.
"""

from __future__ import annotations

from typing import Any, Callable

from ..clock import Clock


class Debouncer:
    """
    Coalesces bursts of values per key.

    Usage:
        debouncer = Debouncer(clock, 0.15, lambda key, value: print(key, value))
        for v in (5, 10, 15):
            debouncer.push("hueMin", v)
        # 0.15 s later: prints "hueMin 15" once
    """

    def __init__(self, clock: Clock, quiet_period: float, action: Callable[[str, Any], None]):
        self.clock = clock
        self.quiet_period = quiet_period
        self._action = action
        self._timers: dict[str, object] = {}
        self._values: dict[str, Any] = {}

    def push(self, key: str, value):
        """Record value for key and restart its quiet period."""
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        self._values[key] = value
        self._timers[key] = self.clock.call_later(self.quiet_period, self._fire, key)

    def cancel(self, key: str):
        """Drop a pending value without firing."""
        timer = self._timers.pop(key, None)
        if timer is not None:
            timer.cancel()
        self._values.pop(key, None)

    def cancel_all(self):
        for key in list(self._timers):
            self.cancel(key)

    def pending(self) -> set[str]:
        """Keys with a value waiting for their quiet period to end."""
        return set(self._timers)

    def _fire(self, key: str):
        self._timers.pop(key, None)
        value = self._values.pop(key)
        self._action(key, value)
