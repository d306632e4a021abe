"""
Pull transport - periodic request per topic.

One request at a time per topic; a failed request is logged and the next
tick simply tries again.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

from ..clock import Clock
from ..models import Topic
from .base import Channel, ChannelState

logger = logging.getLogger(__name__)


class PollingChannel(Channel):
    """Topic channel that polls a snapshot endpoint at a fixed cadence."""

    SNAPSHOTS = True

    def __init__(self, topic: Topic, on_update: Callable, clock: Clock,
                 fetch: Callable[[Topic], Awaitable[str]], interval: float):
        super().__init__(topic, on_update, clock)
        self._fetch = fetch
        self.interval = interval

    async def _run(self):
        self.generation += 1
        generation = self.generation
        self.state = ChannelState.CONNECTING

        while self._running:
            self.attempts += 1
            started = self._clock.time()
            try:
                raw = await self._fetch(self.topic)
            except Exception as e:
                logger.error(f"Failed to poll {self.topic.value}: {e}")
                self.state = ChannelState.CLOSED
            else:
                if self.state is not ChannelState.CONNECTED:
                    logger.info(f"Polling {self.topic.value} every {self.interval}s")
                self.state = ChannelState.CONNECTED
                self._deliver(generation, raw)

            # Fixed cadence: request latency comes out of the wait
            elapsed = self._clock.time() - started
            await self._clock.sleep(max(0.0, self.interval - elapsed))
