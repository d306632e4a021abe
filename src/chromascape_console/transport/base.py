"""
Channel base class and lifecycle states.

A channel owns the delivery of one topic. Each runs a single asyncio task
(its retry loop), which is what keeps at most one live attempt per topic.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Callable

from ..clock import Clock
from ..errors import PayloadError
from ..models import Topic
from .codec import decode

logger = logging.getLogger(__name__)


class ChannelState(Enum):
    """Channel lifecycle."""

    IDLE = auto()  # not started, or stopped
    CONNECTING = auto()  # attempt in flight
    CONNECTED = auto()  # delivering
    CLOSED = auto()  # failed or closed, waiting for the next attempt


class Channel(ABC):
    """
    Base class for topic channels.

    Subclasses implement _run(), the retry loop. Every message goes through
    _deliver(), which drops payloads from a superseded generation and
    payloads that fail to decode.
    """

    # Polled bodies are full snapshots, pushed frames are increments
    SNAPSHOTS = False

    def __init__(self, topic: Topic, on_update: Callable, clock: Clock):
        self.topic = topic
        self.state = ChannelState.IDLE
        self.generation = 0
        self.attempts = 0
        self._on_update = on_update
        self._clock = clock
        self._running = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self):
        """Start the retry loop. No-op if it is already running."""
        if self._task and not self._task.done():
            return
        self._running = True
        self._task = asyncio.ensure_future(self._run())

    async def stop(self):
        """Stop the loop. Nothing is delivered after this returns."""
        self._running = False
        self.generation += 1
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        self.state = ChannelState.IDLE

    def _deliver(self, generation: int, raw) -> bool:
        """Decode and hand one message to the subscriber. Returns True if delivered."""
        if not self._running or generation != self.generation:
            logger.debug(f"Dropped {self.topic.value} message from superseded connection")
            return False
        try:
            update = decode(self.topic, raw, snapshot=self.SNAPSHOTS)
        except PayloadError as e:
            logger.warning(f"Dropped malformed {self.topic.value} message: {e}")
            return False
        self._on_update(self.topic, update)
        return True

    @abstractmethod
    async def _run(self) -> None:
        """Retry loop: connect or poll until stopped."""
        ...
