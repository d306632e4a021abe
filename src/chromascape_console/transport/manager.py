"""
Connection manager - one channel per topic, fan-out to subscribers.

Which transport carries a topic is a deployment setting (Settings.transport
and the per-topic overrides). Subscribers only ever see decoded updates and
cannot tell push from pull.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Callable

from ..clock import Clock, LoopClock
from ..models import Topic
from ..settings import Settings
from .base import Channel, ChannelState
from .pull import PollingChannel
from .push import WebSocketChannel

logger = logging.getLogger(__name__)


class ConnectionManager:
    """
    Owns the logs, progress and state channels.

    Usage:
        manager = ConnectionManager(settings, client)
        manager.subscribe(Topic.PROGRESS, progress_view.update)
        manager.start()
        ...
        await manager.stop()
    """

    def __init__(self, settings: Settings, client, clock: Clock | None = None):
        """
        Args:
            settings: Transport choice, reconnect delay, poll cadence.
            client: BackendClient (or anything with open_socket/fetch_topic).
            clock: Time source for delays, LoopClock by default.
        """
        self.settings = settings
        self.client = client
        self.clock = clock or LoopClock()
        self._subscribers: dict[Topic, list[Callable]] = {topic: [] for topic in Topic}
        self._channels: dict[Topic, Channel] = {}

    def subscribe(self, topic: Topic, callback: Callable):
        """Register callback(update) for a topic. Called in arrival order."""
        self._subscribers[topic].append(callback)

    def start(self):
        """Create (once) and start every topic channel."""
        for topic in Topic:
            channel = self._channels.get(topic)
            if channel is None:
                channel = self._make_channel(topic)
                self._channels[topic] = channel
            channel.start()

    async def stop(self):
        """Stop every channel."""
        await asyncio.gather(*(channel.stop() for channel in self._channels.values()))
        logger.info("All channels stopped")

    def channel(self, topic: Topic) -> Channel | None:
        return self._channels.get(topic)

    def states(self) -> dict[Topic, ChannelState]:
        """Current lifecycle state of each channel."""
        return {topic: channel.state for topic, channel in self._channels.items()}

    def _make_channel(self, topic: Topic) -> Channel:
        transport = self.settings.transport_for(topic.value)
        if transport == "push":
            channel = WebSocketChannel(
                topic, self._dispatch, self.clock,
                connect=self.client.open_socket,
                reconnect_delay=self.settings.reconnect_delay,
            )
        else:
            channel = PollingChannel(
                topic, self._dispatch, self.clock,
                fetch=self.client.fetch_topic,
                interval=self.settings.poll_interval_for(topic.value),
            )
        logger.info(f"{topic.value} topic uses {transport} transport")
        return channel

    def _dispatch(self, topic: Topic, update):
        for callback in list(self._subscribers[topic]):
            try:
                callback(update)
            except Exception:
                logger.exception(f"Subscriber failed on {topic.value} update")
