"""
Push transport - one long-lived WebSocket per topic.

On close or error the socket is torn down and exactly one reconnect is
scheduled after a fixed delay, forever (no backoff, no give-up).
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable

import aiohttp

from .. import config
from ..clock import Clock
from ..models import Topic
from .base import Channel, ChannelState

logger = logging.getLogger(__name__)


class WebSocketChannel(Channel):
    """
    Topic channel over a WebSocket.

    Usage:
        channel = WebSocketChannel(
            Topic.STATE, on_update, LoopClock(), connect=client.open_socket,
        )
        channel.start()
        ...
        await channel.stop()
    """

    def __init__(self, topic: Topic, on_update: Callable, clock: Clock,
                 connect: Callable[[Topic], Awaitable], reconnect_delay: float = config.RECONNECT_DELAY):
        super().__init__(topic, on_update, clock)
        self._connect = connect
        self.reconnect_delay = reconnect_delay
        self.reconnect_pending = False

    async def _run(self):
        name = self.topic.value
        while self._running:
            self.generation += 1
            generation = self.generation
            self.state = ChannelState.CONNECTING
            self.attempts += 1

            ws = None
            try:
                ws = await self._connect(self.topic)
                self.state = ChannelState.CONNECTED
                logger.info(f"Connected to {name} WebSocket")

                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        self._deliver(generation, msg.data)
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        logger.error(f"{name} WebSocket error: {ws.exception()}")
                        break

                logger.warning(f"{name} WebSocket closed")
            except Exception as e:
                logger.error(f"{name} WebSocket error: {e}")
            finally:
                if ws is not None:
                    await self._close(ws)

            # Supersede the old connection before anything else can arrive
            self.generation += 1
            self.state = ChannelState.CLOSED
            if not self._running:
                break

            logger.warning(f"Reconnecting {name} WebSocket in {self.reconnect_delay}s")
            self.reconnect_pending = True
            try:
                await self._clock.sleep(self.reconnect_delay)
            finally:
                self.reconnect_pending = False

    async def _close(self, ws):
        try:
            await ws.close()
        except Exception as e:
            logger.debug(f"Error closing {self.topic.value} WebSocket: {e}")
