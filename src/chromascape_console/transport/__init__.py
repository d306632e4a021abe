"""
Transport Layer - Topic delivery from the backend.

Provides:
- WebSocketChannel: push delivery, reconnect after a fixed delay
- PollingChannel: pull delivery at a fixed cadence
- ConnectionManager: one channel per topic, subscriber fan-out
"""

from .base import Channel, ChannelState
from .codec import decode
from .manager import ConnectionManager
from .pull import PollingChannel
from .push import WebSocketChannel

__all__ = [
    "Channel",
    "ChannelState",
    "decode",
    "ConnectionManager",
    "PollingChannel",
    "WebSocketChannel",
]
