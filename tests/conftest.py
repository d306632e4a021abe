"""Shared fakes: in-memory backend client and scripted WebSockets."""

from __future__ import annotations

import asyncio
from collections import Counter
from types import SimpleNamespace

import aiohttp
import cv2
import numpy as np
import pytest

from chromascape_console.errors import BackendError
from chromascape_console.models import Topic


def png_bytes(value: int = 0, size: int = 4) -> bytes:
    """Tiny solid-colour PNG."""
    image = np.full((size, size, 3), value, dtype=np.uint8)
    ok, buf = cv2.imencode(".png", image)
    assert ok
    return buf.tobytes()


class FakeSocket:
    """
    Scripted WebSocket.

    Messages queued with feed() are yielded in order; drop() ends the
    iteration as if the server closed the connection.
    """

    def __init__(self, messages=(), stay_open: bool = False):
        self._queue: asyncio.Queue = asyncio.Queue()
        self._error = None
        self.close_calls = 0
        self.closed = False
        for message in messages:
            self.feed(message)
        if not stay_open:
            self.drop()

    def feed(self, text: str):
        self._queue.put_nowait((aiohttp.WSMsgType.TEXT, text))

    def fail(self, error: Exception):
        self._error = error
        self._queue.put_nowait((aiohttp.WSMsgType.ERROR, None))

    def drop(self):
        self._queue.put_nowait(None)

    def exception(self):
        return self._error

    def __aiter__(self):
        return self

    async def __anext__(self):
        item = await self._queue.get()
        if item is None:
            raise StopAsyncIteration
        kind, data = item
        return SimpleNamespace(type=kind, data=data)

    async def close(self):
        self.close_calls += 1
        self.closed = True
        self.drop()


class FakeClient:
    """In-memory stand-in for BackendClient."""

    def __init__(self, scripts=None):
        self.scripts = list(scripts or ["alpha.script", "package-info.java", "beta.script"])
        self.failing: set[str] = set()
        self.gates: dict[str, asyncio.Event] = {}
        self.calls = Counter()

        self.started = []
        self.stops = 0
        self.slider_updates: list[tuple[str, int]] = []
        self.preview_tokens: list[int] = []
        self.colours: list[str] = []

        self.topic_bodies = {
            Topic.LOGS: "[]",
            Topic.PROGRESS: "0",
            Topic.STATE: "false",
        }
        self.sockets: dict[Topic, list[FakeSocket]] = {topic: [] for topic in Topic}
        self.opened: dict[Topic, list[FakeSocket]] = {topic: [] for topic in Topic}
        self.closed = False

    async def _call(self, name: str):
        self.calls[name] += 1
        gate = self.gates.get(name)
        if gate is not None:
            await gate.wait()
        if name in self.failing:
            raise BackendError(f"{name} failed", status=500)

    async def list_scripts(self):
        await self._call("list_scripts")
        return list(self.scripts)

    async def start_run(self, run_config):
        await self._call("start_run")
        self.started.append(run_config)

    async def stop_run(self):
        await self._call("stop_run")
        self.stops += 1

    async def fetch_topic(self, topic):
        await self._call(f"fetch_{topic.value}")
        return self.topic_bodies[topic]

    async def open_socket(self, topic):
        await self._call("open_socket")
        queued = self.sockets[topic]
        socket = queued.pop(0) if queued else FakeSocket(stay_open=True)
        self.opened[topic].append(socket)
        return socket

    async def update_slider(self, channel, value):
        await self._call("update_slider")
        self.slider_updates.append((channel, value))

    async def fetch_previews(self, token):
        await self._call("fetch_previews")
        self.preview_tokens.append(token)
        return png_bytes(10), png_bytes(200)

    async def submit_colour(self, name):
        await self._call("submit_colour")
        self.colours.append(name)

    async def close(self):
        self.closed = True


@pytest.fixture
def client():
    return FakeClient()
