"""
Backend client - aiohttp wrapper around the automation backend API.

Covers:
- Script listing
- Run start/stop
- Topic snapshots for polling (logs, progress, state)
- Topic WebSockets for push delivery
- Slider updates, preview images, named colour submission
"""

from __future__ import annotations

import asyncio
import json
import logging

import aiohttp

from . import config
from .errors import BackendError
from .models import RunConfig, Topic

logger = logging.getLogger(__name__)

SNAPSHOT_PATHS = {
    Topic.LOGS: config.LOGS_PATH,
    Topic.PROGRESS: config.PROGRESS_PATH,
    Topic.STATE: config.STATE_PATH,
}

SOCKET_PATHS = {
    Topic.LOGS: config.LOGS_SOCKET_PATH,
    Topic.PROGRESS: config.PROGRESS_SOCKET_PATH,
    Topic.STATE: config.STATE_SOCKET_PATH,
}


class BackendClient:
    """
    HTTP/WebSocket client for the automation backend.

    Every failed request (connection error, timeout, non-2xx status)
    raises BackendError; callers decide whether to surface or just log it.

    Usage:
        client = BackendClient("http://localhost:8080")
        scripts = await client.list_scripts()
        await client.close()
    """

    def __init__(self, base_url: str = config.BACKEND_URL, timeout: float = config.REQUEST_TIMEOUT,
                 session: aiohttp.ClientSession | None = None):
        self.base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout)
        self._session = session
        self._owns_session = session is None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            # No session-wide total timeout: it would cut long-lived sockets
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
            self._owns_session = True
        return self._session

    async def close(self):
        """Close the HTTP session if this client created it."""
        if self._session and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def url(self, path: str) -> str:
        return self.base_url + path

    def socket_url(self, topic: Topic) -> str:
        """WebSocket URL for a topic (http -> ws, https -> wss)."""
        url = self.url(SOCKET_PATHS[topic])
        if url.startswith("https://"):
            return "wss://" + url[len("https://"):]
        if url.startswith("http://"):
            return "ws://" + url[len("http://"):]
        return url

    async def _request(self, method: str, path: str, **kwargs) -> bytes:
        session = self._get_session()
        try:
            async with session.request(method, self.url(path), timeout=self._timeout, **kwargs) as resp:
                body = await resp.read()
                if resp.status >= 400:
                    raise BackendError(f"{method} {path} failed: HTTP {resp.status}", status=resp.status)
                return body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BackendError(f"{method} {path} failed: {e}") from e

    # --- Scripts ---

    async def list_scripts(self) -> list[str]:
        """GET /api/scripts - identifiers of every script the backend knows."""
        body = await self._request("GET", config.SCRIPTS_PATH)
        try:
            data = json.loads(body)
        except ValueError as e:
            raise BackendError(f"Script list is not JSON: {e}") from e
        if not isinstance(data, list):
            raise BackendError("Script list is not a JSON array")
        return [str(item) for item in data]

    async def start_run(self, run_config: RunConfig):
        """POST /api/runConfig - start a script."""
        await self._request("POST", config.RUN_CONFIG_PATH, json=run_config.to_payload())

    async def stop_run(self):
        """POST /api/stop - stop the running script."""
        await self._request(
            "POST", config.STOP_PATH,
            data="{}", headers={"Content-Type": "application/json"},
        )

    # --- Topics ---

    async def fetch_topic(self, topic: Topic) -> str:
        """Current snapshot of a topic as raw text (decoded by the codec)."""
        body = await self._request("GET", SNAPSHOT_PATHS[topic])
        return body.decode("utf-8", errors="replace")

    async def open_socket(self, topic: Topic) -> aiohttp.ClientWebSocketResponse:
        """Open the push WebSocket for a topic."""
        session = self._get_session()
        try:
            return await asyncio.wait_for(session.ws_connect(self.socket_url(topic)), self._timeout.total)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise BackendError(f"WebSocket {topic.value} failed: {e}") from e

    # --- Colour filter ---

    async def update_slider(self, channel: str, value: int):
        """POST /api/slider - set one HSV bound."""
        await self._request(
            "POST", config.SLIDER_PATH,
            json={"sliderName": channel, "sliderValue": value},
        )

    async def fetch_previews(self, token: int) -> tuple[bytes, bytes]:
        """
        Fetch the pre- and post-classification preview images.

        Args:
            token: Freshness token appended as ?t=, defeats HTTP caching of
                images the backend rewrites in place.

        Returns:
            (original_png, modified_png)
        """
        params = {"t": str(token)}
        original, modified = await asyncio.gather(
            self._request("GET", config.ORIGINAL_IMAGE_PATH, params=params),
            self._request("GET", config.MODIFIED_IMAGE_PATH, params=params),
        )
        return original, modified

    async def submit_colour(self, name: str):
        """POST /api/submitColour - save the current HSV range under a name."""
        await self._request(
            "POST", config.SUBMIT_COLOUR_PATH,
            data=name, headers={"Content-Type": "text/plain"},
        )
