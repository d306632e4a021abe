"""
Parameter tuner - six HSV sliders driving the colour filter preview.

Slider edits are debounced per channel; only the last value of a burst is
sent. Each successful send is followed by a preview refresh, because the
backend rewrites the preview images in place.
"""

from __future__ import annotations

import asyncio
import logging
import time

from .. import config
from ..clock import Clock
from ..errors import BackendError
from ..session import SessionState
from ..views import Notices, PreviewView
from .debounce import Debouncer

logger = logging.getLogger(__name__)


class ParameterTuner:
    """
    HSV slider state and preview refreshes.

    Usage:
        tuner = ParameterTuner(session, client, preview, notices, clock)
        tuner.edit("hueMin", 30)
        await tuner.wait_idle()
    """

    def __init__(self, session: SessionState, client, preview: PreviewView, notices: Notices,
                 clock: Clock, quiet_period: float = config.SLIDER_DEBOUNCE):
        self.session = session
        self.client = client
        self.preview = preview
        self.notices = notices
        self.sent = 0  # successful slider updates
        self._debouncer = Debouncer(clock, quiet_period, self._schedule_send)
        self._tasks: set[asyncio.Task] = set()
        self._last_token = 0

    @property
    def values(self) -> dict[str, int]:
        return dict(self.session.sliders.values)

    def pending(self) -> set[str]:
        """Channels with an edit still inside its quiet period."""
        return self._debouncer.pending()

    def edit(self, channel: str, value: int):
        """
        Record a raw slider edit.

        Raises:
            KeyError: Unknown channel.
        """
        if channel not in config.SLIDER_LIMITS:
            raise KeyError(f"Unknown slider channel: {channel}")
        low, high = config.SLIDER_LIMITS[channel]
        value = max(low, min(high, int(value)))
        self.session.sliders.set(channel, value)
        self._debouncer.push(channel, value)

    def _schedule_send(self, channel: str, value: int):
        task = asyncio.ensure_future(self.send(channel, value))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def send(self, channel: str, value: int) -> bool:
        """Send one slider value, then refresh the previews. Failures are not retried."""
        try:
            await self.client.update_slider(channel, value)
        except BackendError as e:
            logger.error(f"Slider update failed for {channel}: {e}")
            self.notices.notify(f"Slider update failed for {channel}.")
            return False

        self.sent += 1
        logger.debug(f"Slider {channel} = {value}")
        await self.refresh_previews()
        return True

    async def refresh_previews(self) -> bool:
        """Fetch both preview images with a new freshness token."""
        token = self._next_token()
        try:
            original, modified = await self.client.fetch_previews(token)
        except BackendError as e:
            logger.error(f"Preview refresh failed: {e}")
            return False

        return self.preview.update(token, original, modified)

    async def wait_idle(self):
        """Wait for every send already fired (not ones still debouncing)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def cancel_pending(self):
        self._debouncer.cancel_all()

    def _next_token(self) -> int:
        # Milliseconds, strictly increasing even within one millisecond
        token = max(int(time.time() * 1000), self._last_token + 1)
        self._last_token = token
        return token
