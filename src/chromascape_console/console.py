"""
Console - Coordinates all layers.

Wires the pieces of one operator session together:
1. Connection manager feeds logs, progress and state
2. Views hold what the operator sees
3. Controllers turn operator actions into backend requests
4. Session state is shared by reference between all of them
"""

from __future__ import annotations

import logging
from typing import Callable

from .api import BackendClient
from .clock import Clock, LoopClock
from .control import ColourSubmitter, ParameterTuner, RunStateReconciler, ScriptCatalog
from .models import Topic
from .session import SessionState
from .settings import Settings
from .transport import ConnectionManager
from .views import LogView, Notice, Notices, PreviewView, ProgressView, ToggleView

logger = logging.getLogger(__name__)


class Console:
    """
    Top-level orchestrator for one operator session.

    Coordinates:
    - Transport (ConnectionManager)
    - Views (LogView, ProgressView, ToggleView, PreviewView, Notices)
    - Controllers (ScriptCatalog, RunStateReconciler, ParameterTuner, ColourSubmitter)

    Usage:
        async with Console(Settings.load("console.json")) as console:
            console.select_script("alpha.script")
            console.set_duration("10")
            console.set_window_mode("Fixed")
            await console.toggle_run()
    """

    def __init__(self, settings: Settings | None = None, client=None, clock: Clock | None = None,
                 log_sink: Callable[[str], None] | None = None,
                 notice_handler: Callable[[Notice], None] | None = None):
        self.settings = settings or Settings()
        self.clock = clock or LoopClock()
        self.client = client or BackendClient(self.settings.backend_url, self.settings.request_timeout)

        self.session = SessionState()

        # Views
        self.notices = Notices(notice_handler)
        self.log_view = LogView(
            rows=self.settings.log_view_rows,
            threshold=self.settings.log_pin_threshold,
            max_lines=self.settings.log_max_lines,
            sink=log_sink,
        )
        self.progress_view = ProgressView()
        self.toggle_view = ToggleView()
        self.preview_view = PreviewView()

        # Controllers
        self.catalog = ScriptCatalog(self.client, self.session)
        self.reconciler = RunStateReconciler(
            self.session, self.client, self.toggle_view, self.notices, catalog=self.catalog,
        )
        self.tuner = ParameterTuner(
            self.session, self.client, self.preview_view, self.notices, self.clock,
            quiet_period=self.settings.slider_debounce,
        )
        self.colours = ColourSubmitter(self.client, self.notices)

        # Transport
        self.connections = ConnectionManager(self.settings, self.client, self.clock)
        self.connections.subscribe(Topic.LOGS, self.log_view.apply)
        self.connections.subscribe(Topic.PROGRESS, self.progress_view.update)
        self.connections.subscribe(Topic.STATE, self.reconciler.observe)

    async def __aenter__(self) -> Console:
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()

    async def start(self):
        """Open the topic channels, load the script list, fetch first previews."""
        logger.info(f"Console starting against {self.settings.backend_url}")
        self.connections.start()
        await self.catalog.load()
        await self.tuner.refresh_previews()

    async def close(self):
        """Stop channels and release the HTTP session. In-flight requests are abandoned."""
        self.tuner.cancel_pending()
        await self.connections.stop()
        close = getattr(self.client, "close", None)
        if close is not None:
            await close()
        logger.info("Console closed")

    # --- Operator actions ---

    def select_script(self, name: str):
        self.catalog.select(name)

    def set_duration(self, text: str):
        self.session.duration_text = text

    def set_window_mode(self, label: str):
        self.session.window_mode = label

    async def toggle_run(self) -> bool:
        return await self.reconciler.toggle()

    def edit_slider(self, channel: str, value: int):
        self.tuner.edit(channel, value)

    async def submit_colour(self, name: str) -> bool:
        return await self.colours.submit(name)
