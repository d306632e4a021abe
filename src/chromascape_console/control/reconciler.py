"""
Run-state reconciler - the running/stopped flag the operator sees.

Two sources write the flag:
- Optimistic flips after a start/stop request succeeds (local intent)
- Observations on the state topic (confirmed by the backend)

Observations always win. An optimistic flip is dropped if an observation
arrived while its request was in flight, so a late "start succeeded"
response can't override a newer "state: false".

States:
- STOPPED: Start shown
- RUNNING: Stop shown
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Awaitable, Callable

from ..errors import BackendError, ValidationError
from ..models import RunConfig
from ..session import SessionState
from ..views import Notices, ToggleView
from .run_config import build_run_config

logger = logging.getLogger(__name__)


class RunPhase(Enum):
    """Displayed run state."""

    STOPPED = auto()
    RUNNING = auto()


class RunStateReconciler:
    """
    Owns SessionState.run_state and the Start/Stop toggle.

    Usage:
        reconciler = RunStateReconciler(session, client, toggle, notices)
        manager.subscribe(Topic.STATE, reconciler.observe)
        await reconciler.toggle()
    """

    def __init__(self, session: SessionState, client, toggle: ToggleView, notices: Notices, catalog=None):
        self.session = session
        self.client = client
        self.toggle_view = toggle
        self.notices = notices
        self.catalog = catalog
        self.observations = 0  # authoritative values received so far

    @property
    def running(self) -> bool:
        return self.session.run_state.running

    @property
    def phase(self) -> RunPhase:
        return RunPhase.RUNNING if self.running else RunPhase.STOPPED

    def observe(self, running: bool):
        """Subscriber entry point for the state topic. Overwrites unconditionally."""
        state = self.session.run_state
        shown = state.running
        state.confirmed = bool(running)
        state.intent = None
        self.observations += 1
        if state.running != shown:
            logger.info(f"Backend reports script {'running' if state.running else 'stopped'}")
            self._render()

    async def toggle(self) -> bool:
        """Start when stopped, stop when running. Returns True if a request succeeded."""
        if self.running:
            return await self.stop()

        try:
            run_config = build_run_config(self.session, self.catalog)
        except ValidationError as e:
            self.notices.alert(str(e))
            return False
        return await self.start(run_config)

    async def start(self, run_config: RunConfig) -> bool:
        logger.info(
            f"Starting {run_config.script_id} for {run_config.duration_minutes} min "
            f"({run_config.window_mode.value} window)"
        )
        return await self._issue(True, lambda: self.client.start_run(run_config), "start")

    async def stop(self) -> bool:
        logger.info("Stopping script")
        return await self._issue(False, self.client.stop_run, "stop")

    async def _issue(self, target: bool, send: Callable[[], Awaitable], action: str) -> bool:
        issued_after = self.observations
        try:
            await send()
        except BackendError as e:
            logger.error(f"Failed to {action} script: {e}")
            self.notices.notify(f"Failed to {action} script.")
            return False

        if self.observations != issued_after:
            logger.info(f"State changed while {action} was in flight, keeping backend value")
            return True

        state = self.session.run_state
        shown = state.running
        state.intent = target
        if state.running != shown:
            self._render()
        return True

    def _render(self):
        self.toggle_view.render(self.running)
