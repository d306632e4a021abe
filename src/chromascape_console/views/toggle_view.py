"""
Start/Stop toggle - shows the run state the reconciler settled on.
"""

from __future__ import annotations


class ToggleView:
    """Start/Stop button model."""

    def __init__(self):
        self.running = False
        self.renders = 0

    def render(self, running: bool):
        self.running = running
        self.renders += 1

    @property
    def label(self) -> str:
        return "Stop" if self.running else "Start"

    @property
    def style(self) -> str:
        return "danger" if self.running else "success"
