"""
Console data model.

Value types shared between the channels, the controllers and the views.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from . import config


class Topic(Enum):
    """Named update streams, independent of transport."""

    LOGS = "logs"
    PROGRESS = "progress"
    STATE = "state"


class WindowMode(Enum):
    """How the automation engine treats the client window."""

    FIXED = "Fixed"
    RESIZABLE = "Resizable"

    @classmethod
    def parse(cls, text: str | None) -> WindowMode | None:
        """Match a dropdown label ("Fixed"/"Resizable"), or None."""
        for mode in cls:
            if text == mode.value:
                return mode
        return None


@dataclass(frozen=True)
class RunConfig:
    """Validated start parameters, built per Start action."""

    script_id: str
    duration_minutes: int
    window_mode: WindowMode

    def to_payload(self) -> dict:
        """Request body for POST /api/runConfig."""
        return {
            "script": self.script_id,
            "duration": self.duration_minutes,
            "fixed": self.window_mode is WindowMode.FIXED,
        }


@dataclass
class RunState:
    """
    Client shadow of the backend's running flag.

    The backend holds the authoritative value. `confirmed` is the last
    value it reported, `intent` an optimistic local write still waiting
    for confirmation. An observation always clears the intent.
    """

    confirmed: bool | None = None  # None until the first observation
    intent: bool | None = None

    @property
    def running(self) -> bool:
        """Value shown to the operator."""
        if self.intent is not None:
            return self.intent
        return bool(self.confirmed)


@dataclass
class ScriptCatalogEntry:
    """One selectable script."""

    name: str
    selected: bool = False


@dataclass
class LogUpdate:
    """Decoded logs message: one pushed line or a full polled snapshot."""

    lines: list[str]
    snapshot: bool = False


@dataclass
class SliderState:
    """Last value set for each HSV bound."""

    values: dict[str, int] = field(default_factory=lambda: dict(config.SLIDER_DEFAULTS))

    def set(self, channel: str, value: int):
        if channel not in self.values:
            raise KeyError(f"Unknown slider channel: {channel}")
        self.values[channel] = int(value)
