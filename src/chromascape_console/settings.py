"""
Deployment settings with JSON loading.

One Settings instance is shared by every console component. Values come
from config.py defaults, optionally overridden by a JSON file and then by
command-line flags. Settings are never written back: operator preferences
do not outlive the session.
"""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path

from . import config

logger = logging.getLogger(__name__)

TRANSPORTS = ("push", "pull")


@dataclass
class Settings:
    """Runtime console settings."""

    # Backend
    backend_url: str = config.BACKEND_URL
    request_timeout: float = config.REQUEST_TIMEOUT

    # Channels ("push" or "pull"; per-topic values override transport)
    transport: str = config.TRANSPORT
    logs_transport: str = ""
    progress_transport: str = ""
    state_transport: str = ""
    reconnect_delay: float = config.RECONNECT_DELAY
    logs_poll_interval: float = config.LOGS_POLL_INTERVAL
    progress_poll_interval: float = config.PROGRESS_POLL_INTERVAL
    state_poll_interval: float = config.STATE_POLL_INTERVAL

    # Log view
    log_view_rows: int = config.LOG_VIEW_ROWS
    log_pin_threshold: int = config.LOG_PIN_THRESHOLD
    log_max_lines: int = config.LOG_MAX_LINES

    # Parameter tuner
    slider_debounce: float = config.SLIDER_DEBOUNCE

    def update(self, **kwargs):
        """Update settings from dict (e.g., from a JSON file or CLI flags)."""
        for key, value in kwargs.items():
            if not hasattr(self, key):
                logger.warning(f"Unknown setting ignored: {key}")
                continue
            expected_type = type(getattr(self, key))
            try:
                value = expected_type(value)
            except (TypeError, ValueError):
                logger.warning(f"Invalid value for {key}: {value}")
                continue
            # Per-topic overrides may be empty (use the global transport)
            if key.endswith("transport") and value not in TRANSPORTS and (key == "transport" or value):
                logger.warning(f"Invalid value for {key}: {value}")
                continue
            setattr(self, key, value)

    def transport_for(self, topic: str) -> str:
        """Transport chosen for one topic, falling back to the global one."""
        override = getattr(self, f"{topic}_transport", "")
        transport = override or self.transport
        if transport not in TRANSPORTS:
            raise ValueError(f"Unknown transport for {topic}: {transport!r}")
        return transport

    def poll_interval_for(self, topic: str) -> float:
        return getattr(self, f"{topic}_poll_interval")

    @classmethod
    def load(cls, path: str | Path | None = None) -> Settings:
        """Load from a JSON file, or return defaults."""
        settings = cls()
        if path is None:
            return settings

        path = Path(path)
        if not path.exists():
            logger.warning(f"Settings file {path} not found, using defaults")
            return settings

        try:
            with open(path) as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to load {path}: {e}, using defaults")
            return settings

        if not isinstance(data, dict):
            logger.warning(f"Settings file {path} is not a JSON object, using defaults")
            return settings

        settings.update(**data)
        logger.info(f"Settings loaded from {path}")
        return settings

    def to_dict(self) -> dict:
        return asdict(self)
