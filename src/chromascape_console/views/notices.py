"""
Operator notices.

- alert: blocking message (validation failures, colour saved)
- notify: non-blocking message (backend request failures)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

logger = logging.getLogger(__name__)

ALERT = "alert"
NOTIFY = "notify"


@dataclass
class Notice:
    kind: str  # ALERT or NOTIFY
    message: str


class Notices:
    """Collects notices for the front-end to show."""

    def __init__(self, handler: Callable[[Notice], None] | None = None):
        self.history: list[Notice] = []
        self._handler = handler

    def alert(self, message: str):
        self._add(Notice(ALERT, message))

    def notify(self, message: str):
        self._add(Notice(NOTIFY, message))

    @property
    def last(self) -> Notice | None:
        return self.history[-1] if self.history else None

    def _add(self, notice: Notice):
        logger.info(f"[{notice.kind}] {notice.message}")
        self.history.append(notice)
        if self._handler:
            self._handler(notice)
