"""
Log view - append-only terminal buffer with a scrollable viewport.

Lines arrive either one at a time (push) or as full snapshots of the
backend's recent log (pull). Both end up as the same in-order buffer.

Scrolling follows the usual terminal rule: if the viewport was within
`threshold` rows of the bottom before an update, it follows the new
bottom; otherwise it stays where the operator left it.
"""

from __future__ import annotations

import logging
from typing import Callable

from .. import config
from ..models import LogUpdate

logger = logging.getLogger(__name__)


class LogView:
    """
    Ordered log buffer plus viewport offset (in rows).

    Usage:
        view = LogView(rows=20)
        manager.subscribe(Topic.LOGS, view.apply)
        for line in view.visible_lines():
            print(line)
    """

    def __init__(self, rows: int = config.LOG_VIEW_ROWS, threshold: int = config.LOG_PIN_THRESHOLD,
                 max_lines: int = config.LOG_MAX_LINES, sink: Callable[[str], None] | None = None):
        """
        Args:
            rows: Visible rows in the viewport.
            threshold: Rows from the bottom that still count as "at bottom".
            max_lines: Retention bound; 0 keeps everything.
            sink: Optional callback for every newly appended line.
        """
        self.rows = rows
        self.threshold = threshold
        self.max_lines = max_lines
        self.scroll_top = 0
        self.evicted = 0  # total lines dropped by the retention bound
        self._lines: list[str] = []
        self._sink = sink

    @property
    def lines(self) -> list[str]:
        return list(self._lines)

    def __len__(self) -> int:
        return len(self._lines)

    @property
    def max_scroll(self) -> int:
        return max(0, len(self._lines) - self.rows)

    def distance_from_bottom(self) -> int:
        return len(self._lines) - self.rows - self.scroll_top

    def near_bottom(self) -> bool:
        return self.distance_from_bottom() <= self.threshold

    def at_bottom(self) -> bool:
        return self.scroll_top >= self.max_scroll

    def scroll_to(self, offset: int):
        """Move the viewport (clamped to the buffer)."""
        self.scroll_top = max(0, min(offset, self.max_scroll))

    def visible_lines(self) -> list[str]:
        return self._lines[self.scroll_top:self.scroll_top + self.rows]

    def apply(self, update: LogUpdate):
        """Subscriber entry point for the logs topic."""
        if update.snapshot:
            self.replace(update.lines)
        else:
            for line in update.lines:
                self.append(line)

    def append(self, line: str):
        """Append one line."""
        self._extend([line])

    def replace(self, lines: list[str]):
        """
        Take a full snapshot of the backend log.

        The snapshot is merged, not swapped in: lines already shown are
        skipped and only the new tail is appended, so the buffer never
        shrinks or reorders.
        """
        overlap = _overlap(self._lines, lines)
        self._extend(lines[overlap:])

    def _extend(self, new_lines: list[str]):
        if not new_lines:
            return

        pinned = self.near_bottom()
        self._lines.extend(new_lines)

        evicted = 0
        if self.max_lines and len(self._lines) > self.max_lines:
            evicted = len(self._lines) - self.max_lines
            del self._lines[:evicted]
            self.evicted += evicted

        if pinned:
            self.scroll_top = self.max_scroll
        else:
            # Same lines stay on screen when older ones are evicted
            self.scroll_top = max(0, self.scroll_top - evicted)

        if self._sink:
            for line in new_lines:
                self._sink(line)


def _overlap(current: list[str], snapshot: list[str]) -> int:
    """Length of the longest suffix of current that is a prefix of snapshot."""
    for size in range(min(len(current), len(snapshot)), 0, -1):
        if current[-size:] == snapshot[:size]:
            return size
    return 0
