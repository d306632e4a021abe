"""
Progress view - last-write-wins percentage.
"""

from __future__ import annotations


class ProgressView:
    """Run progress as a label and a proportional bar. No smoothing."""

    def __init__(self):
        self.percent = 0

    def update(self, percent: int):
        """Subscriber entry point for the progress topic."""
        self.percent = max(0, min(100, int(percent)))

    @property
    def label(self) -> str:
        return f"{self.percent}%"

    @property
    def fraction(self) -> float:
        return self.percent / 100.0

    def bar(self, width: int = 30) -> str:
        """Text bar, e.g. "[#######-------] 50%"."""
        filled = round(width * self.fraction)
        return f"[{'#' * filled}{'-' * (width - filled)}] {self.label}"
