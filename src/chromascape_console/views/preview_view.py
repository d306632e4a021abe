"""
Colour filter preview - pre- and post-classification images.

The backend rewrites both images in place after each slider change, so
each refresh carries a freshness token and the bytes are decoded again.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

import cv2
import numpy as np

logger = logging.getLogger(__name__)


@dataclass
class PreviewPair:
    """Decoded preview images (BGR) and the token they were fetched with."""

    token: int
    original: np.ndarray | None
    modified: np.ndarray | None


def decode_image(data: bytes) -> np.ndarray | None:
    """Decode PNG/JPEG bytes to a BGR array, or None if undecodable."""
    if not data:
        return None
    buf = np.frombuffer(data, dtype=np.uint8)
    return cv2.imdecode(buf, cv2.IMREAD_COLOR)


class PreviewView:
    """Latest preview pair."""

    def __init__(self):
        self.current: PreviewPair | None = None
        self.refreshes = 0

    def update(self, token: int, original: bytes, modified: bytes) -> bool:
        """
        Decode a freshly fetched pair. An undecodable side keeps its previous image.

        Returns:
            False if the pair was fetched before the one already shown.
        """
        if self.current is not None and token < self.current.token:
            logger.debug(f"Dropped stale preview {token} (showing {self.current.token})")
            return False

        original_img = decode_image(original)
        modified_img = decode_image(modified)

        if original_img is None:
            logger.warning("Original preview could not be decoded")
            original_img = self.current.original if self.current else None
        if modified_img is None:
            logger.warning("Modified preview could not be decoded")
            modified_img = self.current.modified if self.current else None

        self.current = PreviewPair(token, original_img, modified_img)
        self.refreshes += 1
        return True

    def save(self, directory: str | Path) -> list[Path]:
        """Write the current pair as original.png / modified.png."""
        if self.current is None:
            return []

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        written = []
        for name, image in (("original", self.current.original), ("modified", self.current.modified)):
            if image is None:
                continue
            path = directory / f"{name}.png"
            cv2.imwrite(str(path), image)
            written.append(path)
        return written
