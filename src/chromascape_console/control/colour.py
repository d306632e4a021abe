"""
Named colour submission.

Saves the HSV range currently set on the backend's sliders under a
plain-text name.
"""

from __future__ import annotations

import logging

from ..errors import BackendError, ValidationError
from ..views import Notices

logger = logging.getLogger(__name__)


def validate_colour_name(name) -> str:
    """
    Trim and check a colour name.

    Raises:
        ValidationError: Empty name or name containing whitespace.
    """
    name = (name or "").strip()
    if not name:
        raise ValidationError("Please enter a name.")
    if any(ch.isspace() for ch in name):
        raise ValidationError("Name contains spaces.")
    return name


class ColourSubmitter:
    """Submit-colour button."""

    def __init__(self, client, notices: Notices):
        self.client = client
        self.notices = notices

    async def submit(self, name: str) -> bool:
        try:
            name = validate_colour_name(name)
        except ValidationError as e:
            self.notices.alert(str(e))
            return False

        try:
            await self.client.submit_colour(name)
        except BackendError as e:
            logger.error(f"Submit error: {e}")
            self.notices.alert("Failed to save colour.")
            return False

        logger.info(f"Colour {name} saved")
        self.notices.alert("Colour has been saved successfully.")
        return True
