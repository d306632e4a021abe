"""
Script catalog - the selectable scripts, fetched once per session.
"""

from __future__ import annotations

import logging

from .. import config
from ..errors import BackendError
from ..models import ScriptCatalogEntry
from ..session import SessionState

logger = logging.getLogger(__name__)


class ScriptCatalog:
    """
    Script list with single selection.

    Selection stays client-side; it only reaches the backend inside a
    RunConfig when the operator presses Start.

    Usage:
        catalog = ScriptCatalog(client, session)
        await catalog.load()
        catalog.select("alpha.script")
    """

    def __init__(self, client, session: SessionState, placeholder: str = config.CATALOG_PLACEHOLDER):
        self.client = client
        self.session = session
        self.placeholder = placeholder
        self.entries: list[ScriptCatalogEntry] = []
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    @property
    def names(self) -> list[str]:
        return [entry.name for entry in self.entries]

    @property
    def selected(self) -> ScriptCatalogEntry | None:
        for entry in self.entries:
            if entry.selected:
                return entry
        return None

    def __contains__(self, name: str) -> bool:
        return any(entry.name == name for entry in self.entries)

    async def load(self) -> list[ScriptCatalogEntry]:
        """Fetch the list on first call; later calls return it unchanged."""
        if self._loaded:
            return self.entries

        try:
            names = await self.client.list_scripts()
        except BackendError as e:
            logger.error(f"Error fetching scripts: {e}")
            return self.entries

        self.entries = [ScriptCatalogEntry(name) for name in names if name != self.placeholder]
        self._loaded = True
        logger.info(f"Loaded {len(self.entries)} scripts")
        return self.entries

    def select(self, name: str) -> ScriptCatalogEntry:
        """
        Make name the only selected entry.

        Raises:
            KeyError: name is not in the catalog.
        """
        target = next((entry for entry in self.entries if entry.name == name), None)
        if target is None:
            raise KeyError(f"Unknown script: {name}")

        for entry in self.entries:
            entry.selected = entry is target
        self.session.selected_script = name
        return target
