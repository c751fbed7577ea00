"""Page map live reload for development mode.

Watches the page map file and swaps the sidebar's nodes when it changes.
Expansion state is kept; connected clients are told to refetch.
"""

import asyncio
import logging
from pathlib import Path

from watchfiles import Change, awatch

from docnav.core.navigation import Sidebar
from docnav.core.pages import load_page_map
from docnav.live.hub import ConnectionHub

logger = logging.getLogger(__name__)


class LiveReloadManager:
    """Reloads the page map on change and notifies connected clients."""

    def __init__(self, page_map: Path, sidebar: Sidebar, hub: ConnectionHub) -> None:
        """Initialize the live reload manager.

        Args:
            page_map: Page map file to watch
            sidebar: Sidebar whose nodes are replaced on reload
            hub: Hub used to notify clients
        """
        self._page_map = page_map
        self._sidebar = sidebar
        self._hub = hub
        self._watch_task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the file watcher."""
        if self._watch_task is not None:
            return
        self._watch_task = asyncio.create_task(self._watch_files())

    async def stop(self) -> None:
        """Stop the file watcher."""
        if self._watch_task is not None:
            self._watch_task.cancel()
            try:
                await self._watch_task
            except asyncio.CancelledError:
                pass
            self._watch_task = None

    def reload(self) -> bool:
        """Reload the page map into the sidebar.

        An invalid page map keeps the previous tree in place.

        Returns:
            True if the sidebar was updated
        """
        try:
            nodes = load_page_map(self._page_map)
        except (FileNotFoundError, ValueError) as e:
            logger.warning(f"Keeping previous page map: {e}")
            return False

        self._sidebar.set_nodes(nodes)
        logger.info(f"Reloaded page map from {self._page_map}")
        return True

    async def _watch_files(self) -> None:
        """Watch the page map's directory and reload on changes to it."""
        async for changes in awatch(self._page_map.parent):
            if not self._is_page_map_change(changes):
                continue
            if self.reload():
                await self._hub.broadcast({"type": "reload"})

    def _is_page_map_change(self, changes: set[tuple[Change, str]]) -> bool:
        target = self._page_map.resolve()
        for change_type, path_str in changes:
            if change_type == Change.deleted:
                continue
            if Path(path_str).resolve() == target:
                return True
        return False
