"""WebSocket connection hub.

Keeps track of connected sidebar clients and pushes JSON messages to them:
tree state changes so every open view stays in sync, and reload events
after the page map changes.
"""

import asyncio
import json
import logging
import weakref
from typing import Any

from aiohttp import WSMsgType, web

logger = logging.getLogger(__name__)


class ConnectionHub:
    """Broadcasts JSON messages to connected WebSocket clients."""

    def __init__(self) -> None:
        self._connections: weakref.WeakSet[web.WebSocketResponse] = weakref.WeakSet()
        self._pending: set[asyncio.Task[None]] = set()

    def __len__(self) -> int:
        return len(self._connections)

    async def handle_websocket(self, request: web.Request) -> web.WebSocketResponse:
        """Handle WebSocket connection.

        Args:
            request: aiohttp request

        Returns:
            WebSocket response
        """
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        self._connections.add(ws)

        try:
            async for msg in ws:
                if msg.type == WSMsgType.ERROR:
                    break
        finally:
            self._connections.discard(ws)

        return ws

    async def broadcast(self, payload: dict[str, Any]) -> None:
        """Send a message to all connected clients.

        Args:
            payload: JSON-serializable message
        """
        if not self._connections:
            return

        message = json.dumps(payload)

        for ws in list(self._connections):
            if ws.closed:
                continue
            try:
                await ws.send_str(message)
            except ConnectionResetError:
                # Client disconnected mid-send, will be cleaned up by WeakSet
                pass

    def publish(self, payload: dict[str, Any]) -> None:
        """Schedule a broadcast from synchronous code.

        Must be called while the event loop is running; messages published
        with no connected clients are dropped.
        """
        if not self._connections:
            return
        task = asyncio.get_running_loop().create_task(self.broadcast(payload))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    def on_tree_state_change(self, route: str, expanded: bool) -> None:
        """TreeStateStore listener forwarding changes to clients."""
        logger.debug(f"Broadcasting tree state {route}={expanded}")
        self.publish({"type": "tree-state", "route": route, "expanded": expanded})

    async def close(self) -> None:
        """Close all connections."""
        for ws in list(self._connections):
            await ws.close()


def create_hub_routes(hub: ConnectionHub) -> list[web.RouteDef]:
    """Create routes for the tree state WebSocket.

    Args:
        hub: ConnectionHub instance

    Returns:
        List of route definitions
    """
    return [web.get("/ws/tree-state", hub.handle_websocket)]
