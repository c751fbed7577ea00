"""Live updates over WebSocket."""

from docnav.live.hub import ConnectionHub
from docnav.live.reload import LiveReloadManager

__all__ = ["ConnectionHub", "LiveReloadManager"]
