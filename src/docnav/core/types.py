"""Core type definitions."""

from typing import NewType

# URL path for routing (e.g., "/guide", "/guide/setup")
# Node routes double as the tree state key
URLPath = NewType("URLPath", str)

# Mapping of anchor slug to {"isActive": bool}, computed from scroll position
ActiveAnchorSignal = dict[str, dict[str, bool]]
