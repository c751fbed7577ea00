"""Route matching for navigation nodes.

A node is active only when its route equals the current path exactly,
ignoring the in-page fragment and a trailing slash. Prefix containment is a
separate predicate used for ancestor expansion, never for activation.
"""

import re

from docnav.core.types import URLPath

_INDEX_SEGMENT = re.compile(r"/index(/|$)")


def strip_fragment(path: str) -> str:
    """Remove an in-page anchor fragment (``#...``) from a path."""
    return path.split("#", 1)[0]


def normalize_route(route: str) -> str:
    """Normalize a route to end with exactly one trailing slash.

    Args:
        route: Route or path (e.g., "/guide", "/guide/", "/guide//")

    Returns:
        Route with a single trailing slash (e.g., "/guide/")
    """
    return route.rstrip("/") + "/"


def resolve_fs_route(as_path: str, locale: str | None = None) -> URLPath:
    """Resolve a browser path into the locale-free route of a page.

    Localized pages live at routes such as ``/guide.en``; the active locale
    suffix is removed, a trailing ``/index`` segment is collapsed and the
    fragment is dropped.

    Args:
        as_path: Path as shown in the browser, possibly with a fragment
        locale: Active locale (e.g., "en"), None for single-language sites

    Returns:
        Resolved route, "/" when nothing remains
    """
    path = strip_fragment(as_path)
    if locale:
        path = re.sub(rf"\.{re.escape(locale)}(/|$)", r"\1", path, count=1)
    path = _INDEX_SEGMENT.sub(r"\1", path, count=1)
    return URLPath(path or "/")


def is_active(current_path: str, node_route: str) -> bool:
    """Check whether a node is the active node for the current path.

    Args:
        current_path: Locale-resolved current path, fragment allowed
        node_route: Declared route of the node

    Returns:
        True only on exact equality after normalization
    """
    return normalize_route(strip_fragment(current_path)) == normalize_route(node_route)


def is_ancestor(current_path: str, node_route: str) -> bool:
    """Check whether the current path lies strictly below a node route."""
    current = normalize_route(strip_fragment(current_path))
    route = normalize_route(node_route)
    return current != route and current.startswith(route)
