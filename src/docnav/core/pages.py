"""Page map: the content tree the sidebar is rendered from.

The page map is a JSON list of nodes. A node with a ``children`` list is a
folder, any other node is a page. Routes are unique across the whole map
and serve as the key for expansion state.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import TypedDict

from docnav.core.types import URLPath

logger = logging.getLogger(__name__)


class NodeDict(TypedDict, total=False):
    """Dictionary representation of a page map node."""

    route: str
    title: str
    children: list[NodeDict]
    hasOwnPage: bool
    href: str
    newWindow: bool
    navbar: bool
    hidden: bool


@dataclass(frozen=True)
class Node:
    """One entry of the content tree."""

    route: URLPath
    title: str
    children: tuple[Node, ...] | None = None
    has_own_page: bool = False
    href: str | None = None
    new_window: bool = False
    navbar: bool = False
    hidden: bool = False

    @property
    def is_folder(self) -> bool:
        """Folders are nodes with a non-empty children sequence."""
        return bool(self.children)

    def to_dict(self) -> NodeDict:
        """Convert to dictionary for JSON serialization."""
        result: NodeDict = {"route": self.route, "title": self.title}
        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]
        if self.has_own_page:
            result["hasOwnPage"] = True
        if self.href is not None:
            result["href"] = self.href
        if self.new_window:
            result["newWindow"] = True
        if self.navbar:
            result["navbar"] = True
        if self.hidden:
            result["hidden"] = True
        return result


def load_page_map(path: Path) -> list[Node]:
    """Load a page map from a JSON file.

    Args:
        path: Path to the page map file

    Returns:
        Top-level nodes

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a valid page map
    """
    if not path.exists():
        raise FileNotFoundError(f"Page map not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Page map is not valid JSON: {e}") from e

    return parse_page_map(data)


def parse_page_map(data: object) -> list[Node]:
    """Parse raw page map data into nodes.

    Nodes repeating an already seen route are skipped with a warning.

    Args:
        data: Decoded JSON, a list of node dictionaries

    Returns:
        Top-level nodes

    Raises:
        ValueError: If the structure or a field type is invalid
    """
    if not isinstance(data, list):
        raise ValueError("Page map must be a list")
    return _parse_nodes(data, "pages", set())


def _parse_nodes(items: list[object], where: str, seen: set[str]) -> list[Node]:
    nodes: list[Node] = []
    for i, item in enumerate(items):
        node = _parse_node(item, f"{where}[{i}]", seen)
        if node is not None:
            nodes.append(node)
    return nodes


def _parse_node(data: object, where: str, seen: set[str]) -> Node | None:
    if not isinstance(data, dict):
        raise ValueError(f"{where} must be a dictionary")

    route = data.get("route")
    if not isinstance(route, str) or not route:
        raise ValueError(f"{where}.route must be a non-empty string")
    if route in seen:
        logger.warning(f"Skipping {where}: duplicate route {route}")
        return None
    seen.add(route)

    title = data.get("title", route.rstrip("/").rsplit("/", 1)[-1])
    if not isinstance(title, str):
        raise ValueError(f"{where}.title must be a string")

    children: tuple[Node, ...] | None = None
    children_raw = data.get("children")
    if children_raw is not None:
        if not isinstance(children_raw, list):
            raise ValueError(f"{where}.children must be a list")
        children = tuple(_parse_nodes(children_raw, f"{where}.children", seen))

    href = data.get("href")
    if href is not None and not isinstance(href, str):
        raise ValueError(f"{where}.href must be a string")

    flags: dict[str, bool] = {}
    for key in ("hasOwnPage", "newWindow", "navbar", "hidden"):
        value = data.get(key, False)
        if not isinstance(value, bool):
            raise ValueError(f"{where}.{key} must be a boolean")
        flags[key] = value

    return Node(
        route=URLPath(route),
        title=title,
        children=children,
        has_own_page=flags["hasOwnPage"],
        href=href,
        new_window=flags["newWindow"],
        navbar=flags["navbar"],
        hidden=flags["hidden"],
    )


def full_directories(nodes: Sequence[Node]) -> list[Node]:
    """Return the tree shown in the mobile sidebar (hidden nodes removed)."""
    return _prune(nodes, drop_navbar=False)


def sidebar_directories(nodes: Sequence[Node]) -> list[Node]:
    """Return the tree shown in the desktop sidebar.

    Navbar entries are rendered in the top bar on desktop, so they are
    removed here along with hidden nodes.
    """
    return _prune(nodes, drop_navbar=True)


def _prune(nodes: Sequence[Node], *, drop_navbar: bool) -> list[Node]:
    result: list[Node] = []
    for node in nodes:
        if node.hidden or (drop_navbar and node.navbar):
            continue
        if node.children is not None:
            node = replace(node, children=tuple(_prune(node.children, drop_navbar=drop_navbar)))
        result.append(node)
    return result


def iter_nodes(nodes: Sequence[Node]) -> Iterator[Node]:
    """Iterate over all nodes depth-first in document order."""
    for node in nodes:
        yield node
        if node.children:
            yield from iter_nodes(node.children)


def find_node(nodes: Sequence[Node], route: str) -> Node | None:
    """Find a node by its exact route."""
    for node in iter_nodes(nodes):
        if node.route == route:
            return node
    return None
