"""Navigation tree renderer.

Walks the page map and produces the sidebar structure for the current path:
folders carry their expansion state, the active page carries its in-page
anchors. Rendering is a pure function of the nodes, the current path and
the shared TreeStateStore.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, TypedDict

from docnav.core.anchors import AnchorEntry, AnchorEntryDict, extract_anchor_texts, resolve_anchors
from docnav.core.pages import Node, find_node, full_directories, sidebar_directories
from docnav.core.routes import is_active, is_ancestor, resolve_fs_route
from docnav.core.state import ToggleOutcome, TreeStateStore
from docnav.core.types import ActiveAnchorSignal, URLPath

logger = logging.getLogger(__name__)

NodeKind = Literal["folder", "file"]
ViewName = Literal["desktop", "mobile"]


class RenderedNodeDict(TypedDict, total=False):
    """Dictionary representation of a rendered node."""

    title: str
    route: str
    kind: NodeKind
    active: bool
    href: str
    open: bool
    children: list[RenderedNodeDict]
    anchors: list[AnchorEntryDict]
    activeAnchor: int
    target: str
    rel: str


@dataclass
class RenderedNode:
    """Sidebar entry annotated with its computed state."""

    title: str
    route: URLPath
    kind: NodeKind
    active: bool
    href: str | None = None
    open: bool = False
    children: list[RenderedNode] | None = None
    anchors: list[AnchorEntry] = field(default_factory=list)
    active_anchor: int | None = None
    new_window: bool = False

    def to_dict(self) -> RenderedNodeDict:
        """Convert to dictionary for JSON serialization."""
        result: RenderedNodeDict = {
            "title": self.title,
            "route": self.route,
            "kind": self.kind,
            "active": self.active,
        }
        if self.href is not None:
            result["href"] = self.href
        if self.kind == "folder":
            result["open"] = self.open
        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]
        if self.anchors:
            result["anchors"] = [anchor.to_dict() for anchor in self.anchors]
            if self.active_anchor is not None:
                result["activeAnchor"] = self.active_anchor
        if self.new_window:
            result["target"] = "_blank"
            result["rel"] = "noopener noreferrer"
        return result


class NavigationTreeRenderer:
    """Recursive sidebar tree walk over a shared TreeStateStore.

    The renderer remembers which folders were active (or, with
    ``expand_ancestors``, above the active node) during its previous walk.
    A folder is force-expanded only on the walk where it enters that set, so
    a later manual collapse is not undone by the next render.
    """

    def __init__(
        self,
        store: TreeStateStore,
        *,
        default_collapsed: bool = False,
        expand_ancestors: bool = False,
    ) -> None:
        """Initialize renderer.

        Args:
            store: Expansion state shared with other views
            default_collapsed: Folders without stored state start collapsed
            expand_ancestors: Also force-expand every folder above the
                active node
        """
        self.store = store
        self.default_collapsed = default_collapsed
        self.expand_ancestors = expand_ancestors
        self._was_forced: set[str] = set()
        self._forced: set[str] = set()

    def render(
        self,
        nodes: Sequence[Node],
        current_path: str,
        anchors: Sequence[str] = (),
        active_anchor: ActiveAnchorSignal | None = None,
    ) -> list[RenderedNode]:
        """Render a list of sibling nodes as one walk.

        Args:
            nodes: Nodes to render
            current_path: Locale-resolved current path, fragment allowed
            anchors: Heading texts of the current page
            active_anchor: Active-anchor signal for the current page

        Returns:
            Rendered nodes in input order
        """
        self._forced = set()
        result = self._render_nodes(nodes, current_path, anchors, active_anchor)
        self._was_forced = self._forced
        return result

    def _render_nodes(
        self,
        nodes: Sequence[Node],
        current_path: str,
        anchors: Sequence[str],
        active_anchor: ActiveAnchorSignal | None,
    ) -> list[RenderedNode]:
        return [self._render_node(node, current_path, anchors, active_anchor) for node in nodes]

    def _render_node(
        self,
        node: Node,
        current_path: str,
        anchors: Sequence[str],
        active_anchor: ActiveAnchorSignal | None,
    ) -> RenderedNode:
        if node.is_folder:
            return self._render_folder(node, current_path, anchors, active_anchor)
        return self._render_file(node, current_path, anchors, active_anchor)

    def _render_folder(
        self,
        node: Node,
        current_path: str,
        anchors: Sequence[str],
        active_anchor: ActiveAnchorSignal | None,
    ) -> RenderedNode:
        active = is_active(current_path, node.route)
        if active or (self.expand_ancestors and is_ancestor(current_path, node.route)):
            self._forced.add(node.route)
            # Must run before resolve so a freshly active folder never shows collapsed
            if node.route not in self._was_forced:
                self.store.force_expand(node.route)

        is_open = self.store.resolve(node.route, self.default_collapsed)
        children = None
        if is_open and node.children:
            children = self._render_nodes(node.children, current_path, anchors, active_anchor)

        return RenderedNode(
            title=node.title,
            route=node.route,
            kind="folder",
            active=active,
            href=node.route if node.has_own_page else None,
            open=is_open,
            children=children,
        )

    def _render_file(
        self,
        node: Node,
        current_path: str,
        anchors: Sequence[str],
        active_anchor: ActiveAnchorSignal | None,
    ) -> RenderedNode:
        active = is_active(current_path, node.route)
        rendered = RenderedNode(
            title=node.title,
            route=node.route,
            kind="file",
            active=active,
            href=node.href or node.route,
            new_window=node.new_window,
        )
        if active and anchors:
            resolved = resolve_anchors(anchors, active_anchor)
            rendered.anchors = resolved.entries
            rendered.active_anchor = resolved.active_index
        return rendered


class SidebarView:
    """One sidebar tree walk with its own configuration and cached output.

    The view subscribes to the store and marks its output stale on every
    state change, including changes made through another view.
    """

    def __init__(
        self,
        name: ViewName,
        store: TreeStateStore,
        nodes: Sequence[Node],
        *,
        show_anchors: bool = True,
        default_collapsed: bool = False,
        expand_ancestors: bool = False,
    ) -> None:
        self.name = name
        self.nodes = list(nodes)
        self.show_anchors = show_anchors
        self.renderer = NavigationTreeRenderer(
            store,
            default_collapsed=default_collapsed,
            expand_ancestors=expand_ancestors,
        )
        self._cache_key: tuple[Any, ...] | None = None
        self._cached: list[RenderedNode] = []
        self._stale = True
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._on_state_change)

    @property
    def stale(self) -> bool:
        """Whether the next render has to walk the tree again."""
        return self._stale

    def render(
        self,
        current_path: str,
        anchors: Sequence[str] = (),
        active_anchor: ActiveAnchorSignal | None = None,
    ) -> list[RenderedNode]:
        """Render the view, reusing the previous output when still valid.

        Each call returns a new list, but on a cache hit the RenderedNode
        items are shared with the previous result and must be treated as
        read-only.
        """
        view_anchors = tuple(anchors) if self.show_anchors else ()
        signal = dict(active_anchor or {})
        key = (current_path, view_anchors, signal)
        if not self._stale and key == self._cache_key:
            return list(self._cached)

        logger.debug(f"Rendering {self.name} sidebar for {current_path}")
        result = self.renderer.render(self.nodes, current_path, view_anchors, signal)
        self._cached = result
        self._cache_key = key
        self._stale = False
        return list(result)

    def set_nodes(self, nodes: Sequence[Node]) -> None:
        """Replace the nodes this view walks and drop the cached output."""
        self.nodes = list(nodes)
        self._stale = True

    def close(self) -> None:
        """Stop listening to the store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def _on_state_change(self, route: str, expanded: bool) -> None:
        self._stale = True


@dataclass
class SidebarResult:
    """Both sidebar views rendered for one path."""

    route: URLPath
    desktop: list[RenderedNode]
    mobile: list[RenderedNode]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "activeRoute": self.route,
            "desktop": {"items": [item.to_dict() for item in self.desktop]},
            "mobile": {"items": [item.to_dict() for item in self.mobile]},
        }


class Sidebar:
    """Desktop and mobile navigation trees over one shared store.

    The desktop view uses the pruned directory set and hides anchors when a
    floating table of contents is shown; the mobile view always uses the
    full set and always shows anchors.
    """

    def __init__(
        self,
        store: TreeStateStore,
        nodes: Sequence[Node],
        *,
        default_collapsed: bool = False,
        float_toc: bool = False,
        expand_ancestors: bool = False,
    ) -> None:
        self.store = store
        self.default_collapsed = default_collapsed
        self.nodes = list(nodes)
        self.desktop = SidebarView(
            "desktop",
            store,
            sidebar_directories(nodes),
            show_anchors=not float_toc,
            default_collapsed=default_collapsed,
            expand_ancestors=expand_ancestors,
        )
        self.mobile = SidebarView(
            "mobile",
            store,
            full_directories(nodes),
            show_anchors=True,
            default_collapsed=default_collapsed,
            expand_ancestors=expand_ancestors,
        )

    def set_nodes(self, nodes: Sequence[Node]) -> None:
        """Replace the page map, keeping expansion state."""
        self.nodes = list(nodes)
        self.desktop.set_nodes(sidebar_directories(nodes))
        self.mobile.set_nodes(full_directories(nodes))

    def render(
        self,
        path: str,
        *,
        locale: str | None = None,
        headings: Sequence[Mapping[str, Any]] = (),
        active_anchor: ActiveAnchorSignal | None = None,
    ) -> SidebarResult:
        """Render both views for a browser path.

        Args:
            path: Current browser path, possibly locale-suffixed and with a
                fragment
            locale: Active locale
            headings: Heading descriptors of the current page
            active_anchor: Active-anchor signal of the current page

        Returns:
            SidebarResult with both views
        """
        route = resolve_fs_route(path, locale)
        anchors = extract_anchor_texts(headings)
        return SidebarResult(
            route=route,
            desktop=self.desktop.render(route, anchors, active_anchor),
            mobile=self.mobile.render(route, anchors, active_anchor),
        )

    def click(
        self,
        route: str,
        path: str,
        *,
        locale: str | None = None,
        disclosure: bool = False,
    ) -> ToggleOutcome | None:
        """Apply a click on a folder.

        Args:
            route: Route of the clicked folder
            path: Current browser path
            locale: Active locale
            disclosure: The click targeted the expand/collapse control

        Returns:
            ToggleOutcome, or None when no folder has this route
        """
        node = find_node(self.nodes, route)
        if node is None or not node.is_folder:
            return None
        current = resolve_fs_route(path, locale)
        active = is_active(current, node.route)
        return self.store.toggle(
            node.route,
            active=active,
            has_own_page=node.has_own_page,
            disclosure=disclosure,
            default_collapsed=self.default_collapsed,
        )

    def close(self) -> None:
        """Detach both views from the store."""
        self.desktop.close()
        self.mobile.close()
