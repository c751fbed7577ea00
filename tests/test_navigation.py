"""Tests for the navigation tree renderer and sidebar views."""

import pytest
from docnav.core.navigation import NavigationTreeRenderer, RenderedNode, Sidebar, SidebarView
from docnav.core.pages import Node, parse_page_map
from docnav.core.state import ToggleAction, TreeStateStore

SCENARIO = [
    {
        "route": "/guide",
        "title": "Guide",
        "children": [
            {"route": "/guide/intro", "title": "Intro"},
            {
                "route": "/guide/setup",
                "title": "Setup",
                "children": [{"route": "/guide/setup/a", "title": "A"}],
            },
        ],
    },
]


def _heading(text: str) -> dict[str, object]:
    return {"type": "heading", "depth": 2, "children": [{"type": "text", "value": text}]}


def _by_route(items: list[RenderedNode]) -> dict[str, RenderedNode]:
    found: dict[str, RenderedNode] = {}
    for item in items:
        found[item.route] = item
        if item.children:
            found.update(_by_route(item.children))
    return found


@pytest.fixture
def scenario() -> list[Node]:
    return parse_page_map(SCENARIO)


class TestNavigationTreeRendererScenario:
    """End-to-end rendering of a nested guide."""

    def test__deep_active_page__ancestors_expanded_by_default(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store)

        items = _by_route(renderer.render(scenario, "/guide/setup/a/"))

        assert items["/guide"].active is False
        assert items["/guide"].open is True
        assert items["/guide/setup"].active is False
        assert items["/guide/setup"].open is True
        assert items["/guide/setup/a"].active is True
        assert items["/guide/intro"].active is False

    def test__ancestors__not_forced_into_store(self, scenario: list[Node]) -> None:
        """Ancestors open through the default, not through activation."""
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store)

        renderer.render(scenario, "/guide/setup/a/")

        assert store.get("/guide") is None
        assert store.get("/guide/setup") is None

    def test__collapsed_default__hides_active_descendant(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store, default_collapsed=True)

        (guide,) = renderer.render(scenario, "/guide/setup/a/")

        assert guide.open is False
        assert guide.children is None

    def test__expand_ancestors__forces_every_ancestor_open(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store, default_collapsed=True, expand_ancestors=True)

        items = _by_route(renderer.render(scenario, "/guide/setup/a/"))

        assert items["/guide"].open is True
        assert items["/guide/setup"].open is True
        assert items["/guide/setup/a"].active is True
        assert store.get("/guide") is True
        assert store.get("/guide/setup") is True


class TestNavigationTreeRendererFolders:
    """Folder rendering."""

    def test__active_folder__force_expanded_before_resolve(self, scenario: list[Node]) -> None:
        """A folder collapsed earlier opens when it becomes active."""
        store = TreeStateStore({"/guide/setup": False})
        renderer = NavigationTreeRenderer(store)

        items = _by_route(renderer.render(scenario, "/guide/setup#install"))

        assert items["/guide/setup"].active is True
        assert items["/guide/setup"].open is True
        assert store.get("/guide/setup") is True

    def test__active_folder__manual_collapse_survives_rerender(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store)
        renderer.render(scenario, "/guide/setup")

        store.set("/guide/setup", False)
        items = _by_route(renderer.render(scenario, "/guide/setup"))

        assert items["/guide/setup"].active is True
        assert items["/guide/setup"].open is False
        assert items["/guide/setup"].children is None
        assert store.get("/guide/setup") is False

    def test__active_folder__forced_again_after_navigating_back(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store)
        renderer.render(scenario, "/guide/setup")
        store.set("/guide/setup", False)

        renderer.render(scenario, "/guide/intro")
        items = _by_route(renderer.render(scenario, "/guide/setup"))

        assert items["/guide/setup"].open is True
        assert store.get("/guide/setup") is True

    def test__expand_ancestors__manual_collapse_survives_rerender(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store, default_collapsed=True, expand_ancestors=True)
        renderer.render(scenario, "/guide/setup/a")

        store.set("/guide", False)
        (guide,) = renderer.render(scenario, "/guide/setup/a")

        assert guide.open is False
        assert guide.children is None
        assert store.get("/guide") is False

    def test__manual_collapse_of_inactive_ancestor__respected(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        renderer = NavigationTreeRenderer(store)
        renderer.render(scenario, "/guide/setup/a")

        store.set("/guide", False)
        (guide,) = renderer.render(scenario, "/guide/setup/a")

        assert guide.open is False
        assert guide.children is None

    def test__collapsed_folder__keeps_subtree_for_later(self, scenario: list[Node]) -> None:
        store = TreeStateStore({"/guide": False})
        renderer = NavigationTreeRenderer(store)
        renderer.render(scenario, "/")

        store.set("/guide", True)
        (guide,) = renderer.render(scenario, "/")

        assert guide.children is not None
        assert [child.route for child in guide.children] == ["/guide/intro", "/guide/setup"]

    def test__folder_without_own_page__has_no_href(self, scenario: list[Node]) -> None:
        (guide,) = NavigationTreeRenderer(TreeStateStore()).render(scenario, "/")

        assert guide.href is None
        assert "href" not in guide.to_dict()

    def test__empty_folder__rendered_as_file(self) -> None:
        nodes = parse_page_map([{"route": "/empty", "title": "Empty", "children": []}])

        (item,) = NavigationTreeRenderer(TreeStateStore()).render(nodes, "/empty")

        assert item.kind == "file"
        assert item.active is True

    def test__unmatched_path__no_active_node(self, scenario: list[Node]) -> None:
        items = _by_route(NavigationTreeRenderer(TreeStateStore()).render(scenario, "/missing"))

        assert not any(item.active for item in items.values())


class TestNavigationTreeRendererFiles:
    """Leaf rendering."""

    def test__active_file__gets_anchors(self, scenario: list[Node]) -> None:
        renderer = NavigationTreeRenderer(TreeStateStore())

        items = _by_route(
            renderer.render(
                scenario,
                "/guide/intro",
                ["Intro", "Usage", "Intro"],
                {"usage": {"isActive": True}},
            ),
        )

        intro = items["/guide/intro"]
        assert [a.slug for a in intro.anchors] == ["intro", "usage", "intro-1"]
        assert intro.active_anchor == 1

    def test__inactive_file__no_anchors(self, scenario: list[Node]) -> None:
        renderer = NavigationTreeRenderer(TreeStateStore())

        items = _by_route(renderer.render(scenario, "/guide/intro", ["Intro"]))

        assert items["/guide/setup/a"].anchors == []
        assert items["/guide/setup/a"].active_anchor is None

    def test__active_file_no_headings__plain_link(self, scenario: list[Node]) -> None:
        renderer = NavigationTreeRenderer(TreeStateStore())

        items = _by_route(renderer.render(scenario, "/guide/intro"))

        assert items["/guide/intro"].to_dict() == {
            "title": "Intro",
            "route": "/guide/intro",
            "kind": "file",
            "active": True,
            "href": "/guide/intro",
        }

    def test__new_window_link__has_target(self, nodes: list[Node]) -> None:
        items = _by_route(NavigationTreeRenderer(TreeStateStore()).render(nodes, "/"))

        data = items["/github"].to_dict()
        assert data["href"] == "https://github.com/example/docs"
        assert data["target"] == "_blank"
        assert data["rel"] == "noopener noreferrer"


class TestSidebar:
    """Tests for Sidebar views."""

    def test__desktop__uses_pruned_directories(self, nodes: list[Node]) -> None:
        sidebar = Sidebar(TreeStateStore(), nodes)

        result = sidebar.render("/")

        assert [item.route for item in result.desktop] == ["/", "/guide", "/github"]
        assert [item.route for item in result.mobile] == ["/", "/guide", "/blog", "/github"]

    def test__float_toc__hides_desktop_anchors_only(self, nodes: list[Node]) -> None:
        sidebar = Sidebar(TreeStateStore(), nodes, float_toc=True)

        result = sidebar.render("/guide/intro", headings=[_heading("Install")])

        desktop = _by_route(result.desktop)["/guide/intro"]
        mobile = _by_route(result.mobile)["/guide/intro"]
        assert desktop.anchors == []
        assert [a.slug for a in mobile.anchors] == ["install"]

    def test__no_float_toc__anchors_in_both_views(self, nodes: list[Node]) -> None:
        sidebar = Sidebar(TreeStateStore(), nodes)

        result = sidebar.render("/guide/intro", headings=[_heading("Install")])

        assert _by_route(result.desktop)["/guide/intro"].anchors
        assert _by_route(result.mobile)["/guide/intro"].anchors

    def test__localized_path__resolved(self, nodes: list[Node]) -> None:
        sidebar = Sidebar(TreeStateStore(), nodes)

        result = sidebar.render("/guide.en/intro#setup", locale="en")

        assert result.route == "/guide/intro"
        assert _by_route(result.desktop)["/guide/intro"].active

    def test__toggle_in_one_view__updates_other_view(self, nodes: list[Node]) -> None:
        """A click re-evaluates every view reading the route."""
        sidebar = Sidebar(TreeStateStore(), nodes)
        sidebar.render("/")

        outcome = sidebar.click("/guide", "/", disclosure=True)
        result = sidebar.render("/")

        assert outcome is not None
        assert outcome.expanded is False
        assert _by_route(result.desktop)["/guide"].open is False
        assert _by_route(result.mobile)["/guide"].open is False

    def test__label_click_on_inactive_page_folder__opens_and_navigates(
        self,
        nodes: list[Node],
    ) -> None:
        store = TreeStateStore({"/guide": False})
        sidebar = Sidebar(store, nodes)

        outcome = sidebar.click("/guide", "/")

        assert outcome is not None
        assert outcome.action is ToggleAction.OPEN
        assert outcome.navigate_to == "/guide"
        assert store.get("/guide") is True

    def test__click_on_active_folder__collapse_survives_render(self, nodes: list[Node]) -> None:
        """Collapsing the active folder sticks until it is clicked again."""
        store = TreeStateStore({"/guide": False})
        sidebar = Sidebar(store, nodes)
        sidebar.render("/guide/")

        outcome = sidebar.click("/guide", "/guide/")
        result = sidebar.render("/guide/")

        assert outcome is not None
        assert outcome.action is ToggleAction.TOGGLE
        assert outcome.expanded is False
        assert _by_route(result.desktop)["/guide"].open is False
        assert _by_route(result.mobile)["/guide"].open is False
        assert _by_route(result.mobile)["/guide"].children is None

        reopened = sidebar.click("/guide", "/guide/")
        result = sidebar.render("/guide/")

        assert reopened is not None
        assert reopened.expanded is True
        assert _by_route(result.desktop)["/guide"].open is True
        assert _by_route(result.mobile)["/guide"].open is True

    def test__click_without_render__toggles_stored_state(self, nodes: list[Node]) -> None:
        store = TreeStateStore({"/guide": False})
        sidebar = Sidebar(store, nodes)

        outcome = sidebar.click("/guide", "/guide/")

        assert outcome is not None
        assert outcome.action is ToggleAction.TOGGLE
        assert outcome.expanded is True

    def test__click_on_file_or_unknown__returns_none(self, nodes: list[Node]) -> None:
        sidebar = Sidebar(TreeStateStore(), nodes)

        assert sidebar.click("/guide/intro", "/") is None
        assert sidebar.click("/nope", "/") is None

    def test__set_nodes__keeps_state(self, nodes: list[Node]) -> None:
        store = TreeStateStore({"/guide": False})
        sidebar = Sidebar(store, nodes)

        sidebar.set_nodes(nodes[:2])
        result = sidebar.render("/")

        assert [item.route for item in result.mobile] == ["/", "/guide"]
        assert _by_route(result.mobile)["/guide"].open is False

    def test__to_dict__shape(self, nodes: list[Node]) -> None:
        data = Sidebar(TreeStateStore(), nodes).render("/guide").to_dict()

        assert data["activeRoute"] == "/guide"
        guide = data["desktop"]["items"][1]
        assert guide["kind"] == "folder"
        assert guide["active"] is True
        assert guide["open"] is True
        assert guide["href"] == "/guide"
        assert [child["route"] for child in guide["children"]] == ["/guide/intro", "/guide/setup"]


class TestSidebarView:
    """Tests for SidebarView caching."""

    def test__unchanged_inputs__cached_output(self, scenario: list[Node]) -> None:
        view = SidebarView("desktop", TreeStateStore(), scenario)

        first = view.render("/guide/intro")
        second = view.render("/guide/intro")

        assert first is not second
        assert first[0] is second[0]
        assert not view.stale

    def test__cached_output__caller_mutation_not_shared(self, scenario: list[Node]) -> None:
        view = SidebarView("desktop", TreeStateStore(), scenario)

        first = view.render("/guide/intro")
        first.clear()
        second = view.render("/guide/intro")

        assert [item.route for item in second] == ["/guide"]

    def test__store_change__marks_stale(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        view = SidebarView("desktop", store, scenario)
        first = view.render("/guide/intro")

        store.set("/guide", False)

        assert view.stale
        second = view.render("/guide/intro")
        assert second is not first
        assert second[0].open is False

    def test__own_force_expand__not_stale_after_render(self, scenario: list[Node]) -> None:
        view = SidebarView("mobile", TreeStateStore(), scenario)

        view.render("/guide")

        assert not view.stale

    def test__close__stops_listening(self, scenario: list[Node]) -> None:
        store = TreeStateStore()
        view = SidebarView("desktop", store, scenario)
        view.render("/")

        view.close()
        store.set("/guide", False)

        assert not view.stale

    def test__hidden_anchors__ignored_in_cache_key(self, scenario: list[Node]) -> None:
        view = SidebarView("desktop", TreeStateStore(), scenario, show_anchors=False)

        first = view.render("/guide/intro", ["A"])
        second = view.render("/guide/intro", ["B"])

        assert first[0] is second[0]
