"""Navigation API endpoints.

Provides the raw page map and a single node lookup.
"""

from aiohttp import web

from docnav.app_keys import sidebar_key
from docnav.core.pages import find_node


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/navigation", get_navigation),
        web.get("/api/navigation/{path:.*}", get_navigation_node),
    ]


async def get_navigation(request: web.Request) -> web.Response:
    sidebar = request.app[sidebar_key]
    return web.json_response({"items": [node.to_dict() for node in sidebar.nodes]})


async def get_navigation_node(request: web.Request) -> web.Response:
    path = request.match_info["path"]
    sidebar = request.app[sidebar_key]

    normalized = path if path.startswith("/") else f"/{path}"
    node = find_node(sidebar.nodes, normalized)
    if node is None:
        return web.json_response(
            {"error": "Node not found", "path": path},
            status=404,
        )

    return web.json_response(node.to_dict())
