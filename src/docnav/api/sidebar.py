"""Sidebar API endpoints.

Renders the desktop and mobile sidebars for the visitor's current path and
applies folder clicks to the shared tree state.
"""

import json
import logging
from typing import Any

from aiohttp import web

from docnav.app_keys import sidebar_key, store_key, verbose_key

logger = logging.getLogger(__name__)


class BadRequestError(ValueError):
    """Invalid request body."""


def create_sidebar_routes() -> list[web.RouteDef]:
    return [
        web.post("/api/sidebar", render_sidebar),
        web.post("/api/sidebar/toggle", toggle_folder),
        web.get("/api/sidebar/state", get_state),
    ]


async def render_sidebar(request: web.Request) -> web.Response:
    sidebar = request.app[sidebar_key]

    try:
        body = await _read_body(request)
        path = _require_str(body, "path")
        locale = _optional_str(body, "locale")
        headings = body.get("headings", [])
        if not isinstance(headings, list) or not all(isinstance(h, dict) for h in headings):
            raise BadRequestError("headings must be a list of objects")
        active_anchor = body.get("activeAnchor", {})
        if not isinstance(active_anchor, dict):
            raise BadRequestError("activeAnchor must be an object")
    except BadRequestError as e:
        return web.json_response({"error": str(e)}, status=400)

    result = sidebar.render(
        path,
        locale=locale,
        headings=headings,
        active_anchor=active_anchor,
    )
    if request.app[verbose_key]:
        logger.info(f"Rendered sidebar for {path} (route {result.route})")

    return web.json_response(result.to_dict())


async def toggle_folder(request: web.Request) -> web.Response:
    sidebar = request.app[sidebar_key]

    try:
        body = await _read_body(request)
        route = _require_str(body, "route")
        path = _require_str(body, "path")
        locale = _optional_str(body, "locale")
        disclosure = body.get("disclosure", False)
        if not isinstance(disclosure, bool):
            raise BadRequestError("disclosure must be a boolean")
    except BadRequestError as e:
        return web.json_response({"error": str(e)}, status=400)

    outcome = sidebar.click(route, path, locale=locale, disclosure=disclosure)
    if outcome is None:
        return web.json_response(
            {"error": "Folder not found", "route": route},
            status=404,
        )

    return web.json_response(
        {
            "route": route,
            "action": outcome.action.value,
            "expanded": outcome.expanded,
            "navigateTo": outcome.navigate_to,
        },
    )


async def get_state(request: web.Request) -> web.Response:
    store = request.app[store_key]
    return web.json_response({"state": store.snapshot()})


async def _read_body(request: web.Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except json.JSONDecodeError as e:
        raise BadRequestError(f"Invalid JSON body: {e}") from e
    if not isinstance(body, dict):
        raise BadRequestError("Request body must be an object")
    return body


def _require_str(body: dict[str, Any], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str):
        raise BadRequestError(f"{key} must be a string")
    return value


def _optional_str(body: dict[str, Any], key: str) -> str | None:
    value = body.get(key)
    if value is not None and not isinstance(value, str):
        raise BadRequestError(f"{key} must be a string")
    return value
