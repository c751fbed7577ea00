"""aiohttp server for docnav.

Application factory and route registration for standalone server mode.
"""

import logging

from aiohttp import web

from docnav.api.config import create_config_routes
from docnav.api.navigation import create_navigation_routes
from docnav.api.sidebar import create_sidebar_routes
from docnav.app_keys import (
    config_key,
    hub_key,
    live_reload_key,
    sidebar_key,
    store_key,
    verbose_key,
)
from docnav.config import Config
from docnav.core.navigation import Sidebar
from docnav.core.pages import load_page_map
from docnav.core.state import TreeStateStore
from docnav.live.hub import ConnectionHub, create_hub_routes
from docnav.live.reload import LiveReloadManager

logger = logging.getLogger(__name__)


def create_app(config: Config, *, verbose: bool = False) -> web.Application:
    """Create aiohttp application.

    Args:
        config: Application configuration
        verbose: Log every rendered sidebar

    Returns:
        Configured aiohttp application

    Raises:
        FileNotFoundError: If the page map doesn't exist
        ValueError: If the page map is invalid
    """
    app = web.Application()

    nodes = load_page_map(config.docs.page_map)
    logger.info(f"Loaded page map from {config.docs.page_map}")

    store = TreeStateStore()
    hub = ConnectionHub()
    store.subscribe(hub.on_tree_state_change)

    sidebar = Sidebar(
        store,
        nodes,
        default_collapsed=config.menu.default_collapsed,
        float_toc=config.menu.float_toc,
        expand_ancestors=config.menu.expand_ancestors,
    )

    app[config_key] = config
    app[store_key] = store
    app[hub_key] = hub
    app[sidebar_key] = sidebar
    app[verbose_key] = verbose

    app.router.add_routes(create_config_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_sidebar_routes())
    app.router.add_routes(create_hub_routes(hub))

    if config.live_reload.enabled:
        app[live_reload_key] = LiveReloadManager(config.docs.page_map, sidebar, hub)
        app.on_startup.append(_start_live_reload)
        app.on_cleanup.append(_stop_live_reload)

    app.on_shutdown.append(_close_connections)

    return app


async def _start_live_reload(app: web.Application) -> None:
    """Start live reload on application startup."""
    await app[live_reload_key].start()


async def _stop_live_reload(app: web.Application) -> None:
    """Stop live reload on application cleanup."""
    await app[live_reload_key].stop()


async def _close_connections(app: web.Application) -> None:
    await app[hub_key].close()
    app[sidebar_key].close()


def run_server(config: Config, *, verbose: bool = False) -> None:
    """Run the server.

    Args:
        config: Application configuration
        verbose: Log every rendered sidebar
    """
    app = create_app(config, verbose=verbose)
    web.run_app(app, host=config.server.host, port=config.server.port)
