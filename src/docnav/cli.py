"""CLI interface for docnav.

Command-line tool for serving and previewing documentation sidebars.
"""

import json
import logging
import sys
from pathlib import Path

import click

from docnav.config import Config
from docnav.core.navigation import Sidebar
from docnav.core.pages import load_page_map
from docnav.core.slugger import Slugger
from docnav.core.state import TreeStateStore


@click.group()
def cli() -> None:
    """docnav - navigation sidebars for documentation sites."""


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)
@click.option(
    "--page-map",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="Page map JSON file (overrides config)",
)
@click.option(
    "--host",
    default=None,
    help="Host to bind to (overrides config)",
)
@click.option(
    "--port",
    "-p",
    type=int,
    default=None,
    help="Port to bind to (overrides config)",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output (debug logging)",
)
@click.option(
    "--live-reload/--no-live-reload",
    default=None,
    help="Enable/disable page map live reload (overrides config, default: enabled)",
)
def serve(
    config_path: Path | None,
    page_map: Path | None,
    host: str | None,
    port: int | None,
    verbose: bool,
    live_reload: bool | None,
) -> None:
    """Start the sidebar server."""
    from docnav.server import run_server

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)

    try:
        config = Config.load(config_path).with_overrides(
            host=host,
            port=port,
            page_map=page_map,
            live_reload_enabled=live_reload,
        )
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(f"Starting server on {config.server.host}:{config.server.port}")
    click.echo(f"Page map: {config.docs.page_map}")
    if config.menu.default_collapsed:
        click.echo("Folders: collapsed by default")
    if config.live_reload.enabled:
        click.echo("Live reload: enabled")
    else:
        click.echo("Live reload: disabled")

    try:
        run_server(config, verbose=verbose)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)


@cli.command()
@click.argument(
    "page_map",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    required=False,
)
@click.option(
    "--path",
    "current_path",
    required=True,
    help="Current page path (e.g., /guide/setup#install)",
)
@click.option(
    "--locale",
    default=None,
    help="Active locale, stripped from localized routes",
)
@click.option(
    "--view",
    type=click.Choice(["desktop", "mobile"]),
    default="desktop",
    help="Sidebar view to print (default: desktop)",
)
@click.option(
    "--headings",
    "headings_file",
    type=click.Path(exists=True, path_type=Path, dir_okay=False),
    default=None,
    help="JSON file with heading descriptors of the current page",
)
@click.option(
    "--collapsed/--expanded",
    "default_collapsed",
    default=None,
    help="Start folders collapsed or expanded (overrides config)",
)
@click.option(
    "--float-toc/--no-float-toc",
    default=None,
    help="Hide anchors in the desktop sidebar (overrides config)",
)
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: auto-discover docnav.toml)",
)
def render(
    page_map: Path | None,
    current_path: str,
    locale: str | None,
    view: str,
    headings_file: Path | None,
    default_collapsed: bool | None,
    float_toc: bool | None,
    config_path: Path | None,
) -> None:
    """Print the rendered sidebar for a path as JSON."""
    try:
        config = Config.load(config_path).with_overrides(
            page_map=page_map,
            default_collapsed=default_collapsed,
            float_toc=float_toc,
        )
        nodes = load_page_map(config.docs.page_map)
        headings = _load_headings(headings_file)
    except (FileNotFoundError, ValueError) as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    sidebar = Sidebar(
        TreeStateStore(),
        nodes,
        default_collapsed=config.menu.default_collapsed,
        float_toc=config.menu.float_toc,
        expand_ancestors=config.menu.expand_ancestors,
    )
    result = sidebar.render(current_path, locale=locale, headings=headings)
    items = result.desktop if view == "desktop" else result.mobile

    click.echo(json.dumps({"items": [item.to_dict() for item in items]}, indent=2))


@cli.command()
@click.argument("texts", nargs=-1, required=True)
def slugs(texts: tuple[str, ...]) -> None:
    """Print the anchor slug of each heading text, one per line."""
    slugger = Slugger()
    for text in texts:
        click.echo(slugger.slug(text))


def _load_headings(path: Path | None) -> list[dict[str, object]]:
    """Load heading descriptors from a JSON file.

    Args:
        path: JSON file containing a list of heading objects, or None

    Returns:
        Heading descriptors, empty when no file is given

    Raises:
        ValueError: If the file is not a list of objects
    """
    if path is None:
        return []
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Headings file is not valid JSON: {e}") from e
    if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
        raise ValueError("Headings file must contain a list of objects")
    return data
