"""Shared test fixtures."""

import json
from pathlib import Path

import pytest
from docnav.config import Config, DocsConfig, LiveReloadConfig, MenuConfig, ServerConfig
from docnav.core.pages import Node, parse_page_map

PAGE_MAP = [
    {"route": "/", "title": "Introduction"},
    {
        "route": "/guide",
        "title": "Guide",
        "hasOwnPage": True,
        "children": [
            {"route": "/guide/intro", "title": "Intro"},
            {
                "route": "/guide/setup",
                "title": "Setup",
                "children": [{"route": "/guide/setup/a", "title": "Step A"}],
            },
        ],
    },
    {"route": "/blog", "title": "Blog", "navbar": True},
    {"route": "/drafts", "title": "Drafts", "hidden": True},
    {
        "route": "/github",
        "title": "GitHub",
        "href": "https://github.com/example/docs",
        "newWindow": True,
    },
]


@pytest.fixture
def page_map_data() -> list[dict[str, object]]:
    return json.loads(json.dumps(PAGE_MAP))


@pytest.fixture
def nodes(page_map_data: list[dict[str, object]]) -> list[Node]:
    return parse_page_map(page_map_data)


@pytest.fixture
def page_map_file(tmp_path: Path, page_map_data: list[dict[str, object]]) -> Path:
    path = tmp_path / "pagemap.json"
    path.write_text(json.dumps(page_map_data))
    return path


@pytest.fixture
def test_config(page_map_file: Path) -> Config:
    """Create a test configuration pointing at the sample page map."""
    return Config(
        server=ServerConfig(),
        docs=DocsConfig(page_map=page_map_file),
        menu=MenuConfig(),
        live_reload=LiveReloadConfig(enabled=False),
    )
