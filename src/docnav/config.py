"""Configuration management for docnav.

Supports TOML configuration format with auto-discovery.
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

CONFIG_FILENAME = "docnav.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class DocsConfig:
    """Documentation configuration."""

    page_map: Path = field(default_factory=lambda: Path("pagemap.json"))


@dataclass
class MenuConfig:
    """Sidebar menu configuration."""

    default_collapsed: bool = False
    float_toc: bool = False
    expand_ancestors: bool = False


@dataclass
class LiveReloadConfig:
    """Live reload configuration."""

    enabled: bool = True


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    docs: DocsConfig
    menu: MenuConfig
    live_reload: LiveReloadConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> Config:
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for docnav.toml in current directory and parents.

        Args:
            config_path: Optional explicit path to config file

        Returns:
            Config instance with defaults for missing sections

        Raises:
            FileNotFoundError: If explicit config_path doesn't exist
            ValueError: If configuration is invalid
        """
        if config_path is not None:
            if not config_path.exists():
                raise FileNotFoundError(f"Configuration file not found: {config_path}")
            return cls._load_from_file(config_path)

        discovered_path = cls._discover_config()
        if discovered_path is None:
            return cls._default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents."""
        current = Path.cwd()
        while True:
            candidate = current / CONFIG_FILENAME
            if candidate.exists():
                return candidate
            parent = current.parent
            if parent == current:
                return None
            current = parent

    @classmethod
    def _default(cls) -> Config:
        return cls(
            server=ServerConfig(),
            docs=DocsConfig(),
            menu=MenuConfig(),
            live_reload=LiveReloadConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> Config:
        """Load configuration from a specific file.

        Args:
            path: Path to TOML configuration file

        Returns:
            Config instance

        Raises:
            ValueError: If configuration is invalid
        """
        with path.open("rb") as f:
            data = tomllib.load(f)

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            docs=cls._parse_docs(data.get("docs"), config_dir),
            menu=cls._parse_menu(data.get("menu")),
            live_reload=cls._parse_live_reload(data.get("live_reload")),
            config_path=path,
        )

    @classmethod
    def _parse_server(cls, data: object) -> ServerConfig:
        if data is None:
            return ServerConfig()

        if not isinstance(data, dict):
            raise ValueError("server section must be a dictionary")

        host = data.get("host", "127.0.0.1")
        if not isinstance(host, str):
            raise ValueError("server.host must be a string")

        port = data.get("port", 8080)
        if not isinstance(port, int) or isinstance(port, bool):
            raise ValueError("server.port must be an integer")

        return ServerConfig(host=host, port=port)

    @classmethod
    def _parse_docs(cls, data: object, config_dir: Path) -> DocsConfig:
        """Parse docs configuration section.

        Args:
            data: Raw docs section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            DocsConfig instance
        """
        if data is None:
            return DocsConfig(page_map=config_dir / "pagemap.json")

        if not isinstance(data, dict):
            raise ValueError("docs section must be a dictionary")

        page_map = data.get("page_map", "pagemap.json")
        if not isinstance(page_map, str):
            raise ValueError("docs.page_map must be a string")

        return DocsConfig(page_map=config_dir / page_map)

    @classmethod
    def _parse_menu(cls, data: object) -> MenuConfig:
        """Parse menu configuration section.

        Args:
            data: Raw menu section data

        Returns:
            MenuConfig instance
        """
        if data is None:
            return MenuConfig()

        if not isinstance(data, dict):
            raise ValueError("menu section must be a dictionary")

        flags: dict[str, bool] = {}
        for key in ("default_collapsed", "float_toc", "expand_ancestors"):
            value = data.get(key, False)
            if not isinstance(value, bool):
                raise ValueError(f"menu.{key} must be a boolean")
            flags[key] = value

        return MenuConfig(**flags)

    @classmethod
    def _parse_live_reload(cls, data: object) -> LiveReloadConfig:
        if data is None:
            return LiveReloadConfig()

        if not isinstance(data, dict):
            raise ValueError("live_reload section must be a dictionary")

        enabled = data.get("enabled", True)
        if not isinstance(enabled, bool):
            raise ValueError("live_reload.enabled must be a boolean")

        return LiveReloadConfig(enabled=enabled)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        page_map: Path | None = None,
        default_collapsed: bool | None = None,
        float_toc: bool | None = None,
        live_reload_enabled: bool | None = None,
    ) -> Config:
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            page_map: Override docs.page_map
            default_collapsed: Override menu.default_collapsed
            float_toc: Override menu.float_toc
            live_reload_enabled: Override live_reload.enabled

        Returns:
            New Config instance with overrides applied
        """
        server = self.server
        if host is not None or port is not None:
            server = replace(
                self.server,
                host=host if host is not None else self.server.host,
                port=port if port is not None else self.server.port,
            )

        docs = self.docs
        if page_map is not None:
            docs = replace(self.docs, page_map=page_map)

        menu = self.menu
        if default_collapsed is not None or float_toc is not None:
            menu = replace(
                self.menu,
                default_collapsed=(
                    default_collapsed
                    if default_collapsed is not None
                    else self.menu.default_collapsed
                ),
                float_toc=float_toc if float_toc is not None else self.menu.float_toc,
            )

        live_reload = self.live_reload
        if live_reload_enabled is not None:
            live_reload = replace(self.live_reload, enabled=live_reload_enabled)

        return replace(
            self,
            server=server,
            docs=docs,
            menu=menu,
            live_reload=live_reload,
        )
