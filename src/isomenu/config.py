"""Configuration management for isomenu.

Supports TOML configuration format with auto-discovery.
"""

import tomllib
from dataclasses import dataclass, field, replace
from pathlib import Path

from isomenu.resources import default_icons_path, default_menu_path

CONFIG_FILENAME = "isomenu.toml"


@dataclass
class ServerConfig:
    """Server configuration."""

    host: str = "127.0.0.1"
    port: int = 8080


@dataclass
class MenuConfig:
    """Menu source configuration."""

    file: Path = field(default_factory=default_menu_path)
    home_route: str = "dashboard"


@dataclass
class IconsConfig:
    """Icon set configuration."""

    file: Path = field(default_factory=default_icons_path)


@dataclass
class NavigationConfig:
    """Navigation display defaults."""

    rail_mode: bool = False


@dataclass
class SessionsConfig:
    """Navigation session store configuration."""

    max_sessions: int = 256


@dataclass
class Config:
    """Application configuration."""

    server: ServerConfig
    menu: MenuConfig
    icons: IconsConfig
    navigation: NavigationConfig
    sessions: SessionsConfig
    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path | None = None) -> "Config":
        """Load configuration from file.

        If config_path is provided, loads from that file.
        Otherwise, searches for isomenu.toml in current directory and parents.

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
            return cls.default()

        return cls._load_from_file(discovered_path)

    @classmethod
    def _discover_config(cls) -> Path | None:
        """Search for config file in current directory and parents.

        Returns:
            Path to config file or None if not found
        """
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
    def default(cls) -> "Config":
        """Create config with all defaults."""
        return cls(
            server=ServerConfig(),
            menu=MenuConfig(),
            icons=IconsConfig(),
            navigation=NavigationConfig(),
            sessions=SessionsConfig(),
        )

    @classmethod
    def _load_from_file(cls, path: Path) -> "Config":
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

        if not isinstance(data, dict):
            raise ValueError("Configuration must be a dictionary")

        config_dir = path.parent

        return cls(
            server=cls._parse_server(data.get("server")),
            menu=cls._parse_menu(data.get("menu"), config_dir),
            icons=cls._parse_icons(data.get("icons"), config_dir),
            navigation=cls._parse_navigation(data.get("navigation")),
            sessions=cls._parse_sessions(data.get("sessions")),
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
    def _parse_menu(cls, data: object, config_dir: Path) -> MenuConfig:
        """Parse menu configuration section.

        Args:
            data: Raw menu section data
            config_dir: Directory containing config file (for relative paths)

        Returns:
            MenuConfig instance
        """
        if data is None:
            return MenuConfig()

        if not isinstance(data, dict):
            raise ValueError("menu section must be a dictionary")

        menu = MenuConfig()

        file = data.get("file")
        if file is not None:
            if not isinstance(file, str):
                raise ValueError("menu.file must be a string")
            menu = replace(menu, file=config_dir / file)

        home_route = data.get("home_route", "dashboard")
        if not isinstance(home_route, str):
            raise ValueError("menu.home_route must be a string")

        return replace(menu, home_route=home_route)

    @classmethod
    def _parse_icons(cls, data: object, config_dir: Path) -> IconsConfig:
        if data is None:
            return IconsConfig()

        if not isinstance(data, dict):
            raise ValueError("icons section must be a dictionary")

        file = data.get("file")
        if file is None:
            return IconsConfig()
        if not isinstance(file, str):
            raise ValueError("icons.file must be a string")

        return IconsConfig(file=config_dir / file)

    @classmethod
    def _parse_navigation(cls, data: object) -> NavigationConfig:
        if data is None:
            return NavigationConfig()

        if not isinstance(data, dict):
            raise ValueError("navigation section must be a dictionary")

        rail_mode = data.get("rail_mode", False)
        if not isinstance(rail_mode, bool):
            raise ValueError("navigation.rail_mode must be a boolean")

        return NavigationConfig(rail_mode=rail_mode)

    @classmethod
    def _parse_sessions(cls, data: object) -> SessionsConfig:
        if data is None:
            return SessionsConfig()

        if not isinstance(data, dict):
            raise ValueError("sessions section must be a dictionary")

        max_sessions = data.get("max_sessions", 256)
        if not isinstance(max_sessions, int) or isinstance(max_sessions, bool):
            raise ValueError("sessions.max_sessions must be an integer")
        if max_sessions < 1:
            raise ValueError("sessions.max_sessions must be positive")

        return SessionsConfig(max_sessions=max_sessions)

    def with_overrides(
        self,
        *,
        host: str | None = None,
        port: int | None = None,
        menu_file: Path | None = None,
        icons_file: Path | None = None,
        rail_mode: bool | None = None,
    ) -> "Config":
        """Create a new Config with CLI overrides applied.

        Only non-None values override the existing config. The original
        Config is not modified.

        Args:
            host: Override server.host
            port: Override server.port
            menu_file: Override menu.file
            icons_file: Override icons.file
            rail_mode: Override navigation.rail_mode

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

        menu = self.menu
        if menu_file is not None:
            menu = replace(self.menu, file=menu_file)

        icons = self.icons
        if icons_file is not None:
            icons = replace(self.icons, file=icons_file)

        navigation = self.navigation
        if rail_mode is not None:
            navigation = replace(self.navigation, rail_mode=rail_mode)

        return replace(
            self,
            server=server,
            menu=menu,
            icons=icons,
            navigation=navigation,
        )
