"""aiohttp server for isomenu.

Application factory and route registration for standalone server mode.
"""

import logging

from aiohttp import web

from isomenu.api.config import create_config_routes
from isomenu.api.icons import create_icons_routes
from isomenu.api.navigation import create_navigation_routes
from isomenu.api.sessions import create_sessions_routes
from isomenu.app_keys import config_key, icons_key, menu_key, sessions_key
from isomenu.config import Config
from isomenu.core.icons import IconCache
from isomenu.core.menu import MenuNode, load_menu
from isomenu.sessions import SessionStore

logger = logging.getLogger(__name__)


def create_app(config: Config, *, menu: tuple[MenuNode, ...] | None = None) -> web.Application:
    """Create aiohttp application.

    The menu is loaded once here and shared read-only by every request.

    Args:
        config: Application configuration
        menu: Preloaded menu tree (default: load from config.menu.file)

    Returns:
        Configured aiohttp application

    Raises:
        FileNotFoundError: If the menu file doesn't exist
        MenuConfigError: If the menu file is invalid
    """
    if menu is None:
        menu = load_menu(config.menu.file)

    app = web.Application()

    app[config_key] = config
    app[menu_key] = menu
    app[icons_key] = IconCache(config.icons.file)
    app[sessions_key] = SessionStore(menu, max_sessions=config.sessions.max_sessions)

    app.router.add_routes(create_config_routes())
    app.router.add_routes(create_navigation_routes())
    app.router.add_routes(create_sessions_routes())
    app.router.add_routes(create_icons_routes())

    return app


def run_server(config: Config) -> None:
    """Run the server.

    Args:
        config: Application configuration
    """
    app = create_app(config)
    logger.info(f"Serving navigation on {config.server.host}:{config.server.port}")
    web.run_app(app, host=config.server.host, port=config.server.port, print=None)
