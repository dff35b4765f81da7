"""Role-filtered, searchable navigation menu for DocManager ISO.

This package provides the menu data model, role and search filters, active
path resolution and a stateful navigation controller, plus an aiohttp host.
"""

from .core.active import active_route_ids, is_active
from .core.controller import NavigationController, NavigationView, RenderNode
from .core.filters import filter_by_role, filter_by_search, normalize_text
from .core.icons import IconCache
from .core.index import MenuIndex
from .core.menu import Divider, Item, MenuConfigError, load_menu

__version__ = "0.1.0"

__all__ = [
    "Divider",
    "IconCache",
    "Item",
    "MenuConfigError",
    "MenuIndex",
    "NavigationController",
    "NavigationView",
    "RenderNode",
    "active_route_ids",
    "filter_by_role",
    "filter_by_search",
    "is_active",
    "load_menu",
    "normalize_text",
]
