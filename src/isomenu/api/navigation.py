"""Navigation API endpoints.

Provides the static menu, stateless filtered navigation and breadcrumbs.
The viewer context is passed as query parameters on every request.
"""

from aiohttp import web

from isomenu.app_keys import config_key, menu_key
from isomenu.core.active import active_route_ids
from isomenu.core.controller import NavigationView, render_tree
from isomenu.core.filters import filter_by_role, filter_by_search
from isomenu.core.index import MenuIndex
from isomenu.core.types import Role


def create_navigation_routes() -> list[web.RouteDef]:
    return [
        web.get("/api/menu", get_menu),
        web.get("/api/navigation", get_navigation),
        web.get("/api/breadcrumbs", get_breadcrumbs),
    ]


async def get_menu(request: web.Request) -> web.Response:
    menu = request.app[menu_key]
    return web.json_response({"items": [node.to_dict() for node in menu]})


async def get_navigation(request: web.Request) -> web.Response:
    menu = request.app[menu_key]
    config = request.app[config_key]
    roles = parse_roles(request.query.get("roles", ""))
    route = request.query.get("route", "")
    query = request.query.get("q", "")
    rail_mode = parse_flag(request.query.get("rail"), config.navigation.rail_mode)
    if rail_mode is None:
        return web.json_response({"error": "rail must be true or false"}, status=400)

    visible = filter_by_role(menu, roles)
    active = active_route_ids(visible, route)
    # Without session state every parent starts from its default: open when active
    items = render_tree(
        filter_by_search(visible, query),
        active,
        lambda _, is_active: is_active,
        rail_mode=rail_mode,
    )

    view = NavigationView(
        items=items,
        query=query,
        rail_mode=rail_mode,
        current_route=route,
        roles=roles,
    )
    return web.json_response(view.to_dict())


async def get_breadcrumbs(request: web.Request) -> web.Response:
    menu = request.app[menu_key]
    config = request.app[config_key]
    roles = parse_roles(request.query.get("roles", ""))
    route = request.query.get("route", "")

    index = MenuIndex.from_nodes(filter_by_role(menu, roles))
    breadcrumbs = index.get_breadcrumbs(route, config.menu.home_route)
    return web.json_response({"breadcrumbs": [b.to_dict() for b in breadcrumbs]})


def parse_roles(value: str) -> frozenset[Role]:
    """Parse a comma-separated role list, ignoring blanks."""
    return frozenset(Role(part.strip()) for part in value.split(",") if part.strip())


def parse_flag(value: str | None, default: bool) -> bool | None:
    """Parse a boolean query parameter, None if the value is not recognized."""
    if value is None or value == "":
        return default
    lowered = value.lower()
    if lowered in ("1", "true", "yes"):
        return True
    if lowered in ("0", "false", "no"):
        return False
    return None
