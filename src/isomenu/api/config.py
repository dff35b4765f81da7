"""Config API endpoint."""

from aiohttp import web

from isomenu.app_keys import config_key


def create_config_routes() -> list[web.RouteDef]:
    return [web.get("/api/config", get_config)]


async def get_config(request: web.Request) -> web.Response:
    config = request.app[config_key]
    return web.json_response(
        {
            "homeRoute": config.menu.home_route,
            "railMode": config.navigation.rail_mode,
        }
    )
