"""Icon API endpoint.

Serves menu icons as SVG. Never fails: unknown keys and a broken icon set
are answered with the fallback glyph.
"""

from aiohttp import web

from isomenu.app_keys import icons_key


def create_icons_routes() -> list[web.RouteDef]:
    return [web.get("/api/icons/{key}", get_icon)]


async def get_icon(request: web.Request) -> web.Response:
    key = request.match_info["key"].removesuffix(".svg")
    class_name = request.query.get("class", "h-6 w-6")

    icon = await request.app[icons_key].resolve(key)

    headers = {"Cache-Control": "public, max-age=3600"}
    if icon.fallback:
        headers = {"Cache-Control": "no-cache", "X-Icon-Fallback": "1"}
    return web.Response(
        text=icon.to_svg(class_name),
        content_type="image/svg+xml",
        headers=headers,
    )
