"""Navigation session endpoints.

Each session holds a NavigationController so accordion state, rail mode
and the search query survive between requests.
"""

import json
import logging

from aiohttp import web

from isomenu.app_keys import config_key, sessions_key
from isomenu.core.types import Role
from isomenu.sessions import NavigationSession

logger = logging.getLogger(__name__)


def create_sessions_routes() -> list[web.RouteDef]:
    return [
        web.post("/api/sessions", create_session),
        web.get("/api/sessions/{session_id}", get_session),
        web.delete("/api/sessions/{session_id}", delete_session),
        web.post("/api/sessions/{session_id}/context", update_context),
        web.post("/api/sessions/{session_id}/search", update_search),
        web.post("/api/sessions/{session_id}/toggle", toggle_item),
        web.post("/api/sessions/{session_id}/select", select_item),
        web.post("/api/sessions/{session_id}/rail", update_rail_mode),
    ]


class BadRequest(Exception):
    """Request body failed validation."""


async def create_session(request: web.Request) -> web.Response:
    config = request.app[config_key]
    try:
        body = await _read_body(request)
        roles = _get_roles(body)
        route = _get_str(body, "route", "") or ""
        rail_mode = bool(_get_bool(body, "railMode", config.navigation.rail_mode))
    except BadRequest as e:
        return _error(str(e), status=400)

    session = request.app[sessions_key].create(
        roles=roles if roles is not None else (),
        current_route=route,
        rail_mode=rail_mode,
    )
    return web.json_response(_session_payload(session), status=201)


async def get_session(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    return web.json_response(_session_payload(session))


async def delete_session(request: web.Request) -> web.Response:
    session_id = request.match_info["session_id"]
    if not request.app[sessions_key].remove(session_id):
        return _not_found(request)
    return web.Response(status=204)


async def update_context(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    try:
        body = await _read_body(request)
        roles = _get_roles(body)
        route = _get_str(body, "route", None)
    except BadRequest as e:
        return _error(str(e), status=400)

    if roles is not None:
        session.controller.set_roles(roles)
    if route is not None:
        session.controller.set_route(route)
    return web.json_response(_session_payload(session))


async def update_search(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    try:
        body = await _read_body(request)
        query = _get_str(body, "query", "") or ""
    except BadRequest as e:
        return _error(str(e), status=400)

    session.controller.set_query(query)
    return web.json_response(_session_payload(session))


async def toggle_item(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    try:
        body = await _read_body(request)
        route_id = _require_str(body, "routeId")
    except BadRequest as e:
        return _error(str(e), status=400)

    expanded = session.controller.toggle(route_id)
    payload = _session_payload(session)
    payload["toggled"] = expanded is not None
    return web.json_response(payload)


async def select_item(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    try:
        body = await _read_body(request)
        route_id = _require_str(body, "routeId")
    except BadRequest as e:
        return _error(str(e), status=400)

    navigated = session.controller.select(route_id)
    payload = _session_payload(session)
    payload["navigated"] = navigated
    return web.json_response(payload)


async def update_rail_mode(request: web.Request) -> web.Response:
    session = _lookup(request)
    if session is None:
        return _not_found(request)
    try:
        body = await _read_body(request)
        enabled = _get_bool(body, "enabled", None)
    except BadRequest as e:
        return _error(str(e), status=400)

    if enabled is None:
        session.controller.toggle_rail_mode()
    else:
        session.controller.set_rail_mode(enabled)
    return web.json_response(_session_payload(session))


def _lookup(request: web.Request) -> NavigationSession | None:
    return request.app[sessions_key].get(request.match_info["session_id"])


def _session_payload(session: NavigationSession) -> dict[str, object]:
    return {
        "id": session.session_id,
        "view": session.controller.render().to_dict(),
        "history": list(session.history),
    }


def _not_found(request: web.Request) -> web.Response:
    return web.json_response(
        {"error": "Session not found", "id": request.match_info["session_id"]},
        status=404,
    )


def _error(message: str, *, status: int) -> web.Response:
    logger.debug(f"Rejected request: {message}")
    return web.json_response({"error": message}, status=status)


async def _read_body(request: web.Request) -> dict[str, object]:
    if not request.can_read_body:
        return {}
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise BadRequest(f"Invalid JSON body: {e}") from e
    if not isinstance(body, dict):
        raise BadRequest("Request body must be a JSON object")
    return body


def _get_roles(body: dict[str, object]) -> frozenset[Role] | None:
    roles = body.get("roles")
    if roles is None:
        return None
    if not isinstance(roles, list) or not all(isinstance(r, str) for r in roles):
        raise BadRequest("roles must be a list of strings")
    return frozenset(Role(r) for r in roles)


def _get_str(body: dict[str, object], key: str, default: str | None) -> str | None:
    value = body.get(key, default)
    if value is not None and not isinstance(value, str):
        raise BadRequest(f"{key} must be a string")
    return value


def _require_str(body: dict[str, object], key: str) -> str:
    value = body.get(key)
    if not isinstance(value, str) or not value:
        raise BadRequest(f"{key} is required")
    return value


def _get_bool(body: dict[str, object], key: str, default: bool | None) -> bool | None:
    value = body.get(key, default)
    if value is not None and not isinstance(value, bool):
        raise BadRequest(f"{key} must be a boolean")
    return value
