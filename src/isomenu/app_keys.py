"""Application keys for type-safe app configuration access."""

from aiohttp import web

from isomenu.config import Config
from isomenu.core.icons import IconCache
from isomenu.core.menu import MenuNode
from isomenu.sessions import SessionStore

config_key = web.AppKey("config", Config)
menu_key = web.AppKey("menu", tuple[MenuNode, ...])
icons_key = web.AppKey("icons", IconCache)
sessions_key = web.AppKey("sessions", SessionStore)
