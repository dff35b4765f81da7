"""Menu tree data model and loader.

The menu is a static, role-annotated tree of navigable destinations. It is
loaded once from a TOML file and never mutated; filters build new trees.
Nodes are a tagged union discriminated by ``kind``.
"""

import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, NotRequired, TypedDict

from isomenu.core.types import Role, RouteId

logger = logging.getLogger(__name__)


class MenuConfigError(ValueError):
    """Raised when a menu configuration is invalid."""


class MenuNodeDict(TypedDict):
    """Dictionary representation of a menu node."""

    type: str
    label: str
    requiredRoles: list[str]
    routeId: NotRequired[str]
    iconRef: NotRequired[str]
    badge: NotRequired[str]
    proxy: NotRequired[bool]
    children: NotRequired[list["MenuNodeDict"]]


@dataclass(frozen=True)
class Divider:
    """Non-navigable section header."""

    label: str
    required_roles: frozenset[Role] = frozenset()
    kind: Literal["divider"] = field(default="divider", init=False)

    def to_dict(self) -> MenuNodeDict:
        """Convert to dictionary for JSON serialization."""
        return {
            "type": self.kind,
            "label": self.label,
            "requiredRoles": sorted(self.required_roles),
        }


@dataclass(frozen=True)
class Item:
    """Navigable menu entry, optionally hosting child entries.

    A proxy item's own route is never a real destination; it only groups
    its children under an accordion. ``active_prefixes`` lets an item light
    up for a family of routes it has no structural link to.
    """

    label: str
    route_id: RouteId
    icon_ref: str
    required_roles: frozenset[Role] = frozenset()
    children: tuple["Item", ...] = ()
    badge: str | None = None
    proxy: bool = False
    active_prefixes: tuple[str, ...] = ()
    kind: Literal["item"] = field(default="item", init=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> MenuNodeDict:
        """Convert to dictionary for JSON serialization."""
        result: MenuNodeDict = {
            "type": self.kind,
            "label": self.label,
            "requiredRoles": sorted(self.required_roles),
            "routeId": self.route_id,
            "iconRef": self.icon_ref,
        }
        if self.badge is not None:
            result["badge"] = self.badge
        if self.proxy:
            result["proxy"] = True
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


MenuNode = Divider | Item


def iter_items(nodes: tuple[MenuNode, ...]):
    """Yield every Item of a tree depth-first, parents before children."""
    for node in nodes:
        if node.kind == "divider":
            continue
        yield node
        yield from iter_items(node.children)


def load_menu(path: Path) -> tuple[MenuNode, ...]:
    """Load a menu tree from a TOML file.

    Args:
        path: Path to menu TOML file

    Returns:
        Tuple of top-level menu nodes

    Raises:
        FileNotFoundError: If the file doesn't exist
        MenuConfigError: If the menu is invalid
    """
    if not path.exists():
        raise FileNotFoundError(f"Menu file not found: {path}")

    with path.open("rb") as f:
        try:
            data = tomllib.load(f)
        except tomllib.TOMLDecodeError as e:
            raise MenuConfigError(f"Invalid menu file {path}: {e}") from e

    nodes = parse_menu(data)
    logger.info(f"Loaded menu from {path} ({sum(1 for _ in iter_items(nodes))} items)")
    return nodes


def parse_menu(data: object) -> tuple[MenuNode, ...]:
    """Build a menu tree from parsed TOML data.

    Args:
        data: Raw document with a top-level ``items`` array of tables

    Returns:
        Tuple of top-level menu nodes

    Raises:
        MenuConfigError: If the data is invalid or route ids repeat
    """
    if not isinstance(data, dict):
        raise MenuConfigError("Menu must be a dictionary")

    raw_items = data.get("items", [])
    if not isinstance(raw_items, list):
        raise MenuConfigError("items must be a list")

    nodes = tuple(
        _parse_node(raw, f"items[{i}]") for i, raw in enumerate(raw_items)
    )
    _check_unique_routes(nodes)
    return nodes


def _parse_node(data: object, where: str) -> MenuNode:
    if not isinstance(data, dict):
        raise MenuConfigError(f"{where} must be a table")

    kind = data.get("kind", "item")
    if kind not in ("item", "divider"):
        raise MenuConfigError(f'{where}.kind must be "item" or "divider"')

    label = data.get("label")
    if not isinstance(label, str) or not label:
        raise MenuConfigError(f"{where}.label must be a non-empty string")

    roles = _parse_roles(data.get("roles", []), where)

    if kind == "divider":
        for key in ("route", "icon", "children"):
            if key in data:
                raise MenuConfigError(f"{where}.{key} is not allowed on a divider")
        return Divider(label=label, required_roles=roles)

    route = data.get("route")
    if not isinstance(route, str) or not route:
        raise MenuConfigError(f"{where}.route must be a string")

    icon = data.get("icon", "")
    if not isinstance(icon, str):
        raise MenuConfigError(f"{where}.icon must be a string")

    badge = data.get("badge")
    if badge is not None and not isinstance(badge, str):
        raise MenuConfigError(f"{where}.badge must be a string")

    proxy = data.get("proxy", False)
    if not isinstance(proxy, bool):
        raise MenuConfigError(f"{where}.proxy must be a boolean")

    prefixes_raw = data.get("active_prefixes", [])
    if not isinstance(prefixes_raw, list):
        raise MenuConfigError(f"{where}.active_prefixes must be a list")
    for prefix in prefixes_raw:
        if not isinstance(prefix, str) or not prefix:
            raise MenuConfigError(
                f"{where}.active_prefixes items must be non-empty strings"
            )

    children_raw = data.get("children", [])
    if not isinstance(children_raw, list):
        raise MenuConfigError(f"{where}.children must be a list")
    children: list[Item] = []
    for i, raw_child in enumerate(children_raw):
        child = _parse_node(raw_child, f"{where}.children[{i}]")
        if child.kind == "divider":
            raise MenuConfigError(f"{where}.children[{i}] must be an item")
        children.append(child)

    return Item(
        label=label,
        route_id=RouteId(route),
        icon_ref=icon,
        required_roles=roles,
        children=tuple(children),
        badge=badge,
        proxy=proxy,
        active_prefixes=tuple(prefixes_raw),
    )


def _parse_roles(data: object, where: str) -> frozenset[Role]:
    if not isinstance(data, list):
        raise MenuConfigError(f"{where}.roles must be a list")
    for role in data:
        if not isinstance(role, str):
            raise MenuConfigError(f"{where}.roles items must be strings")
    return frozenset(Role(role) for role in data)


def _check_unique_routes(nodes: tuple[MenuNode, ...]) -> None:
    seen: set[RouteId] = set()
    for item in iter_items(nodes):
        if item.route_id in seen:
            raise MenuConfigError(f"Duplicate route id: {item.route_id}")
        seen.add(item.route_id)
