"""Navigation controller.

Runs the role and search filters, annotates the result with active and
expanded flags, and owns the per-node accordion state of one mounted menu.
Routing is left to the host through the ``on_navigate`` callback.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from typing import NotRequired, TypedDict

from isomenu.core.active import active_route_ids
from isomenu.core.filters import filter_by_role, filter_by_search
from isomenu.core.menu import Item, MenuNode
from isomenu.core.types import Role, RouteId

logger = logging.getLogger(__name__)

NavigateCallback = Callable[[RouteId], None]
QueryChangeCallback = Callable[[str], None]


class RenderNodeDict(TypedDict):
    """Dictionary representation of a rendered menu node."""

    type: str
    label: str
    depth: int
    routeId: NotRequired[str]
    iconRef: NotRequired[str]
    badge: NotRequired[str]
    proxy: NotRequired[bool]
    active: NotRequired[bool]
    expanded: NotRequired[bool]
    children: NotRequired[list["RenderNodeDict"]]


@dataclass
class NodeUiState:
    """Accordion state of a parent item."""

    expanded: bool
    active: bool


@dataclass(frozen=True)
class RenderNode:
    """Menu node annotated for a renderer."""

    kind: str
    label: str
    depth: int
    route_id: RouteId | None = None
    icon_ref: str = ""
    badge: str | None = None
    proxy: bool = False
    active: bool = False
    expanded: bool = False
    children: tuple["RenderNode", ...] = ()

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def to_dict(self) -> RenderNodeDict:
        """Convert to dictionary for JSON serialization."""
        result: RenderNodeDict = {"type": self.kind, "label": self.label, "depth": self.depth}
        if self.kind == "divider":
            return result
        if self.route_id is not None:
            result["routeId"] = self.route_id
        result["iconRef"] = self.icon_ref
        result["active"] = self.active
        result["expanded"] = self.expanded
        if self.badge is not None:
            result["badge"] = self.badge
        if self.proxy:
            result["proxy"] = True
        if self.children:
            result["children"] = [child.to_dict() for child in self.children]
        return result


@dataclass(frozen=True)
class NavigationView:
    """Result of one render pass."""

    items: tuple[RenderNode, ...]
    query: str = ""
    rail_mode: bool = False
    current_route: str = ""
    roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def is_empty(self) -> bool:
        """True when the filters left nothing to show."""
        return not self.items

    def to_dict(self) -> dict[str, object]:
        """Convert to dictionary for JSON serialization."""
        return {
            "items": [item.to_dict() for item in self.items],
            "query": self.query,
            "railMode": self.rail_mode,
            "currentRoute": self.current_route,
            "roles": sorted(self.roles),
            "empty": self.is_empty,
        }


def render_tree(
    nodes: tuple[MenuNode, ...],
    active: set[RouteId],
    expanded: Callable[[Item, bool], bool],
    *,
    rail_mode: bool = False,
    depth: int = 0,
) -> tuple[RenderNode, ...]:
    """Annotate a filtered tree with active and expanded flags.

    Args:
        nodes: Filtered menu tree
        active: Active route ids
        expanded: Returns the expanded flag for a parent item given its activity
        rail_mode: Drop dividers and report every node collapsed
        depth: Nesting depth of ``nodes``

    Returns:
        Tuple of RenderNode trees
    """
    result: list[RenderNode] = []
    for node in nodes:
        if node.kind == "divider":
            if not rail_mode:
                result.append(RenderNode(kind=node.kind, label=node.label, depth=depth))
            continue

        is_node_active = node.route_id in active
        is_expanded = False
        if node.children and not rail_mode:
            is_expanded = expanded(node, is_node_active)
        result.append(
            RenderNode(
                kind=node.kind,
                label=node.label,
                depth=depth,
                route_id=node.route_id,
                icon_ref=node.icon_ref,
                badge=node.badge,
                proxy=node.proxy,
                active=is_node_active,
                expanded=is_expanded,
                children=render_tree(
                    node.children,
                    active,
                    expanded,
                    rail_mode=rail_mode,
                    depth=depth + 1,
                ),
            )
        )
    return tuple(result)


class NavigationController:
    """Stateful navigation menu for one viewer.

    Parent items have two states, collapsed and expanded. A parent starts
    expanded when it is active the first time it is rendered. In rail mode
    disclosure is disabled and selecting a parent navigates to its own
    route. Outside rail mode a route change re-derives expansion: active
    branches open even if the user collapsed them, and branches that stop
    being active close.
    """

    def __init__(
        self,
        menu: tuple[MenuNode, ...],
        *,
        roles: Iterable[Role] = (),
        current_route: str = "",
        rail_mode: bool = False,
        on_navigate: NavigateCallback | None = None,
        on_query_change: QueryChangeCallback | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            menu: Full static menu tree
            roles: Viewer's role set
            current_route: Route currently displayed by the host
            rail_mode: Start in collapsed icon-only mode
            on_navigate: Called with the route id the viewer selected
            on_query_change: Called with the raw query whenever it changes
        """
        self._menu = menu
        self._roles = frozenset(roles)
        self._current_route = current_route
        self._rail_mode = rail_mode
        self._query = ""
        self._on_navigate = on_navigate
        self._on_query_change = on_query_change
        self._states: dict[RouteId, NodeUiState] = {}

    @property
    def roles(self) -> frozenset[Role]:
        return self._roles

    @property
    def current_route(self) -> str:
        return self._current_route

    @property
    def query(self) -> str:
        return self._query

    @property
    def rail_mode(self) -> bool:
        return self._rail_mode

    def set_roles(self, roles: Iterable[Role]) -> None:
        """Replace the viewer's role set."""
        self._roles = frozenset(roles)
        if not self._rail_mode:
            self._sync_expanded()

    def set_route(self, route_id: str) -> None:
        """Record the route the host now displays."""
        if route_id == self._current_route:
            return
        self._current_route = route_id
        if not self._rail_mode:
            self._sync_expanded()

    def set_query(self, query: str) -> None:
        """Update the raw search query."""
        if query == self._query:
            return
        self._query = query
        if self._on_query_change is not None:
            self._on_query_change(query)

    def set_rail_mode(self, enabled: bool) -> None:
        """Switch between rail (icon-only) and expanded display."""
        if enabled == self._rail_mode:
            return
        self._rail_mode = enabled
        if not enabled:
            self._sync_expanded(force=True)

    def toggle_rail_mode(self) -> bool:
        """Flip the display mode and return the new rail flag."""
        self.set_rail_mode(not self._rail_mode)
        return self._rail_mode

    def visible_tree(self) -> tuple[MenuNode, ...]:
        """Return the role- and search-filtered menu tree."""
        return filter_by_search(filter_by_role(self._menu, self._roles), self._query)

    def render(self) -> NavigationView:
        """Filter the menu and annotate it for rendering."""
        active = self._active_routes()
        items = render_tree(
            self.visible_tree(),
            active,
            self._expanded_for,
            rail_mode=self._rail_mode,
        )
        return NavigationView(
            items=items,
            query=self._query,
            rail_mode=self._rail_mode,
            current_route=self._current_route,
            roles=self._roles,
        )

    def is_expanded(self, route_id: str) -> bool:
        """Return the stored accordion state, False for untracked items."""
        state = self._states.get(RouteId(route_id))
        return state is not None and state.expanded

    def toggle(self, route_id: str) -> bool | None:
        """Flip a visible parent's accordion state.

        Returns:
            New expanded flag, or None when toggling is not possible
            (rail mode, unknown, invisible or childless item)
        """
        if self._rail_mode:
            logger.debug(f"Ignoring toggle of {route_id!r} in rail mode")
            return None

        item = self._find_visible(route_id)
        if item is None or not item.children:
            logger.debug(f"Ignoring toggle of {route_id!r}: not a visible parent")
            return None

        state = self._state_for(item, item.route_id in self._active_routes())
        state.expanded = not state.expanded
        return state.expanded

    def select(self, route_id: str) -> RouteId | None:
        """Handle a click on a menu item.

        Selecting a terminal item, or any item in rail mode, dispatches
        ``on_navigate``. Selecting a parent outside rail mode toggles it.
        A proxy parent is never a destination outside rail mode, even when
        the filters left it without children.

        Returns:
            Route id passed to ``on_navigate``, None if nothing navigated
        """
        item = self._find_visible(route_id)
        if item is None:
            logger.debug(f"Ignoring selection of unknown or hidden route {route_id!r}")
            return None

        if not self._rail_mode:
            if item.children:
                self.toggle(route_id)
                return None
            if item.proxy:
                logger.debug(f"Ignoring selection of proxy parent {route_id!r} without children")
                return None

        logger.info(f"Navigating to {item.route_id}")
        if self._on_navigate is not None:
            self._on_navigate(item.route_id)
        return item.route_id

    def reset(self) -> None:
        """Forget all accordion state, as on a full remount."""
        self._states.clear()

    def _active_routes(self) -> set[RouteId]:
        # Activity follows the role-visible tree so a search does not hide it
        return active_route_ids(filter_by_role(self._menu, self._roles), self._current_route)

    def _expanded_for(self, item: Item, active: bool) -> bool:
        return self._state_for(item, active).expanded

    def _state_for(self, item: Item, active: bool) -> NodeUiState:
        state = self._states.get(item.route_id)
        if state is None:
            state = NodeUiState(expanded=active, active=active)
            self._states[item.route_id] = state
        return state

    def _sync_expanded(self, *, force: bool = False) -> None:
        if not self._states:
            return
        active = self._active_routes()
        for route_id, state in self._states.items():
            now_active = route_id in active
            if now_active:
                state.expanded = True
            elif force or state.active:
                state.expanded = False
            state.active = now_active

    def _find_visible(self, route_id: str) -> Item | None:
        return _find_item(self.visible_tree(), route_id)


def _find_item(nodes: tuple[MenuNode, ...], route_id: str) -> Item | None:
    for node in nodes:
        if node.kind == "divider":
            continue
        if node.route_id == route_id:
            return node
        found = _find_item(node.children, route_id)
        if found is not None:
            return found
    return None
