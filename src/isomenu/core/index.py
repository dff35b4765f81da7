"""Flat index over a menu tree.

Provides route lookups, parent chains and breadcrumbs for a (usually
role-filtered) menu tree without walking the tree on every query.
"""

from dataclasses import dataclass

from isomenu.core.menu import Item, MenuConfigError, MenuNode
from isomenu.core.types import RouteId


@dataclass(frozen=True)
class BreadcrumbItem:
    """Breadcrumb navigation item."""

    label: str
    route_id: RouteId

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"label": self.label, "routeId": self.route_id}


class MenuIndex:
    """Menu items with O(1) route lookups.

    Stores items in a flat list with parent relationships tracked by
    indices. Breadcrumbs are built in O(d) where d is the item depth.
    """

    __slots__ = ("_items", "_parents", "_route_index")

    def __init__(self, items: list[Item], parents: list[int | None]) -> None:
        """Initialize index.

        Args:
            items: Flat list of all items, parents before children
            parents: Parent index for each item (None for top-level items)

        Raises:
            MenuConfigError: If two items share a route id
        """
        self._items = items
        self._parents = parents
        self._route_index: dict[RouteId, int] = {}
        for i, item in enumerate(items):
            if item.route_id in self._route_index:
                raise MenuConfigError(f"Duplicate route id: {item.route_id}")
            self._route_index[item.route_id] = i

    @classmethod
    def from_nodes(cls, nodes: tuple[MenuNode, ...]) -> "MenuIndex":
        """Build an index from a menu tree."""
        items: list[Item] = []
        parents: list[int | None] = []

        def visit(level: tuple[MenuNode, ...], parent: int | None) -> None:
            for node in level:
                if node.kind == "divider":
                    continue
                idx = len(items)
                items.append(node)
                parents.append(parent)
                visit(node.children, idx)

        visit(nodes, None)
        return cls(items, parents)

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, route_id: object) -> bool:
        return route_id in self._route_index

    def get_item(self, route_id: str) -> Item | None:
        """Get item by route id, None if unknown."""
        idx = self._route_index.get(RouteId(route_id))
        if idx is None:
            return None
        return self._items[idx]

    def get_parent(self, route_id: str) -> Item | None:
        """Get the parent item, None for top-level or unknown routes."""
        idx = self._route_index.get(RouteId(route_id))
        if idx is None:
            return None
        parent = self._parents[idx]
        return None if parent is None else self._items[parent]

    def get_children(self, route_id: str) -> list[Item]:
        """Get children of an item, empty if unknown or childless."""
        item = self.get_item(route_id)
        if item is None:
            return []
        return list(item.children)

    def get_ancestors(self, route_id: str) -> list[Item]:
        """Get ancestors of an item, root first, excluding the item itself."""
        idx = self._route_index.get(RouteId(route_id))
        if idx is None:
            return []

        ancestors: list[Item] = []
        current = self._parents[idx]
        while current is not None:
            ancestors.append(self._items[current])
            current = self._parents[current]
        ancestors.reverse()
        return ancestors

    def get_breadcrumbs(self, route_id: str, home_route: str) -> list[BreadcrumbItem]:
        """Build breadcrumbs for a route.

        Breadcrumbs start with the home item, followed by ancestor items.
        The current item is not included.

        Note:
            For unknown routes, returns [home] so the UI keeps minimal
            navigation. The home route itself gets no breadcrumbs.

        Args:
            route_id: Current route
            home_route: Route of the home item (e.g., "dashboard")

        Returns:
            List of BreadcrumbItem for ancestor navigation
        """
        if not route_id or route_id == home_route:
            return []

        home = self.get_item(home_route)
        crumbs: list[BreadcrumbItem] = []
        if home is not None:
            crumbs.append(BreadcrumbItem(label=home.label, route_id=home.route_id))

        for item in self.get_ancestors(route_id):
            if item.route_id != home_route:
                crumbs.append(BreadcrumbItem(label=item.label, route_id=item.route_id))
        return crumbs
