"""Active path resolution.

A node is active when it is the current route, when the current route
starts with one of its alias prefixes, or when any of its descendants is
active. Nothing here is cached; activity is recomputed on every render.
"""

from isomenu.core.menu import Item, MenuNode
from isomenu.core.types import RouteId


def is_active(node: Item, current_route: str) -> bool:
    """Check whether an item is on the active path for a route.

    Args:
        node: Menu item to check
        current_route: Route currently displayed by the host

    Returns:
        True if the item or any of its descendants matches the route
    """
    if _matches(node, current_route):
        return True
    return any(is_active(child, current_route) for child in node.children)


def active_route_ids(nodes: tuple[MenuNode, ...], current_route: str) -> set[RouteId]:
    """Collect route ids of every active item in a tree in a single pass.

    Args:
        nodes: Menu tree
        current_route: Route currently displayed by the host

    Returns:
        Set of active route ids, empty for unknown routes
    """
    active: set[RouteId] = set()
    _collect_active(nodes, current_route, active)
    return active


def _collect_active(
    nodes: tuple[MenuNode, ...],
    current_route: str,
    active: set[RouteId],
) -> bool:
    found = False
    for node in nodes:
        if node.kind == "divider":
            continue
        # Descendants must be visited even when the node itself matches
        child_active = _collect_active(node.children, current_route, active)
        if child_active or _matches(node, current_route):
            active.add(node.route_id)
            found = True
    return found


def _matches(node: Item, current_route: str) -> bool:
    if not current_route:
        return False
    if node.route_id == current_route:
        return True
    return any(current_route.startswith(prefix) for prefix in node.active_prefixes)
