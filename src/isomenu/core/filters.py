"""Role and search filters over menu trees.

Both filters are pure: they never modify their input and always return a
new tuple of nodes in the original display order.
"""

import logging
import unicodedata
from collections.abc import Iterable
from dataclasses import replace

from isomenu.core.menu import MenuNode
from isomenu.core.types import Role

logger = logging.getLogger(__name__)

# Letters without a canonical decomposition that still read as a base letter
_FOLD_TABLE = str.maketrans({"đ": "d", "Đ": "d"})


def normalize_text(text: str) -> str:
    """Normalize text for diacritic- and case-insensitive matching.

    Applies canonical decomposition (NFD), drops combining marks and folds
    case, so "Đào tạo" and "dao tao" normalize to the same string.
    """
    if not text:
        return ""
    decomposed = unicodedata.normalize("NFD", text.translate(_FOLD_TABLE))
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.casefold()


def filter_by_role(
    nodes: tuple[MenuNode, ...],
    roles: Iterable[Role],
) -> tuple[MenuNode, ...]:
    """Keep nodes whose required roles intersect the viewer's roles.

    Nodes without required roles are visible to everyone. A dropped node
    takes its whole subtree with it; a kept parent stays even when none of
    its children survive.

    Args:
        nodes: Menu tree to filter
        roles: Viewer's role set

    Returns:
        Role-visible subtree
    """
    return _filter_by_role(nodes, frozenset(roles))


def _filter_by_role(
    nodes: tuple[MenuNode, ...],
    roles: frozenset[Role],
) -> tuple[MenuNode, ...]:
    result: list[MenuNode] = []
    for node in nodes:
        if node.required_roles and node.required_roles.isdisjoint(roles):
            continue
        if node.kind == "item" and node.children:
            node = replace(node, children=_filter_by_role(node.children, roles))
        result.append(node)
    return tuple(result)


def filter_by_search(nodes: tuple[MenuNode, ...], query: str) -> tuple[MenuNode, ...]:
    """Keep items whose label matches the query or that have matching children.

    Matching is substring containment of normalized text. Dividers are
    dropped at every depth while a non-empty query is active. An empty
    query returns the input unchanged.

    Args:
        nodes: Menu tree to filter (usually already role-filtered)
        query: Raw search query

    Returns:
        Search-filtered subtree
    """
    needle = normalize_text(query)
    if not needle:
        return nodes
    result = _filter_by_search(nodes, needle)
    logger.debug(f"Search {query!r} kept {len(result)} of {len(nodes)} top-level nodes")
    return result


def _filter_by_search(nodes: tuple[MenuNode, ...], needle: str) -> tuple[MenuNode, ...]:
    result: list[MenuNode] = []
    for node in nodes:
        if node.kind == "divider":
            continue
        children = _filter_by_search(node.children, needle)
        if needle in normalize_text(node.label) or children:
            result.append(replace(node, children=children))
    return tuple(result)
