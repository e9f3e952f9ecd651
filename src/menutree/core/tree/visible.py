"""Project a forest plus lazily loaded children into displayable rows."""

from dataclasses import dataclass
from typing import Generic

from menutree.core.cache.children import LazyChildCache
from menutree.models.node import Forest, MenuNode, P


@dataclass(frozen=True)
class Row(Generic[P]):
    """One line of the menu table."""

    node: MenuNode[P]
    level: int
    expanded: bool = False
    loading: bool = False


def visible_rows(forest: Forest[P], cache: LazyChildCache[P]) -> list[Row[P]]:
    """Rows in display order, descending only into expanded nodes.

    Children fetched on expand take precedence over the bulk-loaded ones.
    """
    rows: list[Row[P]] = []
    stack: list[tuple[MenuNode[P], int]] = [
        (node, 0) for node in reversed(forest.children_of(None))
    ]
    while stack:
        node, level = stack.pop()
        expanded = cache.is_expanded(node.id)
        rows.append(
            Row(node=node, level=level, expanded=expanded, loading=cache.is_loading(node.id))
        )
        if not expanded:
            continue
        cached = cache.children_for(node.id)
        children = list(cached) if cached is not None else forest.children_of(node.id)
        stack.extend((child, level + 1) for child in reversed(children))
    return rows
