"""Flatten forests into reorder items and detect order changes."""

from collections.abc import Sequence
from typing import Any

from menutree.models.node import Forest, P, ReorderItem


def flatten(forest: Forest[P]) -> list[ReorderItem]:
    """Pre-order list of (id, position, parent_id) for every node.

    Position is the index within the sibling list, so the result describes
    the shape actually shown rather than whatever positions were stored.
    """
    items: list[ReorderItem] = []
    stack: list[tuple[str, str | None, int]] = [
        (node_id, None, i) for i, node_id in reversed(list(enumerate(forest.root_ids)))
    ]
    while stack:
        node_id, parent_id, position = stack.pop()
        items.append(ReorderItem(id=node_id, position=position, parent_id=parent_id))
        child_ids = forest.nodes[node_id].child_ids
        stack.extend((c, node_id, i) for i, c in reversed(list(enumerate(child_ids))))
    return items


def has_changed(before: Sequence[ReorderItem], after: Sequence[ReorderItem]) -> bool:
    """True if the two flattened orders differ in length, identity, position or parent."""
    if len(before) != len(after):
        return True
    for old, new in zip(before, after, strict=True):
        if (
            old.id != new.id
            or old.position != new.position
            or (old.parent_id or None) != (new.parent_id or None)
        ):
            return True
    return False


def to_wire(items: Sequence[ReorderItem]) -> list[dict[str, Any]]:
    """JSON-ready reorder items; parentId is omitted for root-level nodes."""
    return [item.to_wire() for item in items]
