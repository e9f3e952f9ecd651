"""Parse menu JSON (as the admin API returns it) into domain models."""

from collections import deque
from typing import Any

from menutree.core.tree.operations import build_forest
from menutree.models.node import Forest, MenuNode

# Keys that describe tree structure; everything else is payload.
_STRUCTURAL_KEYS = frozenset({"id", "parentId", "position", "level", "children"})


def _payload(raw: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in raw.items() if k not in _STRUCTURAL_KEYS}


def _position(raw: dict[str, Any], fallback: int) -> int:
    position = raw.get("position", fallback)
    if not isinstance(position, int) or isinstance(position, bool) or position < 0:
        msg = f"Invalid position {position!r} for menu {raw.get('id')!r}"
        raise ValueError(msg)
    return position


def parse_menu_node(raw: dict[str, Any], *, index: int = 0) -> MenuNode[dict[str, Any]]:
    """Parse a single menu dict, ignoring any nested children."""
    if "id" not in raw:
        msg = f"Menu entry without id: {raw!r}"
        raise ValueError(msg)
    return MenuNode(
        id=str(raw["id"]),
        parent_id=raw.get("parentId") or None,
        position=_position(raw, index),
        payload=_payload(raw),
    )


def parse_children(data: list[dict[str, Any]]) -> list[MenuNode[dict[str, Any]]]:
    """Parse a one-level children response, ordered by position."""
    nodes = [parse_menu_node(raw, index=i) for i, raw in enumerate(data)]
    nodes.sort(key=lambda n: n.position)
    return nodes


def parse_menu_tree(data: list[dict[str, Any]]) -> Forest[dict[str, Any]]:
    """Parse a nested menu tree into a renumbered forest.

    Args:
        data: Root-level menu dicts, each with an optional ``children`` list.

    Returns:
        Forest whose parent links follow the nesting.
    """
    nodes: list[MenuNode[dict[str, Any]]] = []

    # BFS: parent_id comes from nesting, position from the entry (or its index).
    todo: deque[tuple[dict[str, Any], str | None, int]] = deque(
        (raw, None, i) for i, raw in enumerate(data)
    )
    while todo:
        raw, parent_id, index = todo.popleft()
        node = parse_menu_node(raw, index=index)
        node.parent_id = parent_id
        nodes.append(node)
        for i, child in enumerate(raw.get("children") or []):
            todo.append((child, node.id, i))

    return build_forest(nodes)


def forest_to_json(forest: Forest[dict[str, Any]]) -> list[dict[str, Any]]:
    """Inverse of parse_menu_tree: nested dicts with structural keys restored."""

    def to_dict(node_id: str) -> dict[str, Any]:
        node = forest.nodes[node_id]
        data: dict[str, Any] = {"id": node.id, **node.payload, "position": node.position}
        if node.parent_id is not None:
            data["parentId"] = node.parent_id
        data["children"] = [to_dict(child_id) for child_id in node.child_ids]
        return data

    return [to_dict(root_id) for root_id in forest.root_ids]
