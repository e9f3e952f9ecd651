"""Pure tree operations: cloning, locating, renumbering and building forests."""

from collections import defaultdict, deque
from collections.abc import Iterable, Iterator
from copy import deepcopy
from dataclasses import replace

from menutree.models.node import Forest, MenuNode, NodeLocation, P


def clone_tree(forest: Forest[P]) -> Forest[P]:
    """Return a deep copy of the forest.

    Nodes, children lists and payloads are all copied, so nothing is shared
    with the original.
    """
    return Forest(
        nodes={
            node_id: replace(
                node, payload=deepcopy(node.payload), child_ids=list(node.child_ids)
            )
            for node_id, node in forest.nodes.items()
        },
        root_ids=list(forest.root_ids),
    )


def locate(forest: Forest[P], node_id: str) -> NodeLocation | None:
    """Find the sibling list holding node_id and its index in it.

    Returns None when the node is not reachable in this forest.
    """
    todo: list[tuple[str | None, list[str]]] = [(None, forest.root_ids)]
    while todo:
        parent_id, siblings = todo.pop()
        for index, child_id in enumerate(siblings):
            if child_id == node_id:
                return NodeLocation(parent_id=parent_id, siblings=siblings, index=index)
            child = forest.nodes.get(child_id)
            if child is not None and child.child_ids:
                todo.append((child_id, child.child_ids))
    return None


def renumber(forest: Forest[P]) -> None:
    """Recompute level, position and parent_id of every node from the structure."""
    todo: deque[tuple[str | None, list[str], int]] = deque([(None, forest.root_ids, 0)])
    while todo:
        parent_id, siblings, level = todo.popleft()
        for position, node_id in enumerate(siblings):
            node = forest.nodes[node_id]
            node.parent_id = parent_id
            node.position = position
            node.level = level
            if node.child_ids:
                todo.append((node_id, node.child_ids, level + 1))


def iter_preorder(forest: Forest[P]) -> Iterator[MenuNode[P]]:
    """Yield nodes depth-first, each node before its children."""
    stack = list(reversed(forest.root_ids))
    while stack:
        node = forest.nodes[stack.pop()]
        yield node
        stack.extend(reversed(node.child_ids))


def ancestors(forest: Forest[P], node_id: str) -> list[str]:
    """Ancestor ids of a node, closest parent first.

    Raises ValueError when the parent chain revisits a node.
    """
    chain: list[str] = []
    seen = {node_id}
    node = forest.nodes.get(node_id)
    while node is not None and node.parent_id is not None:
        if node.parent_id in seen:
            msg = f"Cycle detected at {node.parent_id!r} while walking up from {node_id!r}"
            raise ValueError(msg)
        seen.add(node.parent_id)
        chain.append(node.parent_id)
        node = forest.nodes.get(node.parent_id)
    return chain


def build_forest(nodes: Iterable[MenuNode[P]]) -> Forest[P]:
    """Assemble flat nodes (as a store returns them) into a renumbered forest.

    Nodes whose parent is missing become roots. Siblings are ordered by their
    stored position. Nodes that cannot be reached from any root (parent cycles)
    are rejected.
    """
    by_id: dict[str, MenuNode[P]] = {}
    for node in nodes:
        if node.id in by_id:
            msg = f"Duplicate node id: {node.id!r}"
            raise ValueError(msg)
        by_id[node.id] = replace(node, child_ids=[])

    groups: dict[str | None, list[MenuNode[P]]] = defaultdict(list)
    for node in by_id.values():
        parent_key = node.parent_id if node.parent_id in by_id else None
        groups[parent_key].append(node)

    forest: Forest[P] = Forest(nodes=by_id)
    for parent_key, children in groups.items():
        children.sort(key=lambda n: n.position)
        ids = [n.id for n in children]
        if parent_key is None:
            forest.root_ids = ids
        else:
            by_id[parent_key].child_ids = ids

    reachable = {node.id for node in iter_preorder(forest)}
    if len(reachable) != len(by_id):
        msg = f"Orphaned nodes: {sorted(set(by_id) - reachable)!r}"
        raise ValueError(msg)

    renumber(forest)
    return forest
