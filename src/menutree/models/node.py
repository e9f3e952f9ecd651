"""Domain models for the menu tree."""

from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

P = TypeVar("P")


@dataclass
class MenuNode(Generic[P]):
    """A single node in a menu forest.

    Children are stored as ids into the owning forest. ``payload`` carries the
    label, type, styling and visibility fields, which the engine never reads.
    """

    id: str
    parent_id: str | None
    position: int
    payload: P
    level: int = 0
    child_ids: list[str] = field(default_factory=list)


@dataclass
class Forest(Generic[P]):
    """An arena of menu nodes plus the ordered list of root ids."""

    nodes: dict[str, MenuNode[P]] = field(default_factory=dict)
    root_ids: list[str] = field(default_factory=list)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get(self, node_id: str) -> MenuNode[P] | None:
        return self.nodes.get(node_id)

    def children_of(self, node_id: str | None) -> list[MenuNode[P]]:
        """Direct children of a node, or the roots when node_id is None."""
        if node_id is None:
            ids = self.root_ids
        else:
            node = self.nodes.get(node_id)
            ids = node.child_ids if node else []
        return [self.nodes[i] for i in ids]


@dataclass(frozen=True)
class NodeLocation:
    """Where a node lives inside a specific forest.

    ``siblings`` is the live list the node is stored in (a forest's root_ids or
    a parent's child_ids), so mutating it mutates that forest.
    """

    parent_id: str | None
    siblings: list[str]
    index: int


@dataclass(frozen=True)
class ReorderItem:
    """Flattened position of one node, as sent to the store."""

    id: str
    position: int
    parent_id: str | None = None

    def to_wire(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "position": self.position}
        if self.parent_id is not None:
            data["parentId"] = self.parent_id
        return data
