"""Protocols for the collaborators the engine depends on."""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable

from menutree.models.node import Forest, MenuNode, ReorderItem


@runtime_checkable
class GatewayProtocol(Protocol):
    """Protocol for the remote menu store.

    Every method may raise GatewayError. ``scope`` names the menu instance
    (e.g. "main", "footer").
    """

    async def fetch_tree(self, scope: str) -> Forest[Any]:
        """Return the full bulk-loaded forest for a scope."""
        ...

    async def fetch_children(self, scope: str, parent_id: str) -> list[MenuNode[Any]]:
        """Return the direct children of a node, ordered by position."""
        ...

    async def commit_reorder(self, scope: str, items: Sequence[ReorderItem]) -> None:
        """Apply a complete ordering atomically, or raise without applying any of it."""
        ...

    async def fetch_next_position(self, scope: str, parent_id: str | None = None) -> int:
        """Return the position a new last child of parent_id should take."""
        ...


@runtime_checkable
class NotifierProtocol(Protocol):
    """Protocol for user-visible notifications (toasts, status lines)."""

    def notify(self, message: str, *, level: str = "info") -> None:
        """Show a message; level is one of "success", "info" or "error"."""
        ...
