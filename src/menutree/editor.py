"""Editor facade: one menu scope with its working tree, drag state and lazy children."""

from typing import Any

from loguru import logger

from menutree.core.cache.children import LazyChildCache
from menutree.core.drag.machine import DragController, DropOutcome, InteractionState
from menutree.core.tree.visible import Row, visible_rows
from menutree.errors import GatewayError
from menutree.models.node import Forest
from menutree.notify import LogNotifier
from menutree.protocols import GatewayProtocol, NotifierProtocol


class MenuTreeEditor:
    """Everything an interactive menu table needs for one scope."""

    def __init__(
        self,
        gateway: GatewayProtocol,
        scope: str,
        *,
        notifier: NotifierProtocol | None = None,
        tree: Forest[Any] | None = None,
    ) -> None:
        self.gateway = gateway
        self.scope = scope
        self.notifier = notifier or LogNotifier()
        self.children: LazyChildCache[Any] = LazyChildCache(
            gateway, scope, is_present=self._is_present
        )
        self.drag: DragController[Any] = DragController(
            tree if tree is not None else Forest(),
            gateway,
            scope,
            notifier=self.notifier,
            on_committed=self.children.refresh_expanded,
        )

    @property
    def tree(self) -> Forest[Any]:
        return self.drag.tree

    @property
    def state(self) -> InteractionState:
        return self.drag.state

    async def load(self) -> bool:
        """Bulk-load the scope's tree and make it the working tree.

        Returns False if a gesture or commit is in progress and the tree was kept.
        """
        tree = await self.gateway.fetch_tree(self.scope)
        if not self.drag.replace_tree(tree):
            logger.debug("Discarded fetched tree for {!r}: drag in progress", self.scope)
            return False
        logger.debug("Loaded {} menus for {!r}", len(tree), self.scope)
        return True

    async def reload(self) -> bool:
        """Re-fetch the tree and every expanded subtree. False while dragging."""
        if not await self.load():
            return False
        await self.children.refresh_expanded()
        return True

    async def expand(self, node_id: str) -> bool:
        return await self.children.expand(node_id)

    def collapse(self, node_id: str) -> None:
        self.children.collapse(node_id)

    async def toggle(self, node_id: str) -> bool:
        return await self.children.toggle(node_id)

    def rows(self) -> list[Row[Any]]:
        return visible_rows(self.drag.tree, self.children)

    def start_drag(self, node_id: str) -> bool:
        return self.drag.start_drag(node_id)

    def drag_over(self, target_id: str) -> bool:
        return self.drag.drag_over(target_id)

    def drag_leave(self, target_id: str) -> None:
        self.drag.drag_leave(target_id)

    def cancel_drag(self) -> None:
        self.drag.cancel()

    async def drop(self, target_id: str) -> DropOutcome:
        return await self.drag.drop(target_id)

    async def move(self, source_id: str, target_id: str) -> DropOutcome:
        """Run a whole gesture: pick up source_id, hover target_id and drop there."""
        if not self.drag.start_drag(source_id):
            return DropOutcome.IGNORED
        self.drag.drag_over(target_id)
        return await self.drag.drop(target_id)

    async def next_position(self, parent_id: str | None = None) -> int:
        """Position for a new last child of parent_id, as decided by the store."""
        position = await self.gateway.fetch_next_position(self.scope, parent_id)
        if position < 0:
            msg = f"Store returned negative next position {position} for {parent_id!r}"
            raise GatewayError(msg)
        return position

    def _is_present(self, node_id: str) -> bool:
        return node_id in self.drag.tree or self.children.contains_node(node_id)
