"""Drag-and-drop interaction state for reordering menu siblings."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic

from loguru import logger

from menutree.core.tree.diff import flatten, has_changed
from menutree.core.tree.operations import clone_tree, locate
from menutree.core.tree.reorder import reorder
from menutree.errors import GatewayError
from menutree.models.node import Forest, P
from menutree.notify import LogNotifier
from menutree.protocols import GatewayProtocol, NotifierProtocol


@dataclass(frozen=True)
class Idle:
    """No gesture in progress."""


@dataclass(frozen=True)
class Dragging:
    """A node was picked up; no valid target hovered yet."""

    source_id: str
    snapshot: Forest[Any]


@dataclass(frozen=True)
class Previewing:
    """A preview has been applied for at least one valid target.

    ``target_id`` is the target currently hovered (None after drag-leave);
    ``last_target_id`` is the last target a preview was computed for. Hovering a
    node under another parent clears it, the preview itself stays rendered.
    """

    source_id: str
    snapshot: Forest[Any]
    target_id: str | None
    last_target_id: str | None


@dataclass(frozen=True)
class Committing:
    """The working tree has been sent to the store; waiting for the answer."""

    source_id: str
    snapshot: Forest[Any]


InteractionState = Idle | Dragging | Previewing | Committing


class DropOutcome(StrEnum):
    IGNORED = "ignored"
    REJECTED = "rejected"
    UNCHANGED = "unchanged"
    COMMITTED = "committed"
    ROLLED_BACK = "rolled_back"


class DragController(Generic[P]):
    """Owns the working tree and the single active drag gesture.

    Previews replace the working tree as the pointer moves; the last preview is
    what gets committed on drop. A failed commit restores the pre-drag snapshot.
    """

    def __init__(
        self,
        tree: Forest[P],
        gateway: GatewayProtocol,
        scope: str,
        *,
        notifier: NotifierProtocol | None = None,
        on_committed: Callable[[], Awaitable[None]] | None = None,
    ) -> None:
        self.tree = tree
        self.state: InteractionState = Idle()
        self.scope = scope
        self._gateway = gateway
        self._notifier = notifier or LogNotifier()
        self._on_committed = on_committed

    @property
    def is_committing(self) -> bool:
        return isinstance(self.state, Committing)

    @property
    def dragged_id(self) -> str | None:
        if isinstance(self.state, Idle):
            return None
        return self.state.source_id

    @property
    def drag_over_id(self) -> str | None:
        if isinstance(self.state, Previewing):
            return self.state.target_id
        return None

    def replace_tree(self, tree: Forest[P]) -> bool:
        """Install a freshly loaded canonical tree. Refused during a gesture."""
        if not isinstance(self.state, Idle):
            logger.debug("Not replacing tree while {}", type(self.state).__name__)
            return False
        self.tree = tree
        return True

    def start_drag(self, node_id: str) -> bool:
        """Pick up node_id. Returns False if the drag is refused."""
        if not isinstance(self.state, Idle):
            logger.debug("Drag of {} refused while {}", node_id, type(self.state).__name__)
            return False
        if locate(self.tree, node_id) is None:
            return False
        self.state = Dragging(source_id=node_id, snapshot=clone_tree(self.tree))
        logger.debug("Drag started: {}", node_id)
        return True

    def drag_over(self, target_id: str) -> bool:
        """Hover target_id. Returns whether dropping there is allowed."""
        state = self.state
        if not isinstance(state, Dragging | Previewing):
            return False

        if target_id == state.source_id:
            return True
        if isinstance(state, Previewing) and state.target_id == target_id:
            return True
        if not self._same_parent(state.source_id, target_id):
            if isinstance(state, Previewing):
                self.state = Previewing(
                    source_id=state.source_id,
                    snapshot=state.snapshot,
                    target_id=None,
                    last_target_id=None,
                )
            return False

        preview = reorder(self.tree, state.source_id, target_id)
        if preview is not None:
            self.tree = preview
        self.state = Previewing(
            source_id=state.source_id,
            snapshot=state.snapshot,
            target_id=target_id,
            last_target_id=target_id,
        )
        logger.debug("Preview: {} over {}", state.source_id, target_id)
        return True

    def drag_leave(self, target_id: str) -> None:
        """The pointer left target_id. The last preview stays rendered."""
        state = self.state
        if isinstance(state, Previewing) and state.target_id == target_id:
            self.state = Previewing(
                source_id=state.source_id,
                snapshot=state.snapshot,
                target_id=None,
                last_target_id=state.last_target_id,
            )

    def cancel(self) -> None:
        """The gesture ended without a drop; put the tree back as it was."""
        state = self.state
        if isinstance(state, Dragging | Previewing):
            self.tree = state.snapshot
            self.state = Idle()
            logger.debug("Drag of {} cancelled", state.source_id)

    async def drop(self, target_id: str) -> DropOutcome:
        """Finish the gesture on target_id and commit the previewed order if it changed.

        target_id must share the dragged node's parent. Dropping onto the dragged
        node itself counts as a drop on the last valid target.
        """
        state = self.state
        if not isinstance(state, Dragging | Previewing):
            return DropOutcome.IGNORED

        effective_target = target_id
        if target_id == state.source_id and isinstance(state, Previewing):
            effective_target = state.last_target_id or target_id
        if not self._same_parent(state.source_id, effective_target):
            # Rejected drops discard the uncommitted preview.
            self.tree = state.snapshot
            self.state = Idle()
            self._notifier.notify(
                "You can only reorder items within the same parent menu", level="info"
            )
            return DropOutcome.REJECTED

        items = flatten(self.tree)
        if not has_changed(flatten(state.snapshot), items):
            self.state = Idle()
            logger.debug("Drop of {} left the order unchanged", state.source_id)
            return DropOutcome.UNCHANGED

        self.state = Committing(source_id=state.source_id, snapshot=state.snapshot)
        try:
            await self._gateway.commit_reorder(self.scope, items)
        except GatewayError as e:
            self.tree = state.snapshot
            self.state = Idle()
            logger.warning("Reorder of {} failed, restored previous order: {}", self.scope, e)
            self._notifier.notify("Failed to reorder menus", level="error")
            return DropOutcome.ROLLED_BACK
        except BaseException:
            self.tree = state.snapshot
            self.state = Idle()
            raise

        self.state = Idle()
        logger.info("Committed new order for {} ({} items)", self.scope, len(items))
        self._notifier.notify("Menu order updated", level="success")
        if self._on_committed is not None:
            try:
                await self._on_committed()
            except Exception:
                logger.exception("Post-commit hook failed for {}", self.scope)
        return DropOutcome.COMMITTED

    def _same_parent(self, source_id: str, target_id: str) -> bool:
        source = locate(self.tree, source_id)
        target = locate(self.tree, target_id)
        if source is None or target is None:
            return False
        return source.parent_id == target.parent_id
