"""Lazily fetched child lists, keyed by parent node id."""

import asyncio
import itertools
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Generic

from loguru import logger

from menutree.errors import GatewayError
from menutree.models.node import MenuNode, P
from menutree.protocols import GatewayProtocol


class EntryState(StrEnum):
    ABSENT = "absent"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(frozen=True)
class ChildEntry(Generic[P]):
    """Cached children of one parent.

    While LOADING, ``children`` still holds the previous result so a re-expanded
    node can show it until the fresh list arrives.
    """

    state: EntryState = EntryState.ABSENT
    children: tuple[MenuNode[P], ...] = ()
    generation: int = 0


class LazyChildCache(Generic[P]):
    """Tracks expanded nodes and their most recently fetched children.

    Entries are always replaced whole. Only the newest request for a key may
    write its entry, so a slow earlier fetch can never overwrite a later one.
    """

    def __init__(
        self,
        gateway: GatewayProtocol,
        scope: str,
        *,
        is_present: Callable[[str], bool] | None = None,
    ) -> None:
        self._gateway = gateway
        self.scope = scope
        self._is_present = is_present or (lambda _node_id: True)
        self._entries: dict[str, ChildEntry[P]] = {}
        self._generations = itertools.count(1)
        self.expanded: set[str] = set()

    def entry(self, node_id: str) -> ChildEntry[P]:
        return self._entries.get(node_id, ChildEntry())

    def is_expanded(self, node_id: str) -> bool:
        return node_id in self.expanded

    def is_loading(self, node_id: str) -> bool:
        return self.entry(node_id).state is EntryState.LOADING

    def children_for(self, node_id: str) -> tuple[MenuNode[P], ...] | None:
        """Cached children to display, or None when nothing usable is cached."""
        entry = self._entries.get(node_id)
        if entry is None:
            return None
        if entry.state is EntryState.LOADED:
            return entry.children
        if entry.state is EntryState.LOADING and entry.children:
            return entry.children
        return None

    def contains_node(self, node_id: str) -> bool:
        """True if node_id appears in any cached child list."""
        return any(
            child.id == node_id for entry in self._entries.values() for child in entry.children
        )

    async def expand(self, node_id: str) -> bool:
        """Mark node_id expanded and fetch its children.

        Returns True when fresh children were stored. On failure the node is
        collapsed again; expanding it once more retries.
        """
        self.expanded.add(node_id)
        return await self._fetch(node_id, collapse_on_failure=True)

    def collapse(self, node_id: str) -> None:
        """Hide a node's children; its cache entry is kept for the next expand."""
        self.expanded.discard(node_id)

    async def toggle(self, node_id: str) -> bool:
        if node_id in self.expanded:
            self.collapse(node_id)
            return False
        return await self.expand(node_id)

    async def refresh_expanded(self) -> None:
        """Re-fetch children of every expanded node concurrently."""
        node_ids = sorted(self.expanded)
        if not node_ids:
            return
        logger.debug("Refreshing children of {} expanded nodes", len(node_ids))
        await asyncio.gather(
            *(self._fetch(node_id, collapse_on_failure=False) for node_id in node_ids)
        )

    def clear(self) -> None:
        self._entries.clear()
        self.expanded.clear()

    async def _fetch(self, node_id: str, *, collapse_on_failure: bool) -> bool:
        generation = next(self._generations)
        previous = self.entry(node_id)
        self._entries[node_id] = ChildEntry(EntryState.LOADING, previous.children, generation)

        try:
            children: list[MenuNode[Any]] = await self._gateway.fetch_children(
                self.scope, node_id
            )
        except GatewayError as e:
            if not self._is_current(node_id, generation):
                return False
            logger.warning("Failed to load children of {}: {}", node_id, e)
            if collapse_on_failure:
                self._entries[node_id] = ChildEntry(
                    EntryState.FAILED, previous.children, generation
                )
                self.expanded.discard(node_id)
            else:
                # Keep showing what was there before the refresh.
                state = EntryState.LOADED if previous.children else EntryState.FAILED
                self._entries[node_id] = ChildEntry(state, previous.children, generation)
            return False

        if not self._is_current(node_id, generation):
            logger.debug("Discarding superseded children of {}", node_id)
            return False

        if not self._is_present(node_id):
            logger.debug("Discarding children of {}: node is no longer in the tree", node_id)
            self._entries.pop(node_id, None)
            self.expanded.discard(node_id)
            return False

        self._entries[node_id] = ChildEntry(EntryState.LOADED, tuple(children), generation)
        logger.debug("Loaded {} children of {}", len(children), node_id)
        return True

    def _is_current(self, node_id: str, generation: int) -> bool:
        entry = self._entries.get(node_id)
        return entry is not None and entry.generation == generation
