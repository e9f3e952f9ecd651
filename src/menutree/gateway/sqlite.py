"""Menu store backed by the local SQLite database."""

import json
import sqlite3
import time
from collections.abc import Sequence
from typing import Any

from loguru import logger

from menutree.core.tree.operations import build_forest
from menutree.errors import GatewayError, ReorderConflictError
from menutree.models.node import Forest, MenuNode, ReorderItem


def _row_to_node(row: tuple[Any, ...]) -> MenuNode[dict[str, Any]]:
    node_id, parent_id, position, payload = row
    return MenuNode(id=node_id, parent_id=parent_id, position=position, payload=json.loads(payload))


class SqliteGateway:
    """Persistence gateway over a ``menus`` table.

    Each reorder request is validated as a whole and applied in one
    transaction, so either every row changes or none does.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    async def fetch_tree(self, scope: str) -> Forest[dict[str, Any]]:
        rows = self._query(
            "SELECT id, parent_id, position, payload FROM menus WHERE scope = ?", (scope,)
        )
        try:
            return build_forest(_row_to_node(r) for r in rows)
        except ValueError as e:
            msg = f"Stored menu tree for {scope!r} is inconsistent: {e}"
            raise GatewayError(msg) from e

    async def fetch_children(self, scope: str, parent_id: str) -> list[MenuNode[dict[str, Any]]]:
        rows = self._query(
            "SELECT id, parent_id, position, payload FROM menus "
            "WHERE scope = ? AND parent_id = ? ORDER BY position",
            (scope, parent_id),
        )
        return [_row_to_node(r) for r in rows]

    async def fetch_next_position(self, scope: str, parent_id: str | None = None) -> int:
        rows = self._query(
            "SELECT MAX(position) FROM menus WHERE scope = ? AND parent_id IS ?",
            (scope, parent_id),
        )
        latest = rows[0][0] if rows else None
        return 0 if latest is None else latest + 1

    async def commit_reorder(self, scope: str, items: Sequence[ReorderItem]) -> None:
        parents = dict(
            self._query("SELECT id, parent_id FROM menus WHERE scope = ?", (scope,))
        )
        _validate_reorder(scope, items, parents)

        now_ms = int(time.time() * 1000)
        try:
            self.conn.executemany(
                "UPDATE menus SET parent_id = ?, position = ?, updated_at = ? "
                "WHERE scope = ? AND id = ?",
                [(item.parent_id, item.position, now_ms, scope, item.id) for item in items],
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            msg = f"Failed to reorder menus in {scope!r}: {e}"
            raise GatewayError(msg) from e
        logger.debug("Stored new order for {} menus in {!r}", len(items), scope)

    def scopes(self) -> list[str]:
        """All menu groups present in the store."""
        return [r[0] for r in self._query("SELECT DISTINCT scope FROM menus ORDER BY scope", ())]

    def _query(self, sql: str, params: tuple[Any, ...]) -> list[tuple[Any, ...]]:
        try:
            return self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            msg = f"Menu store query failed: {e}"
            raise GatewayError(msg) from e


def _validate_reorder(
    scope: str, items: Sequence[ReorderItem], parents: dict[str, str | None]
) -> None:
    """Reject requests that would leave the stored tree inconsistent."""
    positions_by_parent: dict[str | None, set[int]] = {}
    for item in items:
        if item.id not in parents:
            msg = f"Menu {item.id!r} does not exist in {scope!r}"
            raise ReorderConflictError(msg)
        if item.parent_id is not None and item.parent_id not in parents:
            msg = f"Parent {item.parent_id!r} of {item.id!r} does not exist in {scope!r}"
            raise ReorderConflictError(msg)
        if item.position < 0:
            msg = f"Negative position {item.position} for {item.id!r}"
            raise ReorderConflictError(msg)
        taken = positions_by_parent.setdefault(item.parent_id, set())
        if item.position in taken:
            parent_key = item.parent_id or "root"
            msg = f"Duplicate position {item.position} found for parent {parent_key}"
            raise ReorderConflictError(msg)
        taken.add(item.position)

    resulting = {**parents, **{item.id: item.parent_id for item in items}}
    for node_id in resulting:
        seen = {node_id}
        parent = resulting[node_id]
        while parent is not None:
            if parent in seen:
                msg = f"Reorder would create a cycle through {parent!r}"
                raise ReorderConflictError(msg)
            seen.add(parent)
            parent = resulting.get(parent)
