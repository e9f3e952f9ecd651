"""Import a menu JSON export into the local SQLite store."""

import hashlib
import json
import sqlite3
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from menutree.core.database.schema import get_metadata, set_metadata
from menutree.core.importer.json_reader import parse_menu_tree
from menutree.core.tree.operations import iter_preorder
from menutree.models.node import Forest


@dataclass(frozen=True)
class ImportStats:
    """Summary of an import operation."""

    menus_imported: int
    skipped: bool = False


def _file_hash(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def insert_forest(conn: sqlite3.Connection, scope: str, forest: Forest[dict[str, Any]]) -> None:
    now_ms = int(time.time() * 1000)
    conn.executemany(
        """INSERT OR REPLACE INTO menus
           (id, scope, parent_id, position, payload, updated_at)
           VALUES (?, ?, ?, ?, ?, ?)""",
        [
            (n.id, scope, n.parent_id, n.position, json.dumps(n.payload, sort_keys=True), now_ms)
            for n in iter_preorder(forest)
        ],
    )


def import_menu_file(
    conn: sqlite3.Connection,
    path: Path,
    *,
    scope: str,
    force: bool = False,
) -> ImportStats:
    """Replace all menus of a scope with the nested tree stored in a JSON file.

    Args:
        conn: SQLite connection (schema must already exist).
        path: JSON file holding a list of root menus with nested ``children``.
        scope: Menu group the file belongs to.
        force: Re-import even if the file hasn't changed since the last import.

    Returns:
        ImportStats with the number of menus written.
    """
    hash_key = f"import_hash:{scope}"
    source_hash = _file_hash(path)
    if not force and get_metadata(conn, hash_key) == source_hash:
        logger.debug("Skipping {}: unchanged since last import", path.name)
        return ImportStats(menus_imported=0, skipped=True)

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        msg = f"Expected a list of root menus in {path}, got {type(data).__name__}"
        raise ValueError(msg)
    forest = parse_menu_tree(data)

    try:
        conn.execute("DELETE FROM menus WHERE scope = ?", (scope,))
        insert_forest(conn, scope, forest)
        conn.commit()
    except Exception:
        conn.rollback()
        logger.exception("Failed to import {}", path.name)
        raise

    set_metadata(conn, hash_key, source_hash)
    logger.info("Imported {} menus into scope {!r}", len(forest), scope)
    return ImportStats(menus_imported=len(forest))
