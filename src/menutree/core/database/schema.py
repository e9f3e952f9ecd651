"""SQLite schema creation and migration for the local menu store."""

import sqlite3

SCHEMA_VERSION = 1

_SCHEMA_SQL = """\
CREATE TABLE IF NOT EXISTS menus (
    id TEXT NOT NULL,
    scope TEXT NOT NULL,
    parent_id TEXT,
    position INTEGER NOT NULL CHECK (position >= 0),
    payload TEXT NOT NULL DEFAULT '{}',
    updated_at INTEGER NOT NULL,
    PRIMARY KEY (scope, id)
);

CREATE INDEX IF NOT EXISTS idx_menus_parent ON menus(scope, parent_id, position);

CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL
);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create all tables and indexes."""
    conn.executescript(_SCHEMA_SQL)
    set_metadata(conn, "schema_version", str(SCHEMA_VERSION))


def get_schema_version(conn: sqlite3.Connection) -> int | None:
    """Return the current schema version, or None if metadata table doesn't exist."""
    try:
        row = conn.execute("SELECT value FROM metadata WHERE key = 'schema_version'").fetchone()
    except sqlite3.OperationalError:
        return None
    return int(row[0]) if row else None


def migrate_schema(conn: sqlite3.Connection) -> None:
    """Create or migrate the database schema to the latest version."""
    version = get_schema_version(conn)
    if version is None:
        create_schema(conn)


def get_metadata(conn: sqlite3.Connection, key: str) -> str | None:
    row = conn.execute("SELECT value FROM metadata WHERE key = ?", (key,)).fetchone()
    return row[0] if row else None


def set_metadata(conn: sqlite3.Connection, key: str, value: str) -> None:
    conn.execute("INSERT OR REPLACE INTO metadata (key, value) VALUES (?, ?)", (key, value))
    conn.commit()
