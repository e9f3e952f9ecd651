"""Shared test fixtures."""

import json
import sqlite3
from pathlib import Path
from typing import Any

import pytest

from menutree.core.database.schema import create_schema
from menutree.core.importer.json_reader import parse_menu_tree
from menutree.core.importer.loader import import_menu_file
from menutree.models.node import Forest
from tests.unit.sample_menus import MENU_TREE


@pytest.fixture
def menu_forest() -> Forest[dict[str, Any]]:
    """Return the sample menu tree as a forest."""
    return parse_menu_tree(MENU_TREE)


@pytest.fixture
def menu_file(tmp_path: Path) -> Path:
    path = tmp_path / "main-menu.json"
    path.write_text(json.dumps(MENU_TREE))
    return path


@pytest.fixture
def populated_db(menu_file: Path) -> sqlite3.Connection:
    """Return an in-memory DB with the sample tree imported as scope 'main'."""
    conn = sqlite3.connect(":memory:")
    create_schema(conn)
    import_menu_file(conn, menu_file, scope="main")
    return conn
