"""CLI for the local menu store (import, show, reorder)."""

import asyncio
import json
import sqlite3
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from menutree.config import DATABASE_FILENAME, DEFAULT_SCOPE, resolve_data_directory
from menutree.core.database.schema import migrate_schema
from menutree.core.drag.machine import DropOutcome
from menutree.core.importer.json_reader import forest_to_json
from menutree.core.importer.loader import import_menu_file
from menutree.core.tree.outline import render_outline
from menutree.editor import MenuTreeEditor
from menutree.errors import GatewayError
from menutree.gateway.sqlite import SqliteGateway
from menutree.logging_config import configure_logging
from menutree.models.node import MenuNode

app = typer.Typer(help="Menu tree: inspect and reorder navigation menus.")

DataDirOption = Annotated[
    Path | None,
    typer.Option("--data-dir", "-d", help="Menu database directory"),
]
ScopeOption = Annotated[str, typer.Option("--scope", "-s", help="Menu group")]


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Only log warnings and errors"),
) -> None:
    configure_logging(verbose=verbose, quiet=quiet)


def _open_db(data_dir: Path | None, *, create: bool = False) -> sqlite3.Connection:
    """Open the menu database, raising if it doesn't exist (unless create)."""
    dst = data_dir or resolve_data_directory()
    db_path = dst / DATABASE_FILENAME
    if not db_path.exists():
        if not create:
            logger.error("Menu database not found: {}. Run 'import' first.", db_path)
            raise typer.Exit(1)
        dst.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    migrate_schema(conn)
    return conn


def _label(node: MenuNode[Any]) -> str:
    payload = node.payload if isinstance(node.payload, dict) else {}
    label = payload.get("label")
    if label is None:
        translations = payload.get("translations") or []
        if translations and isinstance(translations[0], dict):
            label = translations[0].get("label")
    return str(label or payload.get("type") or node.id)


@app.command(name="import")
def import_cmd(
    source: Path = typer.Argument(..., help="JSON file with the nested menu tree"),
    scope: ScopeOption = DEFAULT_SCOPE,
    data_dir: DataDirOption = None,
    force: bool = typer.Option(False, "--force", "-f", help="Re-import even if unchanged"),
) -> None:
    """Replace a scope's menus with the tree stored in a JSON file."""
    if not source.exists():
        logger.error("Source file not found: {}", source)
        raise typer.Exit(1)

    conn = _open_db(data_dir, create=True)
    try:
        stats = import_menu_file(conn, source, scope=scope, force=force)
    except ValueError as e:
        typer.echo(f"Invalid menu file: {e}")
        raise typer.Exit(1) from e
    finally:
        conn.close()

    if stats.skipped:
        typer.echo(f"{source.name} unchanged, nothing imported.")
    else:
        typer.echo(f"Imported {stats.menus_imported} menus into '{scope}'")


@app.command()
def show(
    scope: ScopeOption = DEFAULT_SCOPE,
    max_depth: Annotated[
        int | None,
        typer.Option("--max-depth", "-m", help="Max depth levels to render"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Print a scope's menu tree as an outline."""
    conn = _open_db(data_dir)
    try:
        forest = asyncio.run(SqliteGateway(conn).fetch_tree(scope))
    finally:
        conn.close()

    if not forest.root_ids:
        typer.echo(f"No menus in '{scope}'.")
        return
    typer.echo(render_outline(forest, label=_label, max_depth=max_depth), nl=False)


@app.command()
def export(
    scope: ScopeOption = DEFAULT_SCOPE,
    data_dir: DataDirOption = None,
) -> None:
    """Print a scope's menu tree as nested JSON."""
    conn = _open_db(data_dir)
    try:
        forest = asyncio.run(SqliteGateway(conn).fetch_tree(scope))
    finally:
        conn.close()
    typer.echo(json.dumps(forest_to_json(forest), indent=2))


@app.command()
def move(
    source_id: str = typer.Argument(..., help="Menu to move"),
    target_id: str = typer.Argument(..., help="Sibling whose slot it takes"),
    scope: ScopeOption = DEFAULT_SCOPE,
    data_dir: DataDirOption = None,
) -> None:
    """Move a menu to a sibling's position, as a drag-and-drop would."""
    conn = _open_db(data_dir)
    try:
        editor = MenuTreeEditor(SqliteGateway(conn), scope)

        async def run() -> DropOutcome:
            await editor.load()
            return await editor.move(source_id, target_id)

        outcome = asyncio.run(run())
    finally:
        conn.close()

    messages = {
        DropOutcome.COMMITTED: f"Moved {source_id} to the slot of {target_id}.",
        DropOutcome.UNCHANGED: "Order unchanged.",
        DropOutcome.REJECTED: "Menus must share the same parent.",
        DropOutcome.IGNORED: f"Menu '{source_id}' not found in '{scope}'.",
        DropOutcome.ROLLED_BACK: "Reorder failed; nothing was changed.",
    }
    typer.echo(messages[outcome])
    if outcome in (DropOutcome.REJECTED, DropOutcome.IGNORED, DropOutcome.ROLLED_BACK):
        raise typer.Exit(1)


@app.command(name="next-position")
def next_position(
    scope: ScopeOption = DEFAULT_SCOPE,
    parent: Annotated[
        str | None,
        typer.Option("--parent", "-p", help="Parent menu id (omit for root level)"),
    ] = None,
    data_dir: DataDirOption = None,
) -> None:
    """Print the position a new menu would take under a parent."""
    conn = _open_db(data_dir)
    try:
        editor = MenuTreeEditor(SqliteGateway(conn), scope)
        position = asyncio.run(editor.next_position(parent))
    except GatewayError as e:
        typer.echo(str(e))
        raise typer.Exit(1) from e
    finally:
        conn.close()
    typer.echo(str(position))


@app.command()
def scopes(data_dir: DataDirOption = None) -> None:
    """List all menu groups in the store."""
    conn = _open_db(data_dir)
    try:
        names = SqliteGateway(conn).scopes()
    finally:
        conn.close()
    typer.echo(f"{len(names)} scopes:\n")
    for name in names:
        typer.echo(f"  {name}")
