"""Tests for the menutree CLI."""

import json
from pathlib import Path

from typer.testing import CliRunner

from menutree.cli import app

runner = CliRunner()


def _setup_and_import(tmp_path: Path, menu_file: Path) -> Path:
    """Helper: import the sample tree, return the data dir."""
    data = tmp_path / "data"
    result = runner.invoke(app, ["import", str(menu_file), "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    return data


def test_import_creates_database(tmp_path: Path, menu_file: Path) -> None:
    data = tmp_path / "data"
    result = runner.invoke(app, ["import", str(menu_file), "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "Imported 8 menus into 'main'" in result.output
    assert (data / "menus.db").exists()


def test_second_import_is_skipped(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["import", str(menu_file), "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "main-menu.json unchanged" in result.output


def test_import_missing_source_fails(tmp_path: Path) -> None:
    result = runner.invoke(
        app, ["import", str(tmp_path / "nope.json"), "--data-dir", str(tmp_path / "data")]
    )
    assert result.exit_code == 1


def test_show_renders_outline(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["show", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "- Shop  [1] id=B" in result.output
    assert "        - Founders  [0] id=C1a" in result.output


def test_show_without_database_fails(tmp_path: Path) -> None:
    result = runner.invoke(app, ["show", "--data-dir", str(tmp_path / "empty")])
    assert result.exit_code == 1


def test_show_empty_scope(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["show", "--scope", "footer", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "No menus in 'footer'." in result.output


def test_move_persists_new_order(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["move", "B3", "B1", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "Moved B3 to the slot of B1." in result.output

    exported = runner.invoke(app, ["export", "--data-dir", str(data)])
    assert exported.exit_code == 0, exported.output
    shop = json.loads(exported.output)[1]
    assert [c["id"] for c in shop["children"]] == ["B3", "B1", "B2"]


def test_move_across_parents_is_rejected(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["move", "B1", "C", "--data-dir", str(data)])
    assert result.exit_code == 1
    assert "Menus must share the same parent." in result.output


def test_move_unknown_menu_fails(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["move", "zzz", "A", "--data-dir", str(data)])
    assert result.exit_code == 1
    assert "Menu 'zzz' not found in 'main'." in result.output


def test_move_onto_itself_is_unchanged(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["move", "A", "A", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "Order unchanged." in result.output


def test_export_outputs_nested_json(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["export", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    parsed = json.loads(result.output)
    assert [m["id"] for m in parsed] == ["A", "B", "C"]
    assert parsed[2]["children"][0]["children"][0]["label"] == "Founders"


def test_next_position(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["next-position", "--parent", "B", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert result.output.strip() == "3"


def test_scopes_lists_groups(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    runner.invoke(app, ["import", str(menu_file), "-s", "footer", "--data-dir", str(data)])
    result = runner.invoke(app, ["scopes", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert "2 scopes:" in result.output
    assert "  footer" in result.output


def test_quiet_export_still_prints_json(tmp_path: Path, menu_file: Path) -> None:
    data = _setup_and_import(tmp_path, menu_file)
    result = runner.invoke(app, ["-q", "export", "--scope", "footer", "--data-dir", str(data)])
    assert result.exit_code == 0, result.output
    assert json.loads(result.output) == []
