"""Tests for the crystal-mcp CLI."""

import json
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger
from typer.testing import CliRunner

from crystal_mcp.cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def _drop_log_sinks() -> Iterator[None]:
    """Each invocation adds a sink on the runner's stderr; remove it afterwards."""
    yield
    logger.remove()


def test_spec_command_prints_matched_document(project_root: Path) -> None:
    result = runner.invoke(app, ["spec", "temporal 3.0", "--root", str(project_root)])

    assert result.exit_code == 0, result.output
    assert "CRYSTALLIZATION_TEMPORAL_3.0.cp" in result.output
    assert "temporal crystallization protocol body" in result.output


def test_spec_command_without_match_shows_suggestions(project_root: Path) -> None:
    result = runner.invoke(app, ["spec", "nonexistent 9.9", "--root", str(project_root)])

    assert result.exit_code == 1
    assert "Suggestions:" in result.output
    assert "temporal crystallization 3 crystallization 0" in result.output


def test_codex_command_prints_matched_document(project_root: Path) -> None:
    result = runner.invoke(app, ["codex", "mechanism awareness", "-r", str(project_root)])

    assert result.exit_code == 0, result.output
    assert "mechanism awareness codex body" in result.output


def test_export_show_and_list_commands(project_root: Path) -> None:
    exported = runner.invoke(
        app, ["export", "--content", "crystal body", "--title", "CLI", "--root", str(project_root)]
    )
    assert exported.exit_code == 0, exported.output
    crystal_id = next(
        line.split(": ", 1)[1]
        for line in exported.output.splitlines()
        if line.startswith("Crystal exported: ")
    )

    shown = runner.invoke(app, ["show", crystal_id, "--root", str(project_root)])
    assert shown.exit_code == 0, shown.output
    assert "crystal body" in shown.output
    assert "Title: CLI" in shown.output

    listed = runner.invoke(app, ["list", "--root", str(project_root)])
    assert listed.exit_code == 0, listed.output
    assert crystal_id in listed.output
    assert "1 crystals" in listed.output


def test_export_reads_content_from_file(project_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "crystal.txt"
    source.write_text("from a file")

    result = runner.invoke(app, ["export", "--file", str(source), "--root", str(project_root)])

    assert result.exit_code == 0, result.output
    assert "auto-detected: False" in result.output


def test_export_without_content_fails(project_root: Path) -> None:
    result = runner.invoke(app, ["export", "--root", str(project_root)])

    assert result.exit_code == 1
    assert "No crystal artifact found" in result.output


def test_export_detect_from_marks_auto_detected(project_root: Path, tmp_path: Path) -> None:
    context = tmp_path / "context.txt"
    context.write_text("detected crystal")

    result = runner.invoke(
        app, ["export", "--detect-from", str(context), "--root", str(project_root)]
    )

    assert result.exit_code == 0, result.output
    assert "auto-detected: True" in result.output


def test_export_rejects_content_and_file_together(project_root: Path, tmp_path: Path) -> None:
    source = tmp_path / "crystal.txt"
    source.write_text("x")

    result = runner.invoke(
        app, ["export", "-c", "y", "-f", str(source), "--root", str(project_root)]
    )

    assert result.exit_code == 2


def test_show_missing_crystal_lists_available(project_root: Path) -> None:
    result = runner.invoke(app, ["show", "nonexistent-id", "--root", str(project_root)])

    assert result.exit_code == 1
    assert "Crystal not found: nonexistent-id" in result.output
    assert "No crystals found" in result.output


def test_list_json_output(project_root: Path) -> None:
    result = runner.invoke(app, ["list", "--json", "--root", str(project_root)])

    assert result.exit_code == 0, result.output
    assert json.loads(result.stdout) == {"crystals": [], "count": 0}


def test_tools_command_lists_registered_tools() -> None:
    result = runner.invoke(app, ["tools"])

    assert result.exit_code == 0, result.output
    for name in ("import_crystal_spec", "import_codex", "export_crystal", "import_crystal"):
        assert name in result.output


def test_root_falls_back_to_environment(
    project_root: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("CRYSTAL_MCP_ROOT", str(project_root))

    result = runner.invoke(app, ["spec", "basic 2.0"])

    assert result.exit_code == 0, result.output
    assert "basic crystallization protocol body" in result.output
