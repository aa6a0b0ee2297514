from __future__ import annotations

import json
from pathlib import Path

import pytest

pytest.importorskip("PySide6", reason="PySide6 is required for CLI tests", exc_type=ImportError)
pytest.importorskip("typer", reason="typer is required for CLI tests", exc_type=ImportError)

from typer.testing import CliRunner

from layermap.cli import app

runner = CliRunner()


def test_tree_command_lists_nodes(qapp, project_file: Path) -> None:
    result = runner.invoke(app, ["tree", str(project_file), "--show", "streams"])

    assert result.exit_code == 0, result.output
    for name in ("Transport", "roads", "Rivers", "streams", "tiles"):
        assert name in result.output
    assert "table_only" not in result.output
    assert "exclusive" in result.output


def test_tree_command_warns_about_unknown_nodes(qapp, project_file: Path) -> None:
    result = runner.invoke(app, ["tree", str(project_file), "--hide", "nowhere"])

    assert result.exit_code == 0
    assert "Unknown layer or group: nowhere" in result.output


def test_baselayers_command_switches(qapp, project_file: Path) -> None:
    result = runner.invoke(app, ["baselayers", str(project_file), "--select", "ortho"])

    assert result.exit_code == 0, result.output
    assert "ortho" in result.output
    assert "empty base layer available" in result.output
    assert "200000.00, 6000000.00, 300000.00, 6100000.00" in result.output


def test_configuration_errors_exit_with_status_one(qapp, tmp_path: Path, project_payload: dict) -> None:
    del project_payload["layers"]["roads"]["extent"]
    path = tmp_path / "project.json"
    path.write_text(json.dumps(project_payload), encoding="utf-8")

    result = runner.invoke(app, ["tree", str(path)])

    assert result.exit_code == 1
    assert "missing required field" in result.output
