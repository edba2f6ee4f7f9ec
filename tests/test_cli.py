import json
from pathlib import Path

import yaml
from typer.testing import CliRunner

from app.cli import app

runner = CliRunner()


def _setup(tmp_path: Path, version: int = 1) -> Path:
    remote_dir = tmp_path / "remote"
    remote_dir.mkdir(exist_ok=True)
    items = [
        {"type": "rune", "name": "El Rune", "description": "Rune #1", "tags": ["el"]},
        {"type": "rune", "name": "Eld Rune", "description": "Rune #2", "tags": ["eld"]},
        {"type": "quest", "name": "Den of Evil", "description": "Act 1 quest", "tags": []},
    ]
    (remote_dir / "db_version.json").write_text(json.dumps({"version": version}))
    (remote_dir / "data.json").write_text(json.dumps({"version": version, "items": items}))

    config_file = tmp_path / "runebook.yaml"
    config_data = {
        "db_path": str(tmp_path / "items.db"),
        "remote": {"source_type": "directory", "directory": str(remote_dir)},
        "show_progress_bar": False,
        "log_level": "WARNING",
    }
    with open(config_file, "w") as f:
        yaml.dump(config_data, f)
    return config_file


def test_sync_then_up_to_date(tmp_path):
    config_file = _setup(tmp_path)

    result = runner.invoke(app, ["sync", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "Updated to v1 (3 seed items)" in result.output

    result = runner.invoke(app, ["sync", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "Already up to date (v1)" in result.output


def test_sync_missing_remote_fails(tmp_path):
    config_file = _setup(tmp_path)
    (tmp_path / "remote" / "db_version.json").unlink()

    result = runner.invoke(app, ["sync", "--config", str(config_file)])
    assert result.exit_code == 1


def test_search_filters_by_keyword_and_category(tmp_path):
    config_file = _setup(tmp_path)

    result = runner.invoke(app, ["search", "RUNE", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "El Rune" in result.output
    assert "Eld Rune" in result.output
    assert "Den of Evil" not in result.output

    result = runner.invoke(
        app, ["search", "rune", "--category", "quest", "--no-refresh", "--config", str(config_file)]
    )
    assert result.exit_code == 0
    assert "No items match your search." in result.output


def test_search_rejects_unknown_category(tmp_path):
    config_file = _setup(tmp_path)
    result = runner.invoke(app, ["search", "--category", "charm", "--config", str(config_file)])
    assert result.exit_code == 1


def test_add_remove_and_status(tmp_path):
    config_file = _setup(tmp_path)
    assert runner.invoke(app, ["sync", "--config", str(config_file)]).exit_code == 0

    result = runner.invoke(
        app,
        [
            "add",
            "--name", "Insight",
            "--description", "Ral Tir Tal Sol",
            "--category", "runeword",
            "--config", str(config_file),
        ],
    )
    assert result.exit_code == 0
    assert "[USER]" in result.output
    assert "Saved item #4" in result.output

    result = runner.invoke(app, ["status", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "Data version: v1" in result.output
    assert "Seed items:   3" in result.output
    assert "Custom items: 1" in result.output

    result = runner.invoke(app, ["remove", "1", "--config", str(config_file)])
    assert result.exit_code == 1

    result = runner.invoke(app, ["remove", "4", "--config", str(config_file)])
    assert result.exit_code == 0
    assert "Removed item #4" in result.output


def test_add_rejects_blank_description(tmp_path):
    config_file = _setup(tmp_path)
    result = runner.invoke(
        app,
        ["add", "--name", "Zod", "--description", " ", "--category", "rune", "--config", str(config_file)],
    )
    assert result.exit_code == 1


def test_invalid_config_path(tmp_path):
    result = runner.invoke(app, ["status", "--config", str(tmp_path / "missing.yaml")])
    assert result.exit_code == 1


def test_init_config_writes_defaults(tmp_path):
    target = tmp_path / "runebook.yaml"
    result = runner.invoke(app, ["init-config", str(target)])
    assert result.exit_code == 0
    data = yaml.safe_load(target.read_text())
    assert data["db_path"] == "data/runebook.db"
    assert data["remote"]["source_type"] == "directory"
