"""Tests for application configuration and the startup sequence."""

from __future__ import annotations

import os
from pathlib import Path

import pytest
import yaml

from app.config import AppConfig, load_config, save_config
from app.context import SAVE_FAILED_MESSAGE, build_context
from remote.sources import DirectorySource, StaticRemoteSource
from runebook_core.errors import PersistenceError, StorageUnavailable
from runebook_core.reconciler import RefreshState
from ui.collaborator import RecordingUI


SEED = [
    {"type": "rune", "name": "El Rune", "description": "Rune #1"},
    {"type": "rune", "name": "Eld Rune", "description": "Rune #2"},
    {"type": "quest", "name": "Den of Evil", "description": "Act 1 quest"},
]


class TestAppConfig:
    def test_load_config_from_yaml(self, tmp_path: Path) -> None:
        config_path = tmp_path / "runebook.yaml"
        config_data = {
            "db_path": str(tmp_path / "items.db"),
            "remote": {"source_type": "http", "base_url": "https://example.test/d2r"},
            "refresh_on_startup": False,
            "log_level": "DEBUG",
        }
        with open(config_path, "w") as f:
            yaml.dump(config_data, f)

        config = load_config(config_path)

        assert config.db_path == str(tmp_path / "items.db")
        assert config.remote.source_type == "http"
        assert config.remote.base_url == "https://example.test/d2r"
        assert config.remote.version_path == "db_version.json"
        assert config.refresh_on_startup is False
        assert config.watermark_key == "d2r_data_version"

    def test_load_config_missing_file(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("nonexistent.yaml")

    def test_load_config_empty_file(self, tmp_path: Path) -> None:
        config_path = tmp_path / "empty.yaml"
        config_path.write_text("")
        with pytest.raises(ValueError):
            load_config(config_path)

    def test_load_config_bad_source_type(self, tmp_path: Path) -> None:
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("remote:\n  source_type: ftp\n")
        with pytest.raises(ValueError, match="Invalid configuration"):
            load_config(config_path)

    def test_load_config_malformed_yaml(self, tmp_path: Path) -> None:
        config_path = tmp_path / "broken.yaml"
        config_path.write_text("remote: [unclosed\n")
        with pytest.raises(ValueError, match="not valid YAML"):
            load_config(config_path)

    def test_load_config_rejects_top_level_list(self, tmp_path: Path) -> None:
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- db_path: items.db\n")
        with pytest.raises(ValueError, match="mapping"):
            load_config(config_path)

    def test_save_and_reload(self, tmp_path: Path) -> None:
        config = AppConfig(db_path=str(tmp_path / "items.db"), log_level="WARNING")
        config_path = tmp_path / "nested" / "runebook.yaml"

        save_config(config, config_path)

        assert load_config(config_path) == config

    def test_env_file_only_sets_runebook_keys(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        import run

        env_path = tmp_path / ".env"
        env_path.write_text(
            "# local overrides\n"
            "RUNEBOOK_REMOTE_URL=\"https://example.test/d2r\"\n"
            "RUNEBOOK_CONFIG=from-file.yaml\n"
            "UNRELATED_TOKEN=secret\n"
        )
        monkeypatch.delenv("RUNEBOOK_REMOTE_URL", raising=False)
        monkeypatch.setenv("RUNEBOOK_CONFIG", "already-set.yaml")
        monkeypatch.delenv("UNRELATED_TOKEN", raising=False)

        run.load_env_file(env_path)

        assert os.environ["RUNEBOOK_REMOTE_URL"] == "https://example.test/d2r"
        assert os.environ["RUNEBOOK_CONFIG"] == "already-set.yaml"
        assert "UNRELATED_TOKEN" not in os.environ
        monkeypatch.delenv("RUNEBOOK_REMOTE_URL")


class TestAppContext:
    def _context(self, tmp_path: Path, source: StaticRemoteSource, ui: RecordingUI):
        config = AppConfig(db_path=str(tmp_path / "items.db"))
        return build_context(config, ui=ui, source=source)

    def test_build_context_uses_configured_source(self, tmp_path: Path) -> None:
        config = AppConfig(db_path=str(tmp_path / "items.db"))
        config.remote.directory = str(tmp_path / "remote")
        ctx = build_context(config)
        assert isinstance(ctx.source, DirectorySource)

    def test_startup_refreshes_then_renders_once(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=1, items=SEED), ui)

        outcome = ctx.startup()

        assert outcome is not None
        assert outcome.state is RefreshState.COMMITTED
        assert ui.names().count("render_results") == 1
        assert [record.name for record in ui.last_results] == ["El Rune", "Eld Rune", "Den of Evil"]

    def test_startup_renders_after_silent_version_failure(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=None), ui)

        outcome = ctx.startup()

        assert outcome is not None
        assert outcome.state is RefreshState.FAILED
        assert ui.names() == ["render_empty_state"]

    def test_startup_without_refresh(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        source = StaticRemoteSource(version=1, items=SEED)
        ctx = self._context(tmp_path, source, ui)
        ctx.config.refresh_on_startup = False

        assert ctx.startup() is None
        assert source.get_metrics()["version_fetches"] == 0

    def test_startup_storage_unavailable_is_fatal(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        config = AppConfig(db_path=str(blocker / "items.db"))
        ctx = build_context(config, ui=RecordingUI(), source=StaticRemoteSource(version=1))

        with pytest.raises(StorageUnavailable):
            ctx.startup()

    def test_submit_item_validates_before_store(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=1, items=SEED), ui)
        ctx.connect()

        assert ctx.submit_item("rune", "", "no name") is None
        assert ui.errors == ["Both name and description are required."]
        assert ctx.store.query_all() == []

    def test_submit_item_inserts_and_reruns_search(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=1, items=SEED), ui)
        ctx.startup()
        ctx.session.keyword = "insight"

        item_id = ctx.submit_item("runeword", "Insight", "Ral Tir Tal Sol")

        assert item_id is not None
        assert [record.id for record in ui.last_results] == [item_id]
        assert ui.last_results[0].is_custom
        assert ui.last_results[0].tags == ["Insight", "runeword"]

    def test_submit_item_reports_persistence_error(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=1), ui)
        ctx.connect()

        def _fail(item: object) -> int:
            raise PersistenceError("disk full")

        monkeypatch.setattr(ctx.store, "insert_custom", _fail)

        assert ctx.submit_item("rune", "Zod Rune", "Rune #33") is None
        assert ui.errors == [SAVE_FAILED_MESSAGE]

    def test_remove_item_only_removes_custom(self, tmp_path: Path) -> None:
        ui = RecordingUI()
        ctx = self._context(tmp_path, StaticRemoteSource(version=1, items=SEED), ui)
        ctx.startup()
        seed_id = ctx.store.query_all()[0].id
        custom_id = ctx.submit_item("rune", "Zod Rune", "Rune #33")
        assert custom_id is not None

        assert ctx.remove_item(seed_id) is False
        assert ctx.remove_item(custom_id) is True
        assert ctx.store.count_by_provenance() == {"custom": 0, "seed": 3}
