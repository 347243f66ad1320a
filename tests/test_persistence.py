"""Tests for key-value stores, the settings manager and theme preferences."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from cypher_converter.application.preferences import THEME_KEY, Preferences
from cypher_converter.domain.models.enums import Theme
from cypher_converter.domain.models.settings import ConverterSettings, OutputSettings
from cypher_converter.infrastructure.config.settings_manager import SettingsManager
from cypher_converter.infrastructure.persistence import FileKeyValueStore, MemoryKeyValueStore


# ── Fixtures ──────────────────────────────────────────────────────────────


@pytest.fixture()
def file_store(tmp_path: Path) -> FileKeyValueStore:
    return FileKeyValueStore(tmp_path / "data")


@pytest.fixture()
def manager(tmp_path: Path) -> SettingsManager:
    return SettingsManager(config_dir=tmp_path / "config")


# ── Key-value stores ──────────────────────────────────────────────────────


class TestFileKeyValueStore:
    def test_missing_key(self, file_store):
        assert file_store.get("cypher-history") is None

    def test_put_get(self, file_store):
        file_store.put("cypher-theme", b"light")
        assert file_store.get("cypher-theme") == b"light"
        assert (file_store.data_dir / "cypher-theme.json").read_bytes() == b"light"

    def test_overwrite_leaves_no_temp_files(self, file_store):
        file_store.put("k", b"1")
        file_store.put("k", b"2")
        assert file_store.get("k") == b"2"
        assert [p.name for p in file_store.data_dir.iterdir()] == ["k.json"]

    def test_delete(self, file_store):
        file_store.put("k", b"1")
        file_store.delete("k")
        file_store.delete("k")
        assert file_store.get("k") is None

    @pytest.mark.parametrize("key", ["../escape", "a/b", ""])
    def test_invalid_keys(self, file_store, key):
        with pytest.raises(ValueError):
            file_store.put(key, b"x")


class TestMemoryKeyValueStore:
    def test_basic_operations(self):
        store = MemoryKeyValueStore({"a": b"1"})
        store.put("b", b"2")
        assert store.keys() == ["a", "b"]
        store.delete("a")
        assert store.get("a") is None
        assert store.get("b") == b"2"


# ── Settings ──────────────────────────────────────────────────────────────


class TestConverterSettingsModel:
    def test_defaults(self):
        settings = ConverterSettings()
        assert settings.engine.model == "gemini-2.5-flash"
        assert settings.engine.conversion_temperature == 0.1
        assert settings.engine.detection_temperature == 0.0
        assert settings.engine.detection_sample_chars == 500
        assert settings.output.file_prefix == "cypher-converted"
        assert settings.output.sheet_title == "ConvertedData"
        assert settings.storage.data_dir is None

    def test_sheet_title_length_limited(self):
        with pytest.raises(ValueError):
            OutputSettings(sheet_title="x" * 32)


class TestSettingsManager:
    def test_load_defaults_when_missing(self, manager):
        assert manager.load() == ConverterSettings()

    def test_save_and_load(self, manager):
        settings = ConverterSettings.model_validate({"output": {"font_size": 14}})
        manager.save(settings)
        assert manager.settings_path.exists()
        assert manager.load().output.font_size == 14

    def test_saved_file_is_json(self, manager):
        manager.save(ConverterSettings())
        data = json.loads(manager.settings_path.read_text(encoding="utf-8"))
        assert data["engine"]["model"] == "gemini-2.5-flash"

    def test_corrupt_file_falls_back(self, manager):
        manager.settings_path.parent.mkdir(parents=True)
        manager.settings_path.write_text("{broken", encoding="utf-8")
        assert manager.load() == ConverterSettings()

    def test_invalid_values_fall_back(self, manager):
        manager.settings_path.parent.mkdir(parents=True)
        manager.settings_path.write_text('{"output": {"font_size": 99}}', encoding="utf-8")
        assert manager.load() == ConverterSettings()

    def test_reset_overwrites_file_and_logs(self, manager, caplog):
        manager.save(ConverterSettings.model_validate({"output": {"font_size": 14}}))

        with caplog.at_level("INFO", logger="cypher_converter.infrastructure.config"):
            assert manager.reset_to_defaults() == ConverterSettings()

        data = json.loads(manager.settings_path.read_text(encoding="utf-8"))
        assert data["output"]["font_size"] == 11
        assert "reset to defaults" in caplog.text
        assert str(manager.settings_path) in caplog.text

    def test_reset_without_file(self, manager, caplog):
        with caplog.at_level("INFO", logger="cypher_converter.infrastructure.config"):
            manager.reset_to_defaults()
        assert manager.load() == ConverterSettings()
        assert "already matched the defaults" in caplog.text

    def test_invalid_file_is_logged(self, manager, caplog):
        manager.settings_path.parent.mkdir(parents=True)
        manager.settings_path.write_text('{"engine": {"max_retries": 0}}', encoding="utf-8")
        with caplog.at_level("WARNING", logger="cypher_converter.infrastructure.config"):
            assert manager.load() == ConverterSettings()
        assert "Ignoring invalid settings" in caplog.text


# ── Preferences ───────────────────────────────────────────────────────────


class TestPreferences:
    def test_default_is_dark(self, store):
        prefs = Preferences(store)
        assert prefs.load() == Theme.DARK

    def test_toggle_persists(self, store):
        prefs = Preferences(store)
        prefs.load()
        assert prefs.toggle() == Theme.LIGHT
        assert store.get(THEME_KEY) == b"light"
        assert Preferences(store).load() == Theme.LIGHT
        assert prefs.toggle() == Theme.DARK

    def test_set_theme_from_string(self, store):
        prefs = Preferences(store)
        assert prefs.set_theme("light") == Theme.LIGHT
        assert prefs.theme == Theme.LIGHT

    def test_unknown_stored_value(self, store):
        store.put(THEME_KEY, b"sepia")
        assert Preferences(store).load() == Theme.DARK

    def test_file_store_round_trip(self, file_store):
        Preferences(file_store).set_theme(Theme.LIGHT)
        assert Preferences(file_store).load() == Theme.LIGHT
