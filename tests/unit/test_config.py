"""Unit tests for configuration defaults and validation."""

from __future__ import annotations

from pathlib import Path

import platformdirs
import pytest
from pydantic import ValidationError
from pydantic_settings import SettingsConfigDict

from gylte.config import (
    _DEFAULT_DATA_DIR,
    _DEFAULT_DB_PATH,
    SearchSettings,
    Settings,
    StoreSettings,
)


class TestPlatformDefaults:
    """Verify config defaults use platformdirs instead of hardcoded Unix paths."""

    def test_default_data_dir_matches_platformdirs(self) -> None:
        assert platformdirs.user_data_dir("gylte") == _DEFAULT_DATA_DIR

    def test_default_db_path_under_data_dir(self) -> None:
        assert _DEFAULT_DB_PATH.startswith(_DEFAULT_DATA_DIR)
        assert _DEFAULT_DB_PATH.endswith("gylte.db")

    def test_store_settings_uses_platform_default(self) -> None:
        assert StoreSettings().db_path == _DEFAULT_DB_PATH


class TestSearchDefaults:
    def test_defaults(self) -> None:
        search = SearchSettings()
        assert search.page_size == 50
        assert search.history_size == 20
        assert search.strategy == "scan"
        assert search.fallback_threshold == 10


class TestEnvironmentOverrides:
    def test_nested_env_var(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GYLTE__SEARCH__PAGE_SIZE", "25")
        monkeypatch.setenv("GYLTE__SEARCH__STRATEGY", "indexed")
        settings = Settings()
        assert settings.search.page_size == 25
        assert settings.search.strategy == "indexed"

    def test_constructor_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("GYLTE__STORE__DB_PATH", "/tmp/from-env.db")
        settings = Settings(store={"db_path": "/tmp/from-init.db"})
        assert settings.store.db_path == "/tmp/from-init.db"


class TestConfigValidation:
    def test_wrong_type_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(search={"page_size": "not-a-number"})  # type: ignore[arg-type]

    def test_unknown_strategy_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(search={"strategy": "magic"})  # type: ignore[arg-type]

    def test_unknown_top_level_field_raises_validation_error(self) -> None:
        with pytest.raises(ValidationError):
            Settings(completely_unknown_field="oops")  # type: ignore[call-arg]

    def test_unknown_nested_field_raises_validation_error(self) -> None:
        """A typo like 'db_paht' is caught instead of silently using the default."""
        with pytest.raises(ValidationError):
            StoreSettings(db_paht="/intended/path/gylte.db")  # type: ignore[call-arg]


class TestYamlSource:
    def _settings_from(self, path: Path) -> type[Settings]:
        class FileSettings(Settings):
            model_config = SettingsConfigDict(**{**Settings.model_config, "yaml_file": str(path)})

        return FileSettings

    def test_values_read_from_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "gylte.yaml"
        path.write_text("search:\n  page_size: 7\nlogging:\n  format: json\n", encoding="utf-8")
        settings = self._settings_from(path)()
        assert settings.search.page_size == 7
        assert settings.logging.format == "json"

    def test_env_beats_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "gylte.yaml"
        path.write_text("search:\n  page_size: 7\n", encoding="utf-8")
        monkeypatch.setenv("GYLTE__SEARCH__PAGE_SIZE", "9")
        assert self._settings_from(path)().search.page_size == 9
