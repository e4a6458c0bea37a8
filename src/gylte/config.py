"""Configuration loading.

Settings are loaded in priority order (highest first):
  1. Environment variables  (GYLTE__SEARCH__PAGE_SIZE=100)
  2. gylte.yaml             (searched in cwd, then the platform config dir)
  3. Hardcoded defaults

The config file is optional; all fields have sensible defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

_DEFAULT_DATA_DIR = platformdirs.user_data_dir("gylte")
_DEFAULT_DB_PATH = str(Path(_DEFAULT_DATA_DIR) / "gylte.db")


def _find_config_file() -> str | None:
    """Return the path of the first gylte.yaml found, or None."""
    candidates = [
        Path("gylte.yaml"),
        Path(platformdirs.user_config_dir("gylte")) / "gylte.yaml",
    ]
    for path in candidates:
        if path.exists():
            return str(path)
    return None


class StoreSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    db_path: str = _DEFAULT_DB_PATH


class SearchSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    page_size: int = 50
    history_size: int = 20
    # "scan" runs the fuzzy matcher over every glyph; "indexed" uses the trie
    strategy: Literal["scan", "indexed"] = "scan"
    fallback_threshold: int = 10
    ready_timeout: float = 0.5


class LoggingSettings(BaseModel):
    model_config = ConfigDict(extra="forbid")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: Literal["json", "text"] = "text"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        # Double-underscore separates nesting: GYLTE__STORE__DB_PATH=/tmp/g.db
        env_prefix="GYLTE__",
        env_nested_delimiter="__",
        yaml_file=_find_config_file(),
        yaml_file_encoding="utf-8",
        extra="forbid",
    )

    store: StoreSettings = StoreSettings()
    search: SearchSettings = SearchSettings()
    logging: LoggingSettings = LoggingSettings()

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
        **kwargs: Any,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,  # Constructor args (highest priority)
            env_settings,  # Environment variables
            YamlConfigSettingsSource(settings_cls),  # YAML file
            # dotenv and file secrets intentionally excluded
        )
