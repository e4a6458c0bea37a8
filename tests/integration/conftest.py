"""Integration test fixtures.

Provides a fully wired GlyphApp over an in-memory SQLite store populated
with the sample glyphs from tests/conftest.py, and a recording clipboard.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

import aiosqlite
import pytest

from gylte.app import GlyphApp
from gylte.clipboard import Clipboard
from gylte.config import Settings
from gylte.store import GlyphStore

if TYPE_CHECKING:
    from pathlib import Path

    from gylte.models.glyph import GlyphEntry


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's gylte.yaml and GYLTE__* variables out of the tests."""
    for name in list(os.environ):
        if name.startswith("GYLTE__"):
            monkeypatch.delenv(name)
    monkeypatch.setitem(Settings.model_config, "yaml_file", None)
    monkeypatch.chdir(tmp_path)


@pytest.fixture()
def copied() -> list[str]:
    return []


@pytest.fixture()
def settings() -> Settings:
    return Settings()


@pytest.fixture()
async def store(sample_entries: list[GlyphEntry]):
    async with aiosqlite.connect(":memory:") as db:
        s = GlyphStore(db)
        await s.init_db()
        await s.replace_glyphs(sample_entries)
        yield s


@pytest.fixture()
async def app(settings: Settings, store: GlyphStore, copied: list[str]):
    """Started GlyphApp with its background preload finished."""
    glyph_app = GlyphApp(settings, store, clipboard=Clipboard(copy=copied.append))
    await glyph_app.startup()
    await glyph_app.wait_until_ready()
    yield glyph_app
    await glyph_app.shutdown()


@pytest.fixture()
def subprocess_env(tmp_path: Path) -> dict[str, str]:
    env = os.environ.copy()
    env["GYLTE__STORE__DB_PATH"] = str(tmp_path / "gylte.db")
    env["XDG_CONFIG_HOME"] = str(tmp_path / "config")
    return env
