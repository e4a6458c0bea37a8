"""Unit tests for gylte.importer."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from gylte.errors import ErrorCode, GylteError
from gylte.importer import dedupe_entries, import_fixture, load_fixture
from gylte.models.glyph import GlyphEntry

if TYPE_CHECKING:
    from pathlib import Path

    from gylte.store import GlyphStore


def _write_fixture(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "glyphs.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadFixture:
    def test_parses_entries(self, tmp_path: Path) -> None:
        path = _write_fixture(
            tmp_path,
            [{"name": "nf-cod-account", "glyph": "\uEB99"}, {"name": "nf-fa-car", "glyph": "c"}],
        )
        entries = load_fixture(path)
        assert entries == [
            GlyphEntry(name="nf-cod-account", glyph="\uEB99"),
            GlyphEntry(name="nf-fa-car", glyph="c"),
        ]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(GylteError) as exc_info:
            load_fixture(tmp_path / "nope.json")
        assert exc_info.value.code == ErrorCode.IMPORT_FAILED

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "glyphs.json"
        path.write_text("[{", encoding="utf-8")
        with pytest.raises(GylteError) as exc_info:
            load_fixture(path)
        assert exc_info.value.code == ErrorCode.IMPORT_FAILED
        assert "not valid JSON" in exc_info.value.message

    def test_not_utf8(self, tmp_path: Path) -> None:
        path = tmp_path / "glyphs.json"
        path.write_bytes(b'[{"name": "nf-x-\xff", "glyph": "x"}]')
        with pytest.raises(GylteError) as exc_info:
            load_fixture(path)
        assert exc_info.value.code == ErrorCode.IMPORT_FAILED
        assert "not UTF-8" in exc_info.value.message

    def test_malformed_entry(self, tmp_path: Path) -> None:
        path = _write_fixture(tmp_path, [{"name": "nf-fa-car"}])
        with pytest.raises(GylteError) as exc_info:
            load_fixture(path)
        assert exc_info.value.code == ErrorCode.IMPORT_FAILED
        assert "malformed" in exc_info.value.message

    def test_not_a_list(self, tmp_path: Path) -> None:
        path = _write_fixture(tmp_path, {"name": "nf-fa-car", "glyph": "c"})
        with pytest.raises(GylteError):
            load_fixture(path)


class TestDedupe:
    def test_keeps_first_occurrence(self) -> None:
        entries = [
            GlyphEntry(name="a", glyph="1"),
            GlyphEntry(name="b", glyph="2"),
            GlyphEntry(name="a", glyph="3"),
        ]
        assert dedupe_entries(entries) == [
            GlyphEntry(name="a", glyph="1"),
            GlyphEntry(name="b", glyph="2"),
        ]


class TestImportFixture:
    async def test_imports_into_store(self, store: GlyphStore, tmp_path: Path) -> None:
        path = _write_fixture(
            tmp_path,
            [
                {"name": "nf-fa-car", "glyph": "first"},
                {"name": "nf-cod-add", "glyph": "+"},
                {"name": "nf-fa-car", "glyph": "second"},
            ],
        )
        summary = await import_fixture(store, path)
        assert summary.total == 3
        assert summary.inserted == 2
        assert summary.duplicates == 1

        records = await store.list_glyphs()
        assert records is not None
        assert {r.name: r.symbol for r in records} == {"nf-fa-car": "first", "nf-cod-add": "+"}

    async def test_bad_fixture_leaves_store_untouched(
        self, store: GlyphStore, tmp_path: Path, sample_entries: list[GlyphEntry]
    ) -> None:
        await store.replace_glyphs(sample_entries)
        path = tmp_path / "glyphs.json"
        path.write_text("not json", encoding="utf-8")
        with pytest.raises(GylteError):
            await import_fixture(store, path)
        records = await store.list_glyphs()
        assert records is not None
        assert len(records) == len(sample_entries)
