"""One-time import of a glyph JSON fixture into the store.

The fixture is a JSON array of ``{"name": ..., "glyph": ...}`` objects, as
shipped with Nerd Fonts style cheat sheets. Duplicate names keep their first
occurrence.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import structlog
from pydantic import TypeAdapter, ValidationError

from gylte.errors import ErrorCode, GylteError
from gylte.models.glyph import GlyphEntry

if TYPE_CHECKING:
    from collections.abc import Iterable
    from pathlib import Path

    from gylte.models.glyph import ImportSummary
    from gylte.store import GlyphStore

log = structlog.get_logger()

_entries_adapter = TypeAdapter(list[GlyphEntry])


def load_fixture(path: Path) -> list[GlyphEntry]:
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise GylteError(ErrorCode.IMPORT_FAILED, f"Cannot read fixture {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise GylteError(ErrorCode.IMPORT_FAILED, f"Fixture {path} is not UTF-8: {exc}") from exc

    try:
        entries = _entries_adapter.validate_python(json.loads(raw))
    except json.JSONDecodeError as exc:
        raise GylteError(ErrorCode.IMPORT_FAILED, f"Fixture {path} is not valid JSON: {exc}") from exc
    except ValidationError as exc:
        raise GylteError(
            ErrorCode.IMPORT_FAILED,
            f"Fixture {path} has malformed entries: {exc.error_count()} error(s)",
        ) from exc

    log.info("fixture_loaded", path=str(path), entries=len(entries))
    return entries


def dedupe_entries(entries: Iterable[GlyphEntry]) -> list[GlyphEntry]:
    seen: set[str] = set()
    unique: list[GlyphEntry] = []
    for entry in entries:
        if entry.name not in seen:
            seen.add(entry.name)
            unique.append(entry)
    return unique


async def import_fixture(store: GlyphStore, path: Path) -> ImportSummary:
    entries = load_fixture(path)
    unique = dedupe_entries(entries)
    if len(unique) < len(entries):
        log.info("fixture_duplicates_skipped", count=len(entries) - len(unique))
    summary = await store.replace_glyphs(unique)
    return summary.model_copy(
        update={"total": len(entries), "duplicates": len(entries) - summary.inserted}
    )
