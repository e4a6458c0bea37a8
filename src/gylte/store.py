"""SQLite glyph store.

Read operations catch ``aiosqlite.Error`` and degrade gracefully: a failed
read returns ``None`` so the caller keeps whatever candidate set it already
has. Write operations (fixture import, favorites) raise ``GylteError`` so
the user learns that their change did not stick.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

import aiosqlite
import structlog

from gylte.errors import ErrorCode, GylteError
from gylte.index import extract_category, normalize_name

if TYPE_CHECKING:
    from collections.abc import Iterable

    from gylte.models.glyph import GlyphEntry, GlyphRecord, ImportSummary

log = structlog.get_logger()

SCHEMA_VERSION = "1.0"

_CREATE_GLYPHS_TABLE = """
CREATE TABLE IF NOT EXISTS glyphs (
    id              INTEGER PRIMARY KEY AUTOINCREMENT,
    name            TEXT NOT NULL UNIQUE,
    glyph           TEXT NOT NULL,
    category        TEXT,
    prefix          TEXT,
    normalized_name TEXT
)
"""

_CREATE_FAVORITES_TABLE = """
CREATE TABLE IF NOT EXISTS favorites (
    glyph_id   INTEGER PRIMARY KEY,
    created_at TEXT NOT NULL
)
"""

_CREATE_METADATA_TABLE = """
CREATE TABLE IF NOT EXISTS metadata (
    key        TEXT PRIMARY KEY,
    value      TEXT,
    updated_at TEXT NOT NULL
)
"""

_CREATE_INDEXES = (
    "CREATE INDEX IF NOT EXISTS idx_glyphs_name ON glyphs(name)",
    "CREATE INDEX IF NOT EXISTS idx_glyphs_category ON glyphs(category)",
    "CREATE INDEX IF NOT EXISTS idx_glyphs_normalized ON glyphs(normalized_name)",
    "CREATE INDEX IF NOT EXISTS idx_favorites_created ON favorites(created_at)",
)

_SELECT_GLYPHS = "SELECT id, name, glyph, category FROM glyphs"


def _split_name(name: str) -> tuple[str, str | None, str]:
    """"nf-cod-account" -> ("nf", "cod", "cod account")."""
    parts = name.split("-")
    prefix = parts[0]
    normalized = normalize_name(" ".join(parts[1:])) if len(parts) > 1 else normalize_name(name)
    return prefix, extract_category(name), normalized


class GlyphStore:
    """aiosqlite-backed store for glyphs, favorites and import metadata."""

    def __init__(self, db: aiosqlite.Connection) -> None:
        self._db = db

    async def init_db(self) -> None:
        """Create tables and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_GLYPHS_TABLE)
        await self._db.execute(_CREATE_FAVORITES_TABLE)
        await self._db.execute(_CREATE_METADATA_TABLE)
        for statement in _CREATE_INDEXES:
            await self._db.execute(statement)
        await self._db.commit()

    # ------------------------------------------------------------------
    # Glyphs
    # ------------------------------------------------------------------

    async def list_glyphs(self) -> list[GlyphRecord] | None:
        """All glyphs ordered by name. Returns ``None`` on read failure."""
        try:
            cursor = await self._db.execute(f"{_SELECT_GLYPHS} ORDER BY name")
            rows = await cursor.fetchall()
        except aiosqlite.Error:
            log.warning("store_read_error", key="glyphs", exc_info=True)
            return None
        return [_to_record(row) for row in rows]

    async def search_glyphs(self, term: str) -> list[GlyphRecord] | None:
        """Plain substring filter done by SQLite. Returns ``None`` on failure."""
        escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        try:
            cursor = await self._db.execute(
                f"{_SELECT_GLYPHS} WHERE name LIKE ? ESCAPE '\\' ORDER BY name",
                (f"%{escaped}%",),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error:
            log.warning("store_read_error", key=f"glyphs:{term}", exc_info=True)
            return None
        return [_to_record(row) for row in rows]

    async def replace_glyphs(self, entries: Iterable[GlyphEntry]) -> ImportSummary:
        """Replace every glyph in one transaction, skipping duplicate names."""
        from gylte.models.glyph import ImportSummary

        total = inserted = 0
        try:
            # Favorites reference glyph IDs; carry them over by name
            cursor = await self._db.execute(
                "SELECT g.name, f.created_at FROM favorites f JOIN glyphs g ON g.id = f.glyph_id"
            )
            kept_favorites = await cursor.fetchall()
            await self._db.execute("DELETE FROM favorites")
            await self._db.execute("DELETE FROM glyphs")
            for entry in entries:
                total += 1
                prefix, category, normalized = _split_name(entry.name)
                cursor = await self._db.execute(
                    "INSERT OR IGNORE INTO glyphs "
                    "(name, glyph, category, prefix, normalized_name) "
                    "VALUES (?, ?, ?, ?, ?)",
                    (entry.name, entry.glyph, category, prefix, normalized),
                )
                inserted += cursor.rowcount
            for name, created_at in kept_favorites:
                await self._db.execute(
                    "INSERT INTO favorites (glyph_id, created_at) "
                    "SELECT id, ? FROM glyphs WHERE name = ?",
                    (created_at, name),
                )
            await self._set_metadata("last_updated", datetime.now(UTC).isoformat())
            await self._set_metadata("version", SCHEMA_VERSION)
            await self._db.commit()
        except aiosqlite.Error as exc:
            await self._db.rollback()
            log.error("store_write_error", key="glyphs", exc_info=True)
            raise GylteError(ErrorCode.STORE_ERROR, f"Failed to import glyphs: {exc}") from exc

        summary = ImportSummary(total=total, inserted=inserted, duplicates=total - inserted)
        log.info("glyphs_imported", **summary.model_dump())
        return summary

    async def top_categories(self, limit: int = 10) -> list[tuple[str, int]]:
        try:
            cursor = await self._db.execute(
                "SELECT category, COUNT(*) AS count FROM glyphs "
                "WHERE category IS NOT NULL AND category != '' "
                "GROUP BY category ORDER BY count DESC, category LIMIT ?",
                (limit,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error:
            log.warning("store_read_error", key="categories", exc_info=True)
            return []
        return [(row[0], row[1]) for row in rows]

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def load_favorites(self) -> set[int] | None:
        """Favorite glyph IDs. Returns ``None`` on read failure."""
        try:
            cursor = await self._db.execute("SELECT glyph_id FROM favorites")
            rows = await cursor.fetchall()
        except aiosqlite.Error:
            log.warning("store_read_error", key="favorites", exc_info=True)
            return None
        return {row[0] for row in rows}

    async def add_favorite(self, glyph_id: int) -> None:
        try:
            await self._db.execute(
                "INSERT OR IGNORE INTO favorites (glyph_id, created_at) VALUES (?, ?)",
                (glyph_id, datetime.now(UTC).isoformat()),
            )
            await self._db.commit()
        except aiosqlite.Error as exc:
            log.warning("store_write_error", key=f"favorite:{glyph_id}", exc_info=True)
            raise GylteError(
                ErrorCode.STORE_ERROR, f"Failed to add favorite: {exc}", recoverable=True
            ) from exc

    async def remove_favorite(self, glyph_id: int) -> None:
        try:
            await self._db.execute("DELETE FROM favorites WHERE glyph_id = ?", (glyph_id,))
            await self._db.commit()
        except aiosqlite.Error as exc:
            log.warning("store_write_error", key=f"favorite:{glyph_id}", exc_info=True)
            raise GylteError(
                ErrorCode.STORE_ERROR, f"Failed to remove favorite: {exc}", recoverable=True
            ) from exc

    # ------------------------------------------------------------------
    # Metadata
    # ------------------------------------------------------------------

    async def get_metadata(self, key: str) -> str | None:
        try:
            cursor = await self._db.execute("SELECT value FROM metadata WHERE key = ?", (key,))
            row = await cursor.fetchone()
        except aiosqlite.Error:
            log.warning("store_read_error", key=f"metadata:{key}", exc_info=True)
            return None
        return row[0] if row else None

    async def _set_metadata(self, key: str, value: str) -> None:
        await self._db.execute(
            "INSERT OR REPLACE INTO metadata (key, value, updated_at) VALUES (?, ?, ?)",
            (key, value, datetime.now(UTC).isoformat()),
        )


def _to_record(row: aiosqlite.Row | tuple) -> GlyphRecord:
    from gylte.models.glyph import GlyphRecord

    return GlyphRecord(id=row[0], name=row[1], symbol=row[2], category=row[3])
