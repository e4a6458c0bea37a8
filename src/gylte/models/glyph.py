from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class GlyphRecord(BaseModel):
    """Single glyph as loaded from the store. Read-only once loaded."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str  # e.g. "nf-cod-account"; the only field the matcher looks at
    symbol: str  # Display payload, passed through untouched
    category: str | None = None  # Derived from name, e.g. "cod"
    tags: str | None = None


class GlyphMatch(BaseModel):
    """A glyph paired with its relevance for one query. Discarded after use."""

    glyph: GlyphRecord
    score: int = 0
    is_favorite: bool = False


class SearchResult(BaseModel):
    glyphs: list[GlyphMatch]
    total: int
    search_time: float = 0.0  # seconds
    has_more: bool = False
    categories: list[str] = []


class AppStats(BaseModel):
    total_glyphs: int
    total_favorites: int
    total_categories: int
    index_ready: bool


class GlyphEntry(BaseModel):
    """One object of the JSON fixture the store is populated from."""

    name: str
    glyph: str


class ImportSummary(BaseModel):
    total: int
    inserted: int
    duplicates: int
