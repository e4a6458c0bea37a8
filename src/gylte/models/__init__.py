from __future__ import annotations

from gylte.models.glyph import (
    AppStats,
    GlyphEntry,
    GlyphMatch,
    GlyphRecord,
    ImportSummary,
    SearchResult,
)
from gylte.models.tools import CopyInput, GetGlyphsInput, GlyphIdInput

__all__ = [
    # glyph
    "GlyphRecord",
    "GlyphMatch",
    "SearchResult",
    "AppStats",
    # import
    "GlyphEntry",
    "ImportSummary",
    # tools
    "GetGlyphsInput",
    "GlyphIdInput",
    "CopyInput",
]
