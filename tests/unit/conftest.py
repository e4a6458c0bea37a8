"""Unit-specific fixtures (no I/O beyond in-memory SQLite)."""

from __future__ import annotations

import aiosqlite
import pytest

from gylte.store import GlyphStore


@pytest.fixture()
async def store():
    """In-memory SQLite glyph store for unit tests."""
    async with aiosqlite.connect(":memory:") as db:
        s = GlyphStore(db)
        await s.init_db()
        yield s
