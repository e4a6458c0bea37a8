"""Favorite glyph IDs, mirrored in memory and persisted in the store.

The set has its own lock, separate from the search index, so toggling a
favorite never waits on an index rebuild and vice versa.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from gylte.store import GlyphStore

log = structlog.get_logger()


class Favorites:
    def __init__(self, store: GlyphStore) -> None:
        self._store = store
        self._ids: set[int] = set()
        self._lock = asyncio.Lock()

    async def load(self) -> None:
        """Replace the in-memory set with the store's. Keeps it on read failure."""
        ids = await self._store.load_favorites()
        if ids is None:
            return
        async with self._lock:
            self._ids = ids
        log.info("favorites_loaded", count=len(ids))

    async def toggle(self, glyph_id: int) -> bool:
        """Flip the favorite flag and return the new state.

        The in-memory set only changes after the store write succeeds.
        """
        async with self._lock:
            if glyph_id in self._ids:
                await self._store.remove_favorite(glyph_id)
                self._ids.discard(glyph_id)
                return False
            await self._store.add_favorite(glyph_id)
            self._ids.add(glyph_id)
            return True

    def snapshot(self) -> frozenset[int]:
        return frozenset(self._ids)

    def __contains__(self, glyph_id: object) -> bool:
        return glyph_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)
