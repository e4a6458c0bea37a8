"""Backend surface bound by the GUI shell.

``GlyphApp`` wires the store, the search index, favorites, search history
and the clipboard together and exposes the operations the frontend calls
over its request/response bridge. Every public method validates its input
and raises ``GylteError`` for bad requests; search itself never fails.
"""

from __future__ import annotations

import asyncio
import time
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, TypeVar

import aiosqlite
import structlog
from pydantic import BaseModel, ValidationError

from gylte.clipboard import Clipboard
from gylte.errors import ErrorCode, GylteError
from gylte.favorites import Favorites
from gylte.history import SearchHistory
from gylte.index import GlyphIndex
from gylte.models.glyph import AppStats, GlyphMatch, SearchResult
from gylte.models.tools import CopyInput, GetGlyphsInput, GlyphIdInput
from gylte.store import GlyphStore

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from gylte.config import Settings

log = structlog.get_logger()

M = TypeVar("M", bound=BaseModel)


def _validate(model: type[M], **data: object) -> M:
    try:
        return model(**data)
    except ValidationError as exc:
        message = "; ".join(err["msg"] for err in exc.errors())
        raise GylteError(ErrorCode.INVALID_INPUT, message) from exc


class GlyphApp:
    def __init__(
        self,
        settings: Settings,
        store: GlyphStore,
        index: GlyphIndex | None = None,
        clipboard: Clipboard | None = None,
    ) -> None:
        self.settings = settings
        self.store = store
        self.index = index if index is not None else GlyphIndex()
        self.favorites = Favorites(store)
        self.history = SearchHistory(max_size=settings.search.history_size)
        self.clipboard = clipboard or Clipboard()
        self._preload_task: asyncio.Task[None] | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def startup(self) -> None:
        """Start loading glyphs and favorites in the background."""
        self._preload_task = asyncio.create_task(self._preload())

    async def shutdown(self) -> None:
        if self._preload_task is not None:
            await asyncio.gather(self._preload_task, return_exceptions=True)

    async def _preload(self) -> None:
        await self.reload()

    async def wait_until_ready(self) -> None:
        task = self._preload_task
        if task is None or task.done():
            return
        await asyncio.wait({task}, timeout=self.settings.search.ready_timeout)

    async def reload(self) -> bool:
        """Re-read glyphs and favorites from the store.

        On a read failure the index keeps its previous candidate set.
        """
        records = await self.store.list_glyphs()
        if records is None:
            log.warning("index_reload_failed", kept=len(self.index))
            return False
        await asyncio.to_thread(self.index.load, records)
        await self.favorites.load()
        return True

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    async def get_glyphs(
        self,
        search_term: str = "",
        category: str = "",
        limit: int = 0,
        offset: int = 0,
    ) -> SearchResult:
        started = time.perf_counter()
        params = _validate(
            GetGlyphsInput, search_term=search_term, category=category, limit=limit, offset=offset
        )
        await self.wait_until_ready()

        favorites = self.favorites.snapshot()
        if self.settings.search.strategy == "indexed":
            matches = self.index.lookup(
                params.search_term,
                category=params.category or None,
                favorites=favorites,
                threshold=self.settings.search.fallback_threshold,
            )
        else:
            matches = self.index.search(
                params.search_term, category=params.category or None, favorites=favorites
            )

        if params.search_term:
            self.history.add(params.search_term)

        limit = params.limit if params.limit > 0 else self.settings.search.page_size
        start = min(params.offset, len(matches))
        end = min(start + limit, len(matches))
        page = matches[start:end]

        result = SearchResult(
            glyphs=page,
            total=len(matches),
            search_time=time.perf_counter() - started,
            has_more=end < len(matches),
            categories=sorted({m.glyph.category for m in page if m.glyph.category}),
        )
        log.debug(
            "glyphs_searched",
            query=params.search_term,
            category=params.category,
            total=result.total,
        )
        return result

    async def search_store(self, search_term: str) -> list[GlyphMatch]:
        """Plain substring filter run by SQLite instead of the in-memory index.

        Results come back in name order with no scores. A failed read yields
        an empty list.
        """
        params = _validate(GetGlyphsInput, search_term=search_term)
        await self.wait_until_ready()
        records = await self.store.search_glyphs(params.search_term)
        if records is None:
            return []
        favorites = self.favorites.snapshot()
        return [GlyphMatch(glyph=r, is_favorite=r.id in favorites) for r in records]

    def get_categories(self) -> dict[str, int]:
        return self.index.categories()

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------

    async def toggle_favorite(self, glyph_id: int) -> bool:
        params = _validate(GlyphIdInput, glyph_id=glyph_id)
        await self.wait_until_ready()
        if self.index.get(params.glyph_id) is None:
            raise GylteError(ErrorCode.GLYPH_NOT_FOUND, f"Unknown glyph ID: {params.glyph_id}")
        return await self.favorites.toggle(params.glyph_id)

    async def get_favorites(self) -> list[GlyphMatch]:
        await self.wait_until_ready()
        favorites = self.favorites.snapshot()
        return [
            GlyphMatch(glyph=g, is_favorite=True)
            for g in self.index.records()
            if g.id in favorites
        ]

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_search_history(self) -> list[str]:
        return self.history.items()

    def clear_search_history(self) -> None:
        self.history.clear()

    # ------------------------------------------------------------------
    # Clipboard
    # ------------------------------------------------------------------

    def copy_to_clipboard(self, text: str) -> bool:
        params = _validate(CopyInput, text=text)
        return self.clipboard.copy(params.text)

    async def copy_glyph(self, glyph_id: int) -> bool:
        params = _validate(GlyphIdInput, glyph_id=glyph_id)
        await self.wait_until_ready()
        glyph = self.index.get(params.glyph_id)
        if glyph is None:
            raise GylteError(ErrorCode.GLYPH_NOT_FOUND, f"Unknown glyph ID: {params.glyph_id}")
        return self.clipboard.copy(glyph.symbol)

    # ------------------------------------------------------------------
    # Stats
    # ------------------------------------------------------------------

    def get_stats(self) -> AppStats:
        return AppStats(
            total_glyphs=len(self.index),
            total_favorites=len(self.favorites),
            total_categories=len(self.index.categories()),
            index_ready=self.index.is_ready,
        )


@asynccontextmanager
async def open_app(
    settings: Settings, clipboard: Clipboard | None = None
) -> AsyncIterator[GlyphApp]:
    """Open the store at ``settings.store.db_path`` and yield a started app."""
    db_path = Path(settings.store.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)

    async with aiosqlite.connect(db_path) as db:
        store = GlyphStore(db)
        await store.init_db()
        app = GlyphApp(settings, store, clipboard=clipboard)
        await app.startup()
        try:
            yield app
        finally:
            await app.shutdown()
