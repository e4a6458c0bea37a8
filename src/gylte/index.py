"""In-memory glyph index: normalization, prefix trie and category map.

``GlyphIndex`` holds an immutable snapshot of the candidate set. ``load``
builds a complete new snapshot before swapping it in under a lock, so a
reader sees either the previous set or the new one, never a partial build.
Until the first load completes the index reports "not ready" and every
query returns an empty result.
"""

from __future__ import annotations

import re
import threading
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from gylte.matcher import rank

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable

    from gylte.models.glyph import GlyphMatch, GlyphRecord

log = structlog.get_logger()

_SEPARATOR_RE = re.compile(r"[-_./]")
_WHITESPACE_RE = re.compile(r"\s+")

# Relevance tiers for the indexed lookup, scored over normalized names
EXACT_TIER = 1000
PREFIX_TIER = 800
WORD_TIER = 600
SUBSTRING_TIER = 400
DEFAULT_TIER = 100
SHORT_NAME_BONUS = 50


def normalize_name(text: str) -> str:
    """Lower-case, turn separators into spaces and collapse whitespace."""
    text = _SEPARATOR_RE.sub(" ", text.lower())
    return _WHITESPACE_RE.sub(" ", text).strip()


def extract_category(name: str) -> str | None:
    """"nf-cod-account" -> "cod". Names without a second segment have none."""
    parts = name.split("-")
    if len(parts) >= 2 and parts[1]:
        return parts[1]
    return None


@dataclass
class TrieNode:
    children: dict[str, TrieNode] = field(default_factory=dict)
    ids: set[int] = field(default_factory=set)


class Trie:
    """Character prefix tree mapping prefixes to glyph IDs."""

    def __init__(self) -> None:
        self.root = TrieNode()

    def insert(self, key: str, glyph_id: int) -> None:
        node = self.root
        for ch in key:
            node = node.children.setdefault(ch, TrieNode())
            node.ids.add(glyph_id)

    def find_prefix(self, prefix: str) -> set[int]:
        if not prefix:
            return set()
        node = self.root
        for ch in prefix:
            child = node.children.get(ch)
            if child is None:
                return set()
            node = child
        return set(node.ids)


@dataclass(frozen=True)
class _Snapshot:
    records: tuple[GlyphRecord, ...] = ()
    by_id: dict[int, GlyphRecord] = field(default_factory=dict)
    position: dict[int, int] = field(default_factory=dict)
    normalized: dict[int, str] = field(default_factory=dict)
    by_normalized: dict[str, list[int]] = field(default_factory=dict)
    trie: Trie = field(default_factory=Trie)
    categories: dict[str, list[int]] = field(default_factory=dict)


def _build_snapshot(records: Iterable[GlyphRecord]) -> _Snapshot:
    unique: list[GlyphRecord] = []
    seen: set[str] = set()
    for record in records:
        if record.name in seen:
            continue
        seen.add(record.name)
        if record.category is None:
            category = extract_category(record.name)
            if category is not None:
                record = record.model_copy(update={"category": category})
        unique.append(record)

    snap = _Snapshot(records=tuple(unique))
    for pos, record in enumerate(unique):
        norm = normalize_name(record.name)
        snap.by_id[record.id] = record
        snap.position[record.id] = pos
        snap.normalized[record.id] = norm
        snap.by_normalized.setdefault(norm, []).append(record.id)

        snap.trie.insert(norm, record.id)
        words = norm.split(" ")
        if len(words) > 1:
            for word in words:
                snap.trie.insert(word, record.id)

        if record.category is not None:
            snap.categories.setdefault(record.category, []).append(record.id)
    return snap


class GlyphIndex:
    """Owned, injectable search index over the current candidate set."""

    def __init__(self, records: Iterable[GlyphRecord] | None = None) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._snapshot = _Snapshot()
        if records is not None:
            self.load(records)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def load(self, records: Iterable[GlyphRecord]) -> None:
        """Replace the candidate set. Builds off-lock, swaps atomically."""
        snapshot = _build_snapshot(records)
        with self._lock:
            self._snapshot = snapshot
        self._ready.set()
        log.info(
            "index_loaded",
            glyphs=len(snapshot.records),
            categories=len(snapshot.categories),
        )

    reload = load

    @property
    def is_ready(self) -> bool:
        return self._ready.is_set()

    def wait_ready(self, timeout: float | None = None) -> bool:
        return self._ready.wait(timeout)

    def _current(self) -> _Snapshot | None:
        if not self._ready.is_set():
            return None
        with self._lock:
            return self._snapshot

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def __len__(self) -> int:
        snap = self._current()
        return len(snap.records) if snap else 0

    def get(self, glyph_id: int) -> GlyphRecord | None:
        snap = self._current()
        return snap.by_id.get(glyph_id) if snap else None

    def records(self, category: str | None = None) -> list[GlyphRecord]:
        snap = self._current()
        if snap is None:
            return []
        if not category:
            return list(snap.records)
        return [snap.by_id[i] for i in snap.categories.get(category, [])]

    def categories(self) -> dict[str, int]:
        snap = self._current()
        if snap is None:
            return {}
        return {name: len(ids) for name, ids in snap.categories.items()}

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------

    def search(
        self,
        query: str,
        category: str | None = None,
        favorites: Collection[int] = frozenset(),
    ) -> list[GlyphMatch]:
        """Linear scan with the fuzzy matcher over the current set."""
        return rank(query, self.records(category), favorites)

    def lookup(
        self,
        query: str,
        category: str | None = None,
        favorites: Collection[int] = frozenset(),
        threshold: int = 10,
    ) -> list[GlyphMatch]:
        """Indexed search: exact table, then trie prefix, then substring scan.

        The substring scan only runs when the first two strategies found
        fewer than ``threshold`` glyphs.
        """
        from gylte.models.glyph import GlyphMatch

        snap = self._current()
        if snap is None:
            return []

        norm = normalize_name(query)
        if not norm:
            return rank("", self.records(category), favorites)

        ids: set[int] = set(snap.by_normalized.get(norm, ()))
        ids |= snap.trie.find_prefix(norm)
        if len(ids) < threshold:
            ids |= {gid for gid, text in snap.normalized.items() if norm in text}

        if category:
            ids &= set(snap.categories.get(category, ()))

        matches = [
            GlyphMatch(
                glyph=snap.by_id[gid],
                score=_relevance(norm, snap.normalized[gid]),
                is_favorite=gid in favorites,
            )
            for gid in sorted(ids, key=snap.position.__getitem__)
        ]
        matches.sort(key=lambda m: (not m.is_favorite, -m.score))
        return matches


def _relevance(query: str, text: str) -> int:
    if text == query:
        score = EXACT_TIER
    elif text.startswith(query):
        score = PREFIX_TIER
    elif any(word.startswith(query) for word in text.split(" ")):
        score = WORD_TIER
    elif query in text:
        score = SUBSTRING_TIER
    else:
        score = DEFAULT_TIER
    return score + max(0, SHORT_NAME_BONUS - len(text))
