"""Fuzzy name matching and ranking.

``fuzzy_match`` decides whether a glyph name matches a query and how well.
The first applicable rule decides the outcome; scores from different rules
are never combined:

1. exact match (after case folding)          -> ``EXACT_SCORE``
2. query is a substring of the name          -> ``SUBSTRING_SCORE`` tier
3. query chars appear in order in the name   -> fuzzy tier

For inputs up to ``MAX_INPUT_LENGTH`` characters every substring score is
above every fuzzy score and below ``EXACT_SCORE``.

Word boundaries are position 0 and any position directly after one of
``SEPARATORS``. Only these ASCII characters count; no other Unicode
punctuation or whitespace starts a word.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Collection, Iterable, Sequence

    from gylte.models.glyph import GlyphMatch, GlyphRecord

MAX_INPUT_LENGTH = 256

SEPARATORS = frozenset("-_./ ")

EXACT_SCORE = 10_000_000

SUBSTRING_SCORE = 5_000_000
PREFIX_BONUS = 2_000
SUBSTRING_BOUNDARY_BONUS = 1_000
SUBSTRING_LENGTH_PENALTY = 2

FUZZY_MATCH_SCORE = 100
CONSECUTIVE_BONUS = 50
FUZZY_BOUNDARY_BONUS = 200
FUZZY_LENGTH_PENALTY = 3


def _at_boundary(text: str, idx: int) -> bool:
    return idx == 0 or text[idx - 1] in SEPARATORS


def _substring_score(query: str, text: str, idx: int) -> int:
    score = SUBSTRING_SCORE
    if idx == 0:
        score += PREFIX_BONUS
    else:
        # Any occurrence may sit on a word boundary, not just the first one
        while idx != -1:
            if _at_boundary(text, idx):
                score += SUBSTRING_BOUNDARY_BONUS
                break
            idx = text.find(query, idx + 1)
    return score - (len(text) - len(query)) * SUBSTRING_LENGTH_PENALTY


def _subsequence_score(query: str, text: str) -> tuple[int, bool]:
    score = 0
    text_idx = 0
    run = 0
    last_match = -2

    for ch in query:
        while text_idx < len(text) and text[text_idx] != ch:
            text_idx += 1
        if text_idx == len(text):
            return 0, False

        run = run + 1 if text_idx == last_match + 1 else 1
        score += FUZZY_MATCH_SCORE + run * CONSECUTIVE_BONUS
        if _at_boundary(text, text_idx):
            score += FUZZY_BOUNDARY_BONUS

        last_match = text_idx
        text_idx += 1

    score -= (len(text) - len(query)) * FUZZY_LENGTH_PENALTY
    return score, True


def fuzzy_match(query: str, name: str) -> tuple[int, bool]:
    """Score ``name`` against ``query``.

    Returns ``(score, is_match)``. An empty query matches everything with a
    score of 0. When ``is_match`` is False the score is 0 and meaningless.
    """
    if not query:
        return 0, True

    query = query.casefold()
    text = name.casefold()

    if query == text:
        return EXACT_SCORE, True

    idx = text.find(query)
    if idx != -1:
        return _substring_score(query, text, idx), True

    return _subsequence_score(query, text)


def rank(
    query: str,
    candidates: Iterable[GlyphRecord] | None,
    favorites: Collection[int] = frozenset(),
) -> list[GlyphMatch]:
    """Filter and order ``candidates`` by relevance to ``query``.

    Favorites sort ahead of everything else, then higher scores first. The
    sort is stable, so equal keys keep the candidates' original order. An
    empty query returns every candidate in its original order.
    """
    from gylte.models.glyph import GlyphMatch

    if not candidates:
        return []

    query = query.strip()
    if not query:
        return [GlyphMatch(glyph=g, is_favorite=g.id in favorites) for g in candidates]

    matches: list[GlyphMatch] = []
    for glyph in candidates:
        score, ok = fuzzy_match(query, glyph.name)
        if ok:
            matches.append(GlyphMatch(glyph=glyph, score=score, is_favorite=glyph.id in favorites))

    matches.sort(key=lambda m: (not m.is_favorite, -m.score))
    return matches


def search(query: str, candidates: Sequence[GlyphRecord] | None) -> list[GlyphRecord]:
    """Return the matching records, most relevant first."""
    return [m.glyph for m in rank(query, candidates)]
