"""Shared fixtures: a small, realistic glyph candidate set."""

from __future__ import annotations

import pytest
import structlog

from gylte.models.glyph import GlyphEntry, GlyphRecord

SAMPLE_GLYPHS = [
    ("nf-cod-account", "\uEB99"),
    ("nf-md-account_box", "\U000F0004"),
    ("nf-fa-car", "\uF1B9"),
    ("nf-cod-add", "\uEA60"),
    ("nf-fa-address_book", "\uF2B9"),
    ("nf-md-car_battery", "\U000F010C"),
]


@pytest.fixture()
def sample_records() -> list[GlyphRecord]:
    return [
        GlyphRecord(id=i, name=name, symbol=symbol)
        for i, (name, symbol) in enumerate(SAMPLE_GLYPHS, start=1)
    ]


@pytest.fixture()
def sample_entries() -> list[GlyphEntry]:
    return [GlyphEntry(name=name, glyph=symbol) for name, symbol in SAMPLE_GLYPHS]


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo setup_logging() so later tests never log to a closed capture stream."""
    yield
    structlog.reset_defaults()
