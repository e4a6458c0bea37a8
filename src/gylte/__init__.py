"""Gylte: searchable picker backend for icon font glyph names."""

__version__ = "0.3.0"
