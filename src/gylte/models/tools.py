from __future__ import annotations

from pydantic import BaseModel, field_validator

from gylte.matcher import MAX_INPUT_LENGTH


class GetGlyphsInput(BaseModel):
    search_term: str = ""
    category: str = ""
    limit: int = 0  # <= 0 means "use the configured page size"
    offset: int = 0

    @field_validator("search_term")
    @classmethod
    def validate_search_term(cls, v: str) -> str:
        v = v.strip()
        if len(v) > MAX_INPUT_LENGTH:
            raise ValueError(f"search_term must not exceed {MAX_INPUT_LENGTH} characters")
        return v

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str) -> str:
        return v.strip()

    @field_validator("offset")
    @classmethod
    def validate_offset(cls, v: int) -> int:
        if v < 0:
            raise ValueError("offset must be >= 0")
        return v


class GlyphIdInput(BaseModel):
    glyph_id: int

    @field_validator("glyph_id")
    @classmethod
    def validate_glyph_id(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"Invalid glyph ID: {v!r}")
        return v


class CopyInput(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def validate_text(cls, v: str) -> str:
        if not v:
            raise ValueError("text must not be empty")
        return v
