"""Error taxonomy for the Gylte backend.

Only the boundary layers raise these: input validation, the store's write
path, the fixture importer and lookups by glyph ID. Matching and ranking are
pure functions over strings and never raise.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    INVALID_INPUT = "INVALID_INPUT"
    GLYPH_NOT_FOUND = "GLYPH_NOT_FOUND"
    STORE_ERROR = "STORE_ERROR"
    IMPORT_FAILED = "IMPORT_FAILED"


class GylteError(Exception):
    """Structured error surfaced to the GUI bridge and the CLI."""

    def __init__(self, code: ErrorCode, message: str, recoverable: bool = False) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.recoverable = recoverable

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": {
                "code": self.code.value,
                "message": self.message,
                "recoverable": self.recoverable,
            }
        }
