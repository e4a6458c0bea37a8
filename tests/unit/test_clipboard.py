"""Unit tests for gylte.clipboard."""

from __future__ import annotations

import pyperclip

from gylte.clipboard import Clipboard


class TestClipboard:
    def test_copies_text(self) -> None:
        copied: list[str] = []
        clipboard = Clipboard(copy=copied.append)
        assert clipboard.copy("\uEB99") is True
        assert copied == ["\uEB99"]

    def test_missing_backend_reports_false(self) -> None:
        def no_clipboard(text: str) -> None:
            raise pyperclip.PyperclipException("could not find a copy/paste mechanism")

        assert Clipboard(copy=no_clipboard).copy("x") is False

    def test_defaults_to_pyperclip(self, monkeypatch) -> None:
        copied: list[str] = []
        monkeypatch.setattr(pyperclip, "copy", copied.append)
        assert Clipboard().copy("abc") is True
        assert copied == ["abc"]
