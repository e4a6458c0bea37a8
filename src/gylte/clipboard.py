"""System clipboard sink.

Wraps ``pyperclip`` so a missing clipboard backend (headless Linux without
xclip/xsel/wl-clipboard) is logged and reported instead of raised.
"""

from __future__ import annotations

from collections.abc import Callable

import pyperclip
import structlog

log = structlog.get_logger()


class Clipboard:
    def __init__(self, copy: Callable[[str], None] | None = None) -> None:
        self._copy = copy or pyperclip.copy

    def copy(self, text: str) -> bool:
        """Put ``text`` on the clipboard. Returns False if that was not possible."""
        try:
            self._copy(text)
        except pyperclip.PyperclipException:
            log.warning("clipboard_unavailable", exc_info=True)
            return False
        log.info("clipboard_copied", length=len(text))
        return True
