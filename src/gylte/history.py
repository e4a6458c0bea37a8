from __future__ import annotations

import threading


class SearchHistory:
    """Most-recent-first list of distinct search terms, capped at ``max_size``."""

    def __init__(self, max_size: int = 20) -> None:
        self._lock = threading.Lock()
        self._terms: list[str] = []
        self.max_size = max_size

    def add(self, term: str) -> None:
        if not term:
            return
        with self._lock:
            if term in self._terms:
                self._terms.remove(term)
            self._terms.insert(0, term)
            del self._terms[self.max_size :]

    def items(self) -> list[str]:
        with self._lock:
            return list(self._terms)

    def clear(self) -> None:
        with self._lock:
            self._terms.clear()
