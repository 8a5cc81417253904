"""Bounded list of recent search queries."""

from __future__ import annotations

import threading
from typing import Iterable, List, Optional


class SearchHistory:
    """Most-recent-first query list without duplicates."""

    def __init__(self, max_entries: int = 10, initial: Optional[Iterable[str]] = None) -> None:
        self.max_entries = max(1, int(max_entries))
        self._lock = threading.RLock()
        self._queries: List[str] = []
        for query in reversed(list(initial or [])):
            self.record(query)

    def record(self, query: str) -> List[str]:
        """Move ``query`` to the front, dropping the oldest queries over the limit."""

        cleaned = (query or "").strip()
        with self._lock:
            if cleaned:
                self._queries = [cleaned] + [item for item in self._queries if item != cleaned]
                del self._queries[self.max_entries :]
            return list(self._queries)

    def items(self) -> List[str]:
        with self._lock:
            return list(self._queries)

    def clear(self) -> None:
        with self._lock:
            self._queries = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._queries)


__all__ = ["SearchHistory"]
