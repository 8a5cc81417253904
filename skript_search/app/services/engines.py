"""Candidate engines producing scored matches for a query.

The orchestrator treats an engine as a black box: it is built once per loaded
corpus and answers ``search(query)`` with ``(entry, score)`` pairs, best first.
"""

from __future__ import annotations

from typing import Dict, List, Protocol, Sequence, Tuple

from rapidfuzz import fuzz, process, utils

from skript_search.core.entries import Entry

SEARCH_KEYS: Tuple[str, ...] = ("title", "syntax", "addon", "category")


class SearchEngine(Protocol):
    def search(self, query: str) -> List[Tuple[Entry, float]]:
        ...


class RapidFuzzEngine:
    """Fuzzy matching over several entry fields with :mod:`rapidfuzz`.

    Each field is scored with ``WRatio``; an entry keeps its best field score.
    Scores are reported on a 0-1 scale and entries below ``cutoff`` (0-100)
    are left out. Ties keep corpus order.
    """

    def __init__(
        self,
        entries: Sequence[Entry],
        *,
        cutoff: float = 50.0,
        keys: Sequence[str] = SEARCH_KEYS,
    ) -> None:
        self._entries = list(entries)
        self._cutoff = float(cutoff)
        self._columns: Dict[str, List[str]] = {
            key: [getattr(entry, key, "") or "" for entry in self._entries] for key in keys
        }

    def search(self, query: str) -> List[Tuple[Entry, float]]:
        if not query or not self._entries:
            return []

        best: Dict[int, float] = {}
        for column in self._columns.values():
            matches = process.extract(
                query,
                column,
                scorer=fuzz.WRatio,
                processor=utils.default_process,
                score_cutoff=self._cutoff,
                limit=None,
            )
            for _choice, score, index in matches:
                if score > best.get(index, -1.0):
                    best[index] = score

        ordered = sorted(best.items(), key=lambda item: (-item[1], item[0]))
        return [(self._entries[index], score / 100.0) for index, score in ordered]


class SubstringEngine:
    """Case-insensitive containment over title, syntax and category."""

    def __init__(self, entries: Sequence[Entry]) -> None:
        self._rows = [
            (entry, (entry.title.lower(), entry.syntax.lower(), entry.category.lower()))
            for entry in entries
        ]

    def search(self, query: str) -> List[Tuple[Entry, float]]:
        needle = (query or "").lower()
        if not needle:
            return []
        return [
            (entry, 1.0)
            for entry, fields in self._rows
            if any(needle in field for field in fields)
        ]


__all__ = ["RapidFuzzEngine", "SEARCH_KEYS", "SearchEngine", "SubstringEngine"]
