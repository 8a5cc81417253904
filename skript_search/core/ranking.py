"""Promotion of exact type matches ahead of fuzzy search candidates."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

from .entries import Category, Entry
from .errors import ContractViolationError

_PLURAL_ENDING = re.compile(r"s$")

Candidate = Tuple[Entry, float]


@dataclass(frozen=True)
class RankedResult:
    entry: Entry
    score: float
    is_exact_type_match: bool


def depluralize(value: str) -> str:
    """Drop a single trailing ``s``."""

    return _PLURAL_ENDING.sub("", value)


def type_query(type_name: str | None) -> str:
    """Query issued when a type link is followed: the singular type name."""

    return depluralize((type_name or "").strip())


def normalize_query(query: str | None) -> str:
    return depluralize((query or "").lower().strip())


def is_exact_type_match(entry: Entry, normalized_query: str) -> bool:
    """Whether a Type entry names, or is spelled by, the normalized query.

    The title is de-pluralized before comparing; the syntax text is searched
    as is. An empty query never matches.
    """

    if not normalized_query or entry.category != Category.TYPE.value:
        return False
    if depluralize(entry.title.lower()) == normalized_query:
        return True
    return bool(entry.syntax) and normalized_query in entry.syntax.lower()


def classify(candidates: Iterable[Candidate], query: str | None) -> List[RankedResult]:
    """Stable partition of ``candidates``: exact type matches first.

    Relative order inside each partition is the order the fuzzy engine
    produced; scores are carried along but never re-sorted.
    """

    normalized = normalize_query(query)
    exact: List[RankedResult] = []
    others: List[RankedResult] = []
    for position, candidate in enumerate(candidates):
        entry, score = candidate
        if entry is None:
            raise ContractViolationError("rank", f"candidate {position} has no entry")
        matched = is_exact_type_match(entry, normalized)
        bucket = exact if matched else others
        bucket.append(RankedResult(entry=entry, score=float(score), is_exact_type_match=matched))
    return exact + others


def rank(candidates: Sequence[Candidate], query: str | None) -> List[Entry]:
    return [result.entry for result in classify(candidates, query)]


__all__ = [
    "Candidate",
    "RankedResult",
    "classify",
    "depluralize",
    "is_exact_type_match",
    "normalize_query",
    "rank",
    "type_query",
]
