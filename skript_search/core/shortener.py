"""Reduction of syntax pattern lines to their minimal equivalent form.

The short form keeps every parameter slot a pattern can take and drops the
rest: optional groups without a type placeholder disappear and alternative
groups collapse to their shortest choice. Alternative groups flagged with the
literal-choice marker enumerate keywords and are copied unchanged.
"""

from __future__ import annotations

import re
from typing import List

from .brackets import (
    GROUP_CLOSE,
    GROUP_OPEN,
    OPTIONAL_CLOSE,
    OPTIONAL_OPEN,
    find_closing,
    is_balanced,
    split_top_level,
)

LITERAL_CHOICE_MARKER = "¦"
PLACEHOLDER_DELIMITER = "%"

_WHITESPACE_RUN = re.compile(r"\s+")
_SPACE_AFTER_OPEN = re.compile(r"\[ ")
_SPACE_BEFORE_CLOSE = re.compile(r" \]")


def _tidy(text: str) -> str:
    text = _WHITESPACE_RUN.sub(" ", text)
    text = _SPACE_AFTER_OPEN.sub(OPTIONAL_OPEN, text)
    return _SPACE_BEFORE_CLOSE.sub(OPTIONAL_CLOSE, text)


def _literal_choice_end(text: str, index: int) -> int | None:
    """End of the literal-choice group opening at ``index``, if it is one."""

    end = find_closing(text, index, GROUP_OPEN, GROUP_CLOSE)
    if end is None or LITERAL_CHOICE_MARKER not in text[index + 1 : end - 1]:
        return None
    return end


def normalize(text: str) -> str:
    """Collapse whitespace and trim it inside square brackets.

    Literal-choice groups are copied character for character.
    """

    pieces: List[str] = []
    plain_start = 0
    index = 0
    while index < len(text):
        if text[index] == GROUP_OPEN:
            end = _literal_choice_end(text, index)
            if end is not None:
                pieces.append(_tidy(text[plain_start:index]))
                pieces.append(text[index:end])
                plain_start = index = end
                continue
        index += 1
    pieces.append(_tidy(text[plain_start:]))
    return "".join(pieces).strip()


def _shortest_alternative(inner: str) -> str:
    best = None
    for alternative in split_top_level(inner):
        candidate = normalize(_shorten_segment(alternative))
        # strict comparison keeps the leftmost of equally short candidates
        if best is None or len(candidate) < len(best):
            best = candidate
    return best or ""


def _shorten_segment(text: str) -> str:
    result: List[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == PLACEHOLDER_DELIMITER:
            # placeholders are copied whole, brackets inside them included
            end = text.find(PLACEHOLDER_DELIMITER, index + 1)
            if end != -1:
                result.append(text[index : end + 1])
                index = end + 1
                continue
        elif char == OPTIONAL_OPEN:
            end = find_closing(text, index, OPTIONAL_OPEN, OPTIONAL_CLOSE)
            # a group whose span cuts through a parenthesised group stays literal
            if end is not None and is_balanced(
                text[index + 1 : end - 1], GROUP_OPEN, GROUP_CLOSE
            ):
                inner = _shorten_segment(text[index + 1 : end - 1])
                if PLACEHOLDER_DELIMITER in inner:
                    result.append(f"{OPTIONAL_OPEN}{inner}{OPTIONAL_CLOSE}")
                index = end
                continue
        elif char == GROUP_OPEN:
            end = find_closing(text, index, GROUP_OPEN, GROUP_CLOSE)
            if end is not None and is_balanced(
                text[index + 1 : end - 1], OPTIONAL_OPEN, OPTIONAL_CLOSE
            ):
                group = text[index:end]
                if LITERAL_CHOICE_MARKER in group:
                    result.append(group)
                else:
                    result.append(_shortest_alternative(group[1:-1]))
                index = end
                continue
        result.append(char)
        index += 1
    return "".join(result)


def shorten(line: str) -> str:
    """Return the minimal form of ``line`` that keeps its type placeholders."""

    return normalize(_shorten_segment(normalize(line or "")))


__all__ = ["LITERAL_CHOICE_MARKER", "normalize", "shorten"]
