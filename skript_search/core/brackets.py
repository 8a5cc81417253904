"""Depth-tracking delimiter scanning for syntax patterns."""

from __future__ import annotations

from typing import List, Optional

from .errors import ContractViolationError

OPTIONAL_OPEN = "["
OPTIONAL_CLOSE = "]"
GROUP_OPEN = "("
GROUP_CLOSE = ")"
ALTERNATIVE_SEPARATOR = "|"


def find_closing(text: str, start: int, opening: str, closing: str) -> Optional[int]:
    """Return the index one past the delimiter closing the group at ``start``.

    ``text[start]`` must be ``opening``. Nested ``opening`` delimiters raise
    the depth, ``closing`` lowers it, and the scan stops when the depth is
    back to zero. ``None`` means the group is unbalanced: the end of the text
    was reached first.
    """

    if not 0 <= start < len(text) or text[start] != opening:
        raise ContractViolationError(
            "find_closing",
            f"index {start} does not point at {opening!r}",
        )

    depth = 1
    index = start + 1
    while index < len(text):
        char = text[index]
        if char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return None


def is_balanced(text: str, opening: str, closing: str) -> bool:
    """Whether every ``opening`` in ``text`` is closed in order and no stray ``closing`` appears."""

    depth = 0
    for char in text:
        if char == opening:
            depth += 1
        elif char == closing:
            depth -= 1
            if depth < 0:
                return False
    return depth == 0


def split_top_level(text: str, separator: str = ALTERNATIVE_SEPARATOR) -> List[str]:
    """Split ``text`` on ``separator`` outside of any nested group.

    Parentheses and square brackets are counted separately; a separator only
    splits when both depths are zero. Stray closing delimiters never push a
    depth below zero.
    """

    parts: List[str] = []
    paren_depth = 0
    bracket_depth = 0
    last = 0
    for index, char in enumerate(text):
        if char == GROUP_OPEN:
            paren_depth += 1
        elif char == GROUP_CLOSE:
            paren_depth = max(0, paren_depth - 1)
        elif char == OPTIONAL_OPEN:
            bracket_depth += 1
        elif char == OPTIONAL_CLOSE:
            bracket_depth = max(0, bracket_depth - 1)
        elif char == separator and paren_depth == 0 and bracket_depth == 0:
            parts.append(text[last:index])
            last = index + 1
    parts.append(text[last:])
    return parts


__all__ = [
    "ALTERNATIVE_SEPARATOR",
    "GROUP_CLOSE",
    "GROUP_OPEN",
    "OPTIONAL_CLOSE",
    "OPTIONAL_OPEN",
    "find_closing",
    "is_balanced",
    "split_top_level",
]
