"""Syntax database entries and category styling."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Mapping, Optional

from .errors import PaletteConfigurationError


class Category(str, Enum):
    """Documented syntax element kinds."""

    EVENT = "Event"
    EFFECT = "Effect"
    SECTION = "Section"
    EXPRESSION = "Expression"
    TYPE = "Type"
    FUNCTION = "Function"
    CONDITION = "Condition"
    STRUCTURE = "Structure"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Category"]:
        """Return the matching category, or ``None`` for unknown labels."""

        try:
            return cls(value)
        except ValueError:
            return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return "\n".join(_text(item) for item in value if item is not None)
    return str(value)


@dataclass(frozen=True)
class Entry:
    """One documented syntax item."""

    title: str
    category: str
    syntax: str = ""
    description: str = ""
    addon: str = ""
    since: str = ""

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> "Entry":
        """Build an entry from corpus JSON; extra keys are ignored and missing ones are empty."""

        return cls(
            title=_text(payload.get("title")),
            category=_text(payload.get("category")),
            syntax=_text(payload.get("syntax")),
            description=_text(payload.get("description")),
            addon=_text(payload.get("addon")),
            since=_text(payload.get("since")),
        )

    @property
    def syntax_lines(self) -> List[str]:
        if not self.syntax:
            return []
        return self.syntax.split("\n")

    @property
    def known_category(self) -> Optional[Category]:
        return Category.parse(self.category)


DEFAULT_CATEGORY_COLORS: Mapping[Category, str] = {
    Category.EVENT: "#FF6B6B",
    Category.EFFECT: "#FFA94D",
    Category.SECTION: "#FFD93D",
    Category.EXPRESSION: "#6BCB77",
    Category.TYPE: "#4D96FF",
    Category.FUNCTION: "#A66CFF",
    Category.CONDITION: "#F06595",
    Category.STRUCTURE: "#20C997",
}

DEFAULT_FALLBACK_COLOR = "var(--foreground)"

_HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")


class CategoryPalette:
    """Category to colour table with a fallback for unknown categories.

    Every :class:`Category` needs a ``#rrggbb`` colour; the table is checked
    once here so rendering never has to.
    """

    def __init__(
        self,
        colors: Optional[Mapping[Category, str]] = None,
        *,
        default: str = DEFAULT_FALLBACK_COLOR,
    ) -> None:
        table = dict(DEFAULT_CATEGORY_COLORS if colors is None else colors)
        missing = [category.value for category in Category if category not in table]
        if missing:
            raise PaletteConfigurationError(f"missing colours for: {', '.join(missing)}")
        for category, color in table.items():
            if not isinstance(category, Category):
                raise PaletteConfigurationError(f"unknown category key {category!r}")
            if not isinstance(color, str) or not _HEX_COLOR.match(color):
                raise PaletteConfigurationError(
                    f"invalid colour {color!r} for {category.value}"
                )
        if not default:
            raise PaletteConfigurationError("default colour must not be empty")
        self._colors = table
        self.default = default

    def color_for(self, category: Optional[str]) -> str:
        known = Category.parse(category)
        if known is None:
            return self.default
        return self._colors[known]


DEFAULT_PALETTE = CategoryPalette()


__all__ = [
    "Category",
    "CategoryPalette",
    "DEFAULT_CATEGORY_COLORS",
    "DEFAULT_FALLBACK_COLOR",
    "DEFAULT_PALETTE",
    "Entry",
]
