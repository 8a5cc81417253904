"""Pure syntax engine: parsing, rendering, shortening, ids and ranking."""

from .brackets import find_closing, is_balanced, split_top_level
from .entries import Category, CategoryPalette, DEFAULT_PALETTE, Entry
from .errors import ContractViolationError, PaletteConfigurationError, SkriptSearchError
from .identifier import identify
from .ranking import (
    RankedResult,
    classify,
    is_exact_type_match,
    normalize_query,
    rank,
    type_query,
)
from .renderer import (
    LiteralText,
    OptionalGroup,
    ParsedToken,
    PlainSeparator,
    RenderedSyntax,
    TypeLink,
    extract_types,
    parse_line,
    render,
    render_html,
)
from .shortener import LITERAL_CHOICE_MARKER, shorten

__all__ = [
    "Category",
    "CategoryPalette",
    "ContractViolationError",
    "DEFAULT_PALETTE",
    "Entry",
    "LITERAL_CHOICE_MARKER",
    "LiteralText",
    "OptionalGroup",
    "PaletteConfigurationError",
    "ParsedToken",
    "PlainSeparator",
    "RankedResult",
    "RenderedSyntax",
    "SkriptSearchError",
    "TypeLink",
    "classify",
    "extract_types",
    "find_closing",
    "identify",
    "is_balanced",
    "is_exact_type_match",
    "normalize_query",
    "parse_line",
    "rank",
    "render",
    "render_html",
    "shorten",
    "split_top_level",
    "type_query",
]
