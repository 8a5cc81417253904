import pytest

from skript_search.core.entries import (
    DEFAULT_CATEGORY_COLORS,
    Category,
    CategoryPalette,
    Entry,
)
from skript_search.core.errors import PaletteConfigurationError


def test_from_mapping_ignores_unknown_fields_and_fills_missing():
    entry = Entry.from_mapping({"title": "Join", "category": "Event", "examples": ["on join:"]})

    assert entry == Entry(title="Join", category="Event")
    assert entry.syntax_lines == []


def test_from_mapping_coerces_values():
    entry = Entry.from_mapping(
        {
            "title": "Spawn",
            "category": "Effect",
            "syntax": ["spawn %entitytype%", "summon %entitytype%"],
            "since": 2.1,
            "addon": None,
        }
    )

    assert entry.syntax_lines == ["spawn %entitytype%", "summon %entitytype%"]
    assert entry.since == "2.1"
    assert entry.addon == ""


def test_known_category():
    assert Entry(title="x", category="Type").known_category is Category.TYPE
    assert Entry(title="x", category="Mystery").known_category is None


def test_palette_colors_and_default():
    palette = CategoryPalette()

    assert palette.color_for("Type") == "#4D96FF"
    assert palette.color_for("Mystery") == "var(--foreground)"
    assert palette.color_for(None) == "var(--foreground)"


def test_palette_requires_every_category():
    colors = dict(DEFAULT_CATEGORY_COLORS)
    colors.pop(Category.STRUCTURE)

    with pytest.raises(PaletteConfigurationError, match="Structure"):
        CategoryPalette(colors)


def test_palette_rejects_invalid_colours():
    colors = dict(DEFAULT_CATEGORY_COLORS)
    colors[Category.EVENT] = "red"

    with pytest.raises(PaletteConfigurationError):
        CategoryPalette(colors)


def test_palette_accepts_custom_default():
    palette = CategoryPalette(default="#000000")

    assert palette.color_for("Other") == "#000000"
