"""HTML rendering of ranked syntax entries for the search page."""

from __future__ import annotations

from html import escape
from typing import Callable, Iterable, List, Optional

from skript_search.core.entries import DEFAULT_PALETTE, Category, CategoryPalette, Entry
from skript_search.core.identifier import identify
from skript_search.core.renderer import render_html
from skript_search.core.shortener import shorten

MarkdownRenderer = Callable[[str], str]

STYLE_GRAY = "var(--gray)"
STYLE_DARK_CODE = "var(--dark-code)"
STYLE_OFF = "#12151a6e"
STYLE_ON = "#a3be8c43"

STYLES = {
    "header": "margin-bottom: 0lh; padding: 0.25ch 0.5ch; display: flex; flex-wrap: wrap; gap: 1ch; align-items: baseline;",
    "metadata": "font-size: 0.9em;",
    "syntax": "margin-left: 1ch; margin-bottom: 0.25lh; display: flex; align-items: flex-start; gap: 0.5ch;",
    "code": f"background-color: {STYLE_DARK_CODE}; padding: 0.25ch 0.5ch; width: auto; display: inline-block; font-size: 0.9em;",
    "description": "margin-left: 1ch; margin-top: 0; margin-bottom: 0.5lh",
    "button": f"margin-left: 0.5ch; padding: 0.3ch; background-color: {STYLE_OFF}; border: none; cursor: pointer; font-size: 0.9em; overflow: visible; color: {STYLE_GRAY};",
}

MESSAGES = {
    "searching": '<p class="extra-info">Searching...</p>',
    "loading": '<p class="extra-info">Loading syntax database...</p>',
    "no_results": '<p class="extra-info">No results found.</p>',
    "error": '<p class="extra-info">Search failed. Please try again.</p>',
    "empty_state": (
        '<p class="extra-info">Search for Skript syntax, types, expressions, and more...</p>'
        '<p class="extra-info">Try searching for "player", "damage", or "location"</p>'
    ),
}


def plain_text_markdown(text: str) -> str:
    """Escape ``text`` and keep its line breaks; stands in until a real renderer is injected."""

    return escape(text).replace("\n", "<br>")


def _title_style(color: str) -> str:
    return f"margin: 0; font-size: 1.5em; color: {color}"


def _block_style(color: str, highlighted: bool) -> str:
    background = STYLE_ON if highlighted else STYLE_OFF
    return (
        f"margin-bottom: 0.5lh; padding: 1ch; background-color: {background}; "
        f"border-left: 0.5ch solid {color}; max-width: 100ch;"
    )


class ResultFormatter:
    """Turns entries into the result blocks shown by the UI.

    Optional fields that are empty produce no markup at all. Descriptions go
    through ``markdown``, a text-to-inline-HTML callable.
    """

    def __init__(
        self,
        *,
        palette: CategoryPalette = DEFAULT_PALETTE,
        markdown: Optional[MarkdownRenderer] = None,
    ) -> None:
        self.palette = palette
        self.markdown = markdown or plain_text_markdown

    def _metadata(self, entry: Entry) -> str:
        parts = [escape(value) for value in (entry.addon, entry.since) if value]
        if not parts:
            return ""
        return f'<span class="extra-info" style="{STYLES["metadata"]}">{" ".join(parts)}</span>'

    def _syntax_line(self, line: str, index: int, *, show_toggle: bool, short: bool) -> str:
        short_line = shorten(line)
        shown = short_line if short else line
        toggle = ""
        if show_toggle:
            mode, label = ("short", "full") if short else ("full", "short")
            toggle = (
                f'<button class="toggle-button" data-syntax="{escape(line)}" data-index="{index}" '
                f'data-mode="{mode}" style="{STYLES["button"]}">{label}</button>'
            )
        return (
            f'<div style="{STYLES["syntax"]}">'
            f"{toggle}"
            f'<code style="{STYLES["code"]}" data-full="{escape(line)}" data-short="{escape(short_line)}">'
            f"{render_html(shown)}</code>"
            f'<button class="copy-button" data-syntax="{escape(shown)}" data-index="{index}" '
            f'style="{STYLES["button"]}">copy</button>'
            "</div>"
        )

    def syntax_lines(self, entry: Entry, *, short: bool = False) -> str:
        # Function signatures have nothing to shorten.
        show_toggle = entry.category != Category.FUNCTION.value
        return "".join(
            self._syntax_line(line, index, show_toggle=show_toggle, short=short and show_toggle)
            for index, line in enumerate(entry.syntax_lines)
        )

    def render_result(self, entry: Entry, *, short: bool = False, highlighted: bool = False) -> str:
        color = self.palette.color_for(entry.category)
        result_id = identify(entry)
        description = self.markdown(entry.description) if entry.description else ""

        header = (
            f'<div style="{STYLES["header"]}">'
            f'<h2 style="{_title_style(color)}">{escape(entry.title)}</h2>'
            f'<span style="color: {color}">{escape(entry.category)}</span>'
            f"{self._metadata(entry)}"
            f'<button class="link-button" data-result-id="{escape(result_id)}" '
            f'style="{STYLES["button"]}">link</button>'
            "</div>"
        )
        paragraph = f'<p style="{STYLES["description"]}">{description}</p>' if description else ""
        return (
            f'<div id="result-{escape(result_id)}" style="{_block_style(color, highlighted)}">'
            f"{header}{self.syntax_lines(entry, short=short)}{paragraph}"
            "</div>"
        )

    def render_results(
        self,
        entries: Iterable[Entry],
        duration_ms: int,
        *,
        short: bool = False,
        highlight_id: Optional[str] = None,
    ) -> str:
        """Summary line plus one block per entry, or the no-results message."""

        items: List[Entry] = list(entries)
        if not items:
            return MESSAGES["no_results"]
        blocks = [
            self.render_result(
                entry,
                short=short,
                highlighted=bool(highlight_id) and identify(entry) == highlight_id,
            )
            for entry in items
        ]
        summary = f'<p class="extra-info">Took {int(duration_ms)}ms for {len(items)} results</p><br>'
        return summary + "".join(blocks)


__all__ = ["MESSAGES", "MarkdownRenderer", "ResultFormatter", "plain_text_markdown"]
