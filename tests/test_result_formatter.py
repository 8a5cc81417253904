from skript_search.app.services.result_formatter import (
    MESSAGES,
    STYLE_ON,
    ResultFormatter,
    plain_text_markdown,
)
from skript_search.core.entries import Entry


def _by_title(entries, title):
    return next(entry for entry in entries if entry.title == title)


def test_plain_text_markdown_escapes_and_keeps_breaks():
    assert plain_text_markdown("a < b\nc") == "a &lt; b<br>c"


def test_render_result_block(sample_entries):
    html = ResultFormatter().render_result(_by_title(sample_entries, "Give"))

    assert 'id="result-give-effect-skript"' in html
    assert "#FFA94D" in html
    assert html.count("<code") == 2
    assert html.count('class="toggle-button"') == 2
    assert html.count('class="copy-button"') == 2
    assert 'data-result-id="give-effect-skript"' in html
    assert 'data-type="item"' in html
    assert 'data-type="players"' in html
    assert "Skript 1.0" in html
    assert "Gives an item to a **player**." in html


def test_short_mode_shows_shortened_syntax(sample_entries):
    formatter = ResultFormatter()
    give = _by_title(sample_entries, "Give")

    full = formatter.syntax_lines(give)
    short = formatter.syntax_lines(give, short=True)

    assert 'data-short="give %item% [to %player%]"' in full
    assert 'data-syntax="give [a] %item% [to %player%]"' in full
    assert 'data-syntax="give %item% [to %player%]"' in short
    assert 'data-mode="short"' in short


def test_function_entries_have_no_toggle():
    entry = Entry(title="abs", category="Function", syntax="abs(n: number)")

    html = ResultFormatter().syntax_lines(entry, short=True)

    assert "toggle-button" not in html
    assert "abs(n: number)" in html


def test_empty_optional_fields_are_omitted():
    html = ResultFormatter().render_result(Entry(title="Bare", category="Event"))

    assert 'class="extra-info"' not in html
    assert "<p" not in html
    assert "<code" not in html


def test_unknown_category_uses_fallback_colour():
    html = ResultFormatter().render_result(Entry(title="Odd", category="Mystery"))

    assert "var(--foreground)" in html


def test_custom_markdown_renderer_is_used(sample_entries):
    formatter = ResultFormatter(markdown=lambda text: "<strong>rendered</strong>")

    html = formatter.render_result(_by_title(sample_entries, "Give"))

    assert "<strong>rendered</strong>" in html


def test_render_results_summary_and_highlight(sample_entries):
    html = ResultFormatter().render_results(
        sample_entries[:2], 12.7, highlight_id="player-type-skript"
    )

    assert html.startswith('<p class="extra-info">Took 12ms for 2 results</p>')
    assert html.count(STYLE_ON) == 1
    assert html.index("result-give-effect-skript") < html.index("result-player-type-skript")


def test_render_results_without_entries():
    assert ResultFormatter().render_results([], 3) == MESSAGES["no_results"]
