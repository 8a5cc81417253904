"""User interface assembly for the Gradio front-end."""

from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import gradio as gr

from skript_search.core.identifier import identify

from ..errors import CorpusUnavailableError, SearchFailedError
from ..services.history import SearchHistory
from ..services.result_formatter import MESSAGES, ResultFormatter
from ..services.search_service import SearchOrchestrator
from ...utils.observability import get_logger

_logger = get_logger(__name__).bind(component="gradio_ui")

HISTORY_STORAGE_KEY = "skript-search-history"


def render_search(
    orchestrator: SearchOrchestrator,
    formatter: ResultFormatter,
    query: Optional[str],
    *,
    short: bool = False,
    highlight_id: Optional[str] = None,
    record_history: bool = True,
    history: Optional[SearchHistory] = None,
) -> str:
    """Run ``query`` and return the results markup shown in the page.

    A ``highlight_id`` naming a known entry puts that entry first and marks
    it, whether or not the query matched it.
    """

    if not (query or "").strip():
        return MESSAGES["empty_state"]

    try:
        outcome = orchestrator.search(query, record_history=record_history, history=history)
        linked = orchestrator.find_by_id(highlight_id) if highlight_id else None
    except (CorpusUnavailableError, SearchFailedError) as exc:
        _logger.warning("Search could not be rendered", context={"error": str(exc)})
        return MESSAGES["error"]

    entries = outcome.entries
    if linked is not None:
        entries = [linked] + [entry for entry in entries if entry != linked]
    return formatter.render_results(
        entries,
        outcome.duration_ms,
        short=short,
        highlight_id=identify(linked) if linked is not None else None,
    )


def session_search(
    orchestrator: SearchOrchestrator,
    formatter: ResultFormatter,
    query: Optional[str],
    recent: Optional[Sequence[str]],
    *,
    short: bool = False,
    highlight_id: Optional[str] = None,
    record_history: bool = True,
    history_size: int = 10,
) -> Tuple[str, List[str]]:
    """Search on behalf of one browser; ``recent`` is that browser's query list.

    Returns the results markup and the updated list to store back.
    """

    history = SearchHistory(history_size, initial=recent)
    html = render_search(
        orchestrator,
        formatter,
        query,
        short=short,
        highlight_id=highlight_id,
        record_history=record_history,
        history=history,
    )
    return html, history.items()


def search_from_params(
    orchestrator: SearchOrchestrator,
    formatter: ResultFormatter,
    params: Mapping[str, str],
    recent: Optional[Sequence[str]],
    *,
    short: bool = False,
    history_size: int = 10,
) -> Tuple[str, str, List[str]]:
    """Handle ``?q=`` and ``?id=``: returns the query, the markup and the recent list."""

    query = (params.get("q") or "").strip()
    if not query:
        return "", MESSAGES["empty_state"], list(recent or [])
    html, updated = session_search(
        orchestrator,
        formatter,
        query,
        recent,
        short=short,
        highlight_id=(params.get("id") or "").strip().lower() or None,
        history_size=history_size,
    )
    return query, html, updated


def _format_telemetry(snapshot: Dict[str, Any]) -> str:
    """Markdown summary of the phase timings of the last search."""

    timings = snapshot.get("timings") or {}
    if not timings:
        return ""
    chunks = [
        f"`{name}` {float(bucket.get('total', 0.0)) * 1000:.1f}ms"
        for name, bucket in timings.items()
    ]
    return "Phases: " + ", ".join(chunks)


def create_interface(
    orchestrator: SearchOrchestrator,
    formatter: ResultFormatter,
    *,
    min_query_length: int = 2,
    history_size: int = 10,
) -> gr.Blocks:
    """Construct the interactive Gradio Blocks UI.

    Recent searches live in the visitor's browser storage, one list per
    browser.
    """

    def _dropdown(recent: List[str]) -> Dict[str, Any]:
        return gr.update(choices=recent, value=None)

    def search_interface(
        query: str, short: bool, recent: List[str], record_history: bool = True
    ) -> Tuple[str, Dict[str, Any], str, List[str]]:
        html, recent = session_search(
            orchestrator,
            formatter,
            query,
            recent,
            short=short,
            record_history=record_history,
            history_size=history_size,
        )
        telemetry = _format_telemetry(orchestrator.get_latest_telemetry())
        return html, _dropdown(recent), telemetry, recent

    def live_search(query: str, short: bool, recent: List[str]):
        if len((query or "").strip()) < min_query_length:
            return gr.update(), gr.update(), gr.update(), gr.update()
        # typing in the box searches as you go but only submitted queries enter the history
        return search_interface(query, short, recent, record_history=False)

    def pick_history(query: Optional[str], short: bool, recent: List[str]):
        if not query:
            return gr.update(), gr.update(), gr.update(), gr.update(), gr.update()
        html, history, telemetry, recent = search_interface(query, short, recent)
        return query, html, history, telemetry, recent

    def load_from_url(short: bool, recent: List[str], request: gr.Request):
        params = dict(getattr(request, "query_params", {}) or {}) if request else {}
        query, html, recent = search_from_params(
            orchestrator,
            formatter,
            params,
            recent,
            short=short,
            history_size=history_size,
        )
        return query, html, _dropdown(recent), recent

    with gr.Blocks(title="Skript Syntax Search") as interface:
        recent_state = gr.BrowserState([], storage_key=HISTORY_STORAGE_KEY)
        gr.Markdown("## Skript syntax search")
        with gr.Row():
            query_input = gr.Textbox(
                label="Search",
                placeholder='Search syntax, e.g. "player", "damage", "location"',
                lines=1,
                scale=4,
            )
            short_toggle = gr.Checkbox(value=False, label="Short syntax", scale=1)
        with gr.Row():
            history_dropdown = gr.Dropdown(
                choices=[],
                label="Recent searches",
                interactive=True,
                scale=4,
            )
            search_btn = gr.Button("Search", variant="primary", scale=1)
        telemetry_md = gr.Markdown("")
        results_html = gr.HTML(MESSAGES["empty_state"])

        inputs = [query_input, short_toggle, recent_state]
        outputs = [results_html, history_dropdown, telemetry_md, recent_state]
        query_input.submit(search_interface, inputs, outputs)
        search_btn.click(search_interface, inputs, outputs)
        query_input.change(live_search, inputs, outputs)
        short_toggle.change(live_search, inputs, outputs)
        history_dropdown.select(
            pick_history,
            [history_dropdown, short_toggle, recent_state],
            [query_input, results_html, history_dropdown, telemetry_md, recent_state],
        )
        interface.load(
            load_from_url,
            [short_toggle, recent_state],
            [query_input, results_html, history_dropdown, recent_state],
        )

    return interface


__all__ = [
    "HISTORY_STORAGE_KEY",
    "create_interface",
    "render_search",
    "search_from_params",
    "session_search",
]
