"""Application wiring for the Skript syntax search page."""

from __future__ import annotations

from typing import Optional

from skript_search.core.entries import DEFAULT_PALETTE, CategoryPalette
from skript_search.utils.logging_config import configure_logging
from skript_search.utils.observability import get_logger
from skript_search.utils.telemetry import StructuredTelemetry, TelemetryLogger

from .config import ENGINE_SUBSTRING, SearchSettings
from .data.corpus import CorpusContext
from .services.engines import RapidFuzzEngine, SubstringEngine
from .services.history import SearchHistory
from .services.result_formatter import MarkdownRenderer, ResultFormatter
from .services.search_service import EngineFactory, SearchOrchestrator, SearchOutcome
from .ui.gradio import create_interface


def build_engine_factory(settings: SearchSettings) -> EngineFactory:
    if settings.engine == ENGINE_SUBSTRING:
        return SubstringEngine
    cutoff = settings.fuzzy_cutoff
    return lambda entries: RapidFuzzEngine(entries, cutoff=cutoff)


def build_corpus(settings: SearchSettings) -> CorpusContext:
    return CorpusContext(
        url=None if settings.corpus_path else settings.corpus_url,
        path=settings.corpus_path,
        addons=settings.addons,
        retries=settings.fetch_retries,
        retry_delay=settings.retry_delay,
        timeout=settings.request_timeout,
    )


class SkriptSearchApp:
    """High-level facade bundling the corpus, the orchestrator and the formatter."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        *,
        corpus: Optional[CorpusContext] = None,
        orchestrator: Optional[SearchOrchestrator] = None,
        formatter: Optional[ResultFormatter] = None,
        palette: CategoryPalette = DEFAULT_PALETTE,
        markdown: Optional[MarkdownRenderer] = None,
    ) -> None:
        self.settings = settings or SearchSettings.from_env()
        self._logger = get_logger(__name__).bind(component="app_facade")

        self.corpus = corpus or build_corpus(self.settings)
        telemetry = StructuredTelemetry(listeners=[TelemetryLogger()])
        self.orchestrator = orchestrator or SearchOrchestrator(
            self.corpus,
            engine_factory=build_engine_factory(self.settings),
            history=SearchHistory(self.settings.max_history),
            telemetry=telemetry,
        )
        self.formatter = formatter or ResultFormatter(palette=palette, markdown=markdown)

        self._logger.info(
            "Application dependencies wired",
            context={
                "corpus": self.corpus.source,
                "engine": self.settings.engine,
                "addons": list(self.settings.addons),
            },
        )

    # Public API ------------------------------------------------------------
    def search(self, query: str, *, record_history: bool = True) -> SearchOutcome:
        return self.orchestrator.search(query, record_history=record_history)

    def render(self, query: str, *, short: bool = False) -> str:
        outcome = self.search(query)
        return self.formatter.render_results(outcome.entries, outcome.duration_ms, short=short)

    def reload_corpus(self) -> int:
        """Drop the loaded corpus and read it again; returns the entry count."""

        self.orchestrator.invalidate()
        return len(self.corpus.load())

    def create_gradio_interface(self):
        return create_interface(
            self.orchestrator,
            self.formatter,
            min_query_length=self.settings.min_query_length,
            history_size=self.settings.max_history,
        )


def main() -> None:
    configure_logging()
    app = SkriptSearchApp()
    interface = app.create_gradio_interface()
    interface.launch(
        server_name="0.0.0.0",
        server_port=app.settings.server_port,
        share=app.settings.share,
    )


__all__ = ["SkriptSearchApp", "build_corpus", "build_engine_factory", "main"]
