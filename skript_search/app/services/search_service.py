"""Search orchestration: corpus, candidate engine, ranking and history."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence

from skript_search.core.entries import Entry
from skript_search.core.identifier import identify
from skript_search.core.ranking import RankedResult, classify, type_query

from ..data.corpus import CorpusContext
from ..errors import CorpusUnavailableError, SearchFailedError
from ...utils.observability import (
    add_span_attributes,
    create_counter,
    create_histogram,
    get_logger,
    record_exception,
    start_span,
)
from ...utils.telemetry import StructuredTelemetry
from .engines import RapidFuzzEngine, SearchEngine
from .history import SearchHistory

EngineFactory = Callable[[Sequence[Entry]], SearchEngine]


@dataclass(frozen=True)
class SearchOutcome:
    """Ranked results of one query and how long producing them took."""

    query: str
    results: List[RankedResult] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def entries(self) -> List[Entry]:
        return [result.entry for result in self.results]

    @property
    def exact_count(self) -> int:
        return sum(1 for result in self.results if result.is_exact_type_match)

    def __len__(self) -> int:
        return len(self.results)


class SearchOrchestrator:
    """Runs queries against the corpus owned by a :class:`CorpusContext`.

    The candidate engine is built lazily from the loaded entries and rebuilt
    whenever the corpus generation changes. Ranking itself is stateless.
    """

    def __init__(
        self,
        corpus: CorpusContext,
        *,
        engine_factory: Optional[EngineFactory] = None,
        history: Optional[SearchHistory] = None,
        telemetry: Optional[StructuredTelemetry] = None,
    ) -> None:
        self.corpus = corpus
        self.engine_factory: EngineFactory = engine_factory or RapidFuzzEngine
        self.history = history if history is not None else SearchHistory()
        self.telemetry = telemetry or StructuredTelemetry()

        self._engine_lock = threading.RLock()
        self._engine: Optional[SearchEngine] = None
        self._engine_generation = -1

        self._logger = get_logger(__name__).bind(
            component="search_orchestrator",
            corpus=corpus.source,
        )
        self._metric_requests = create_counter(
            "skript_search_requests_total",
            "Total syntax search requests received.",
        )
        self._metric_failures = create_counter(
            "skript_search_request_failures_total",
            "Syntax search requests that raised an exception.",
            label_names=("stage",),
        )
        self._metric_duration = create_histogram(
            "skript_search_request_seconds",
            "Latency of syntax search requests.",
        )
        self._metric_index_builds = create_counter(
            "skript_search_index_builds_total",
            "Candidate engine (re)builds.",
        )

    # Engine lifecycle -------------------------------------------------------
    def _current_engine(self) -> SearchEngine:
        entries = self.corpus.ensure_loaded()
        generation = self.corpus.generation
        with self._engine_lock:
            if self._engine is None or self._engine_generation != generation:
                with self.telemetry.timer("build_index", {"entries": len(entries)}):
                    self._engine = self.engine_factory(entries)
                self._engine_generation = generation
                self._metric_index_builds.inc()
                self._logger.info(
                    "Search index built",
                    context={"entries": len(entries), "generation": generation},
                )
            return self._engine

    def invalidate(self) -> None:
        """Drop the corpus and the engine built from it."""

        with self._engine_lock:
            self._engine = None
            self._engine_generation = -1
        self.corpus.invalidate()

    def get_latest_telemetry(self) -> Dict[str, Any]:
        return self.telemetry.latest_snapshot()

    # Queries ----------------------------------------------------------------
    def search(
        self,
        query: Optional[str],
        *,
        record_history: bool = True,
        history: Optional[SearchHistory] = None,
    ) -> SearchOutcome:
        """Return ranked results for ``query``.

        Blank queries return an empty outcome without loading anything.
        When given, ``history`` records the query in place of the
        orchestrator's own list.
        Raises :class:`CorpusUnavailableError` when the corpus cannot be
        loaded and :class:`SearchFailedError` when the engine fails.
        """

        cleaned = (query or "").strip()
        if not cleaned:
            return SearchOutcome(query="")

        self._metric_requests.inc()
        self.telemetry.start_trace("search")
        self.telemetry.annotate("query", cleaned)

        with start_span("skript_search.search", {"query.length": len(cleaned)}) as span:
            start = time.perf_counter()
            try:
                engine = self._current_engine()
            except CorpusUnavailableError as exc:
                self._metric_failures.labels(stage="corpus").inc()
                record_exception(span, exc)
                self._logger.error(
                    "Corpus unavailable for search",
                    context={"query": cleaned, "error": str(exc)},
                )
                raise

            try:
                with self.telemetry.timer("candidates") as details:
                    candidates = engine.search(cleaned)
                    details["count"] = len(candidates)
            except Exception as exc:
                self._metric_failures.labels(stage="engine").inc()
                record_exception(span, exc)
                self._logger.error(
                    "Search engine failed",
                    context={"query": cleaned, "error": str(exc)},
                )
                raise SearchFailedError(cleaned, exc) from exc

            with self.telemetry.timer("rank"):
                results = classify(candidates, cleaned)

            elapsed = time.perf_counter() - start
            self._metric_duration.observe(elapsed)
            outcome = SearchOutcome(
                query=cleaned,
                results=results,
                duration_ms=int(round(elapsed * 1000)),
            )
            add_span_attributes(
                span,
                {"results.total": len(outcome), "results.exact": outcome.exact_count},
            )

        if record_history:
            (history if history is not None else self.history).record(cleaned)

        self.telemetry.annotate("result.total", len(outcome))
        self.telemetry.increment("search.completed")
        self._logger.info(
            "Search completed",
            context={
                "query": cleaned,
                "results": len(outcome),
                "exact": outcome.exact_count,
                "duration_ms": outcome.duration_ms,
            },
        )
        return outcome

    def find_by_id(self, result_id: Optional[str]) -> Optional[Entry]:
        """First loaded entry whose identifier equals ``result_id``."""

        wanted = (result_id or "").strip().lower()
        if not wanted:
            return None
        for entry in self.corpus.ensure_loaded():
            if identify(entry) == wanted:
                return entry
        return None

    def recent_queries(self) -> List[str]:
        return self.history.items()


__all__ = ["EngineFactory", "SearchOrchestrator", "SearchOutcome", "type_query"]
