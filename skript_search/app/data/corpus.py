"""Ownership of the syntax corpus: loading, filtering and invalidation."""

from __future__ import annotations

import json
import threading
import time
from pathlib import Path
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple

import requests

from skript_search.core.entries import Entry
from skript_search.utils.observability import create_counter, get_logger

from ..errors import CorpusUnavailableError


def parse_corpus(payload: Any) -> Tuple[List[Entry], int]:
    """Turn decoded corpus JSON into entries.

    Accepts a list of entry objects or an object holding them under
    ``results``. Returns the entries and the number of skipped items that
    were not objects.
    """

    if isinstance(payload, Mapping):
        payload = payload.get("results")
    if not isinstance(payload, list):
        raise ValueError("corpus JSON must be a list or an object with a 'results' list")

    entries: List[Entry] = []
    skipped = 0
    for item in payload:
        if isinstance(item, Mapping):
            entries.append(Entry.from_mapping(item))
        else:
            skipped += 1
    return entries, skipped


def filter_addons(entries: Iterable[Entry], addons: Sequence[str]) -> List[Entry]:
    """Keep entries from the allowed addons; an empty allow-list keeps everything."""

    allowed = {addon.strip().lower() for addon in addons if addon and addon.strip()}
    if not allowed:
        return list(entries)
    return [entry for entry in entries if entry.addon.strip().lower() in allowed]


class CorpusContext:
    """Holds the loaded corpus for one UI session or process.

    The corpus is loaded lazily from a local JSON file or an HTTP endpoint.
    ``generation`` increases on every successful load so dependants (the
    fuzzy index) know when to rebuild; :meth:`invalidate` forgets the data.
    """

    def __init__(
        self,
        *,
        url: Optional[str] = None,
        path: Optional[str | Path] = None,
        addons: Sequence[str] = (),
        retries: int = 3,
        retry_delay: float = 5.0,
        timeout: float = 30.0,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if url is None and path is None:
            raise ValueError("CorpusContext needs a corpus url or path")
        self.url = url
        self.path = Path(path) if path is not None else None
        self.addons = tuple(addons)
        self._retries = max(1, int(retries))
        self._retry_delay = max(0.0, float(retry_delay))
        self._timeout = timeout
        self._session = session
        self._sleep = sleep
        self._lock = threading.RLock()
        self._entries: Optional[Tuple[Entry, ...]] = None
        self._generation = 0
        self._logger = get_logger(__name__).bind(
            component="corpus_context",
            source=self.source,
        )
        self._metric_loads = create_counter(
            "skript_search_corpus_loads_total",
            "Corpus load attempts grouped by outcome.",
            label_names=("outcome",),
        )

    @classmethod
    def from_entries(cls, entries: Iterable[Entry]) -> "CorpusContext":
        """Context that is already loaded with ``entries``."""

        context = cls(path="<memory>")
        context._store(list(entries))
        return context

    @property
    def source(self) -> str:
        return str(self.path) if self.path is not None else str(self.url)

    @property
    def generation(self) -> int:
        with self._lock:
            return self._generation

    @property
    def is_loaded(self) -> bool:
        with self._lock:
            return self._entries is not None

    @property
    def entries(self) -> Tuple[Entry, ...]:
        with self._lock:
            if self._entries is None:
                raise CorpusUnavailableError(self.source, "corpus has not been loaded", attempts=0)
            return self._entries

    def _store(self, entries: List[Entry]) -> None:
        with self._lock:
            self._entries = tuple(entries)
            self._generation += 1

    def _read_payload(self) -> Any:
        if self.path is not None:
            with self.path.open("r", encoding="utf-8") as handle:
                return json.load(handle)
        client = self._session or requests
        response = client.get(self.url, timeout=self._timeout)
        response.raise_for_status()
        return response.json()

    def _fetch_with_retries(self) -> Any:
        attempts = 1 if self.path is not None else self._retries
        last_error: Optional[BaseException] = None
        for attempt in range(1, attempts + 1):
            try:
                return self._read_payload()
            except (OSError, ValueError, requests.RequestException) as exc:
                last_error = exc
                self._metric_loads.labels(outcome="error").inc()
                self._logger.warning(
                    "Corpus fetch failed",
                    context={"attempt": attempt, "attempts": attempts, "error": str(exc)},
                )
                if attempt < attempts:
                    self._sleep(self._retry_delay)
        raise CorpusUnavailableError(self.source, str(last_error), attempts=attempts)

    def load(self, *, force: bool = False) -> Tuple[Entry, ...]:
        """Load the corpus (once unless ``force``) and return its entries."""

        with self._lock:
            if self._entries is not None and not force:
                return self._entries

            payload = self._fetch_with_retries()
            try:
                entries, skipped = parse_corpus(payload)
            except ValueError as exc:
                self._metric_loads.labels(outcome="invalid").inc()
                raise CorpusUnavailableError(self.source, str(exc)) from exc

            filtered = filter_addons(entries, self.addons)
            self._store(filtered)
            self._metric_loads.labels(outcome="success").inc()
            self._logger.info(
                "Corpus loaded",
                context={
                    "entries": len(filtered),
                    "filtered_out": len(entries) - len(filtered),
                    "skipped": skipped,
                    "generation": self._generation,
                },
            )
            return self._entries

    ensure_loaded = load

    def invalidate(self) -> None:
        """Forget the loaded corpus; the next :meth:`load` reads the source again."""

        with self._lock:
            if self._entries is None:
                return
            self._entries = None
            self._logger.info("Corpus invalidated", context={"generation": self._generation})


__all__ = ["CorpusContext", "filter_addons", "parse_corpus"]
