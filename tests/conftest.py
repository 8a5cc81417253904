import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from skript_search.app.data.corpus import CorpusContext
from skript_search.app.services.history import SearchHistory
from skript_search.app.services.search_service import SearchOrchestrator
from skript_search.core.entries import Entry
from skript_search.utils.telemetry import StructuredTelemetry


class FakeClock:
    """Deterministic clock used to drive telemetry timers in tests."""

    def __init__(self, step: float = 0.01) -> None:
        self._current = 0.0
        self._step = step

    def __call__(self) -> float:
        value = self._current
        self._current += self._step
        return value


SAMPLE_CORPUS = [
    {
        "title": "Give",
        "category": "Effect",
        "syntax": "give [a] %item% [to %player%]\n(give|send) %itemtypes% to %players%",
        "description": "Gives an item to a **player**.",
        "addon": "Skript",
        "since": "1.0",
    },
    {
        "title": "Player",
        "category": "Type",
        "syntax": "player[s]",
        "description": "A player that is online.",
        "addon": "Skript",
        "since": "1.0",
    },
    {
        "title": "Health",
        "category": "Expression",
        "syntax": "[the] health of %livingentities%",
        "addon": "Skript",
        "since": "1.0",
    },
    {
        "title": "Join",
        "category": "Event",
        "syntax": "[on] [player] (login|logging in|join[ing])",
        "addon": "Skript",
        "since": "1.0",
        "examples": ["on join:"],
    },
    {
        "title": "Offline Player",
        "category": "Type",
        "syntax": "offlineplayer[s]",
        "addon": "Skript",
    },
    {
        "title": "Particle Shape",
        "category": "Structure",
        "syntax": "",
        "addon": "skript-particle",
        "since": "1.2",
    },
]


class DummyEngine:
    """Engine stub returning a fixed candidate list for any query."""

    def __init__(self, entries, candidates=None) -> None:
        self.entries = list(entries)
        self.queries: List[str] = []
        self._candidates = candidates

    def search(self, query: str):
        self.queries.append(query)
        if self._candidates is not None:
            return list(self._candidates)
        return [(entry, 1.0 - index * 0.1) for index, entry in enumerate(self.entries)]


@pytest.fixture
def sample_entries() -> List[Entry]:
    return [Entry.from_mapping(item) for item in SAMPLE_CORPUS]


@pytest.fixture
def corpus(sample_entries) -> CorpusContext:
    return CorpusContext.from_entries(sample_entries)


@pytest.fixture
def orchestrator(corpus) -> SearchOrchestrator:
    return SearchOrchestrator(
        corpus,
        history=SearchHistory(max_entries=3),
        telemetry=StructuredTelemetry(FakeClock()),
    )
