"""Search services built on top of :mod:`skript_search.core`."""

from .engines import RapidFuzzEngine, SearchEngine, SubstringEngine
from .history import SearchHistory
from .result_formatter import ResultFormatter
from .search_service import SearchOrchestrator, SearchOutcome, type_query

__all__ = [
    "RapidFuzzEngine",
    "ResultFormatter",
    "SearchEngine",
    "SearchHistory",
    "SearchOrchestrator",
    "SearchOutcome",
    "SubstringEngine",
    "type_query",
]
