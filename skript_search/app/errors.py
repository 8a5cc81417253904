"""
Exception hierarchy for the search application.

    SkriptSearchError (base)
    ├── ContractViolationError   caller broke a precondition (also a ValueError)
    ├── PaletteConfigurationError
    ├── CorpusUnavailableError   the syntax corpus could not be loaded
    └── SearchFailedError        the fuzzy engine raised while searching
"""

from __future__ import annotations

from typing import Optional

from ..core.errors import ContractViolationError, PaletteConfigurationError, SkriptSearchError


class CorpusUnavailableError(SkriptSearchError):
    """Raised when the corpus source cannot be read or parsed.

    Attributes:
        source: URL or path that was being loaded
        reason: Description of the last failure
    """

    def __init__(self, source: str, reason: str, attempts: int = 1) -> None:
        self.source = source
        self.reason = reason
        self.attempts = attempts
        super().__init__(f"Corpus unavailable from {source} after {attempts} attempt(s): {reason}")


class SearchFailedError(SkriptSearchError):
    """Raised when the search engine fails for a query."""

    def __init__(self, query: str, cause: Optional[BaseException] = None) -> None:
        self.query = query
        self.cause = cause
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Search failed for {query!r}{detail}")


__all__ = [
    "ContractViolationError",
    "CorpusUnavailableError",
    "PaletteConfigurationError",
    "SearchFailedError",
    "SkriptSearchError",
]
