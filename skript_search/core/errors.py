"""Exception base classes shared by the engine and the application layer."""

from __future__ import annotations


class SkriptSearchError(Exception):
    """Base class for every error raised by :mod:`skript_search`."""


class ContractViolationError(SkriptSearchError, ValueError):
    """A caller broke a precondition, e.g. passed ``None`` where an entry is required.

    Malformed syntax text never raises; only programming errors end up here.
    """

    def __init__(self, operation: str, reason: str) -> None:
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation}: {reason}")


class PaletteConfigurationError(SkriptSearchError, ValueError):
    """A category colour table is incomplete or holds an invalid colour."""


__all__ = ["SkriptSearchError", "ContractViolationError", "PaletteConfigurationError"]
