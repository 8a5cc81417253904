"""Stable anchor identifiers for syntax entries."""

from __future__ import annotations

import re

from .entries import Entry
from .errors import ContractViolationError

_NON_SLUG_RUN = re.compile(r"[^a-z0-9]+")


def identify(entry: Entry) -> str:
    """Return the deep-link slug of ``entry``.

    Built from title, category and addon only, so two entries that differ in
    ``since`` or ``description`` share an id. Ids are display anchors, not
    keys: collisions are possible and are not resolved.
    """

    if entry is None:
        raise ContractViolationError("identify", "entry must not be None")

    raw = f"{entry.title}-{entry.category}-{entry.addon or ''}"
    return _NON_SLUG_RUN.sub("-", raw.lower()).strip("-")


__all__ = ["identify"]
