"""Environment-driven settings for the search application."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

DEFAULT_CORPUS_URL = "https://skript-api-backend.onrender.com/all"
DEFAULT_ADDONS: Tuple[str, ...] = (
    "Skript",
    "SkBee",
    "skript-reflect",
    "skript-gui",
    "skNoise",
    "skript-particle",
)

ENGINE_FUZZY = "fuzzy"
ENGINE_SUBSTRING = "substring"

_TRUTHY = {"1", "true", "yes", "on"}


def _env_int(env: Mapping[str, str], key: str, default: int, *, minimum: int = 0) -> int:
    raw = env.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = int(str(raw).strip())
    except ValueError:
        return default
    return value if value >= minimum else default


def _env_float(env: Mapping[str, str], key: str, default: float) -> float:
    raw = env.get(key)
    if raw is None or not str(raw).strip():
        return default
    try:
        value = float(str(raw).strip())
    except ValueError:
        return default
    return value if value >= 0 else default


def _env_list(env: Mapping[str, str], key: str, default: Tuple[str, ...]) -> Tuple[str, ...]:
    raw = env.get(key)
    if raw is None:
        return default
    return tuple(item.strip() for item in raw.split(",") if item.strip())


@dataclass(frozen=True)
class SearchSettings:
    corpus_url: str = DEFAULT_CORPUS_URL
    corpus_path: Optional[str] = None
    addons: Tuple[str, ...] = field(default=DEFAULT_ADDONS)
    engine: str = ENGINE_FUZZY
    fuzzy_cutoff: float = 50.0
    max_history: int = 10
    min_query_length: int = 2
    fetch_retries: int = 3
    retry_delay: float = 5.0
    request_timeout: float = 30.0
    share: bool = False
    server_port: int = 7860

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "SearchSettings":
        """Read ``SKRIPT_SEARCH_*`` variables; invalid values keep their defaults."""

        env = os.environ if env is None else env
        engine = str(env.get("SKRIPT_SEARCH_ENGINE", ENGINE_FUZZY)).strip().lower()
        if engine not in {ENGINE_FUZZY, ENGINE_SUBSTRING}:
            engine = ENGINE_FUZZY

        cutoff = _env_float(env, "SKRIPT_SEARCH_FUZZY_CUTOFF", cls.fuzzy_cutoff)
        if cutoff > 100:
            cutoff = cls.fuzzy_cutoff

        return cls(
            corpus_url=env.get("SKRIPT_SEARCH_CORPUS_URL") or DEFAULT_CORPUS_URL,
            corpus_path=env.get("SKRIPT_SEARCH_CORPUS_PATH") or None,
            addons=_env_list(env, "SKRIPT_SEARCH_ADDONS", DEFAULT_ADDONS),
            engine=engine,
            fuzzy_cutoff=cutoff,
            max_history=_env_int(env, "SKRIPT_SEARCH_MAX_HISTORY", cls.max_history, minimum=1),
            min_query_length=_env_int(
                env, "SKRIPT_SEARCH_MIN_QUERY_LENGTH", cls.min_query_length
            ),
            fetch_retries=_env_int(env, "SKRIPT_SEARCH_FETCH_RETRIES", cls.fetch_retries, minimum=1),
            retry_delay=_env_float(env, "SKRIPT_SEARCH_RETRY_DELAY", cls.retry_delay),
            request_timeout=_env_float(env, "SKRIPT_SEARCH_REQUEST_TIMEOUT", cls.request_timeout),
            share=str(env.get("SKRIPT_SEARCH_SHARE", "")).strip().lower() in _TRUTHY,
            server_port=_env_int(env, "SKRIPT_SEARCH_PORT", cls.server_port, minimum=1),
        )


__all__ = [
    "DEFAULT_ADDONS",
    "DEFAULT_CORPUS_URL",
    "ENGINE_FUZZY",
    "ENGINE_SUBSTRING",
    "SearchSettings",
]
