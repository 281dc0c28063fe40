"""Runtime settings read from AGENTROUTE_* environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from agentroute.errors import ConfigurationError

ENV_PREFIX = "AGENTROUTE_"


def _env(name: str, default: str | None = None) -> str | None:
    value = os.environ.get(ENV_PREFIX + name)
    return value if value not in (None, "") else default


def _env_float(name: str, default: float) -> float:
    raw = _env(name)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be a number, got {raw!r}") from e


def _env_int(name: str, default: int) -> int:
    raw = _env(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from e
    if value < 1:
        raise ConfigurationError(f"{ENV_PREFIX}{name} must be >= 1, got {value}")
    return value


@dataclass
class Settings:
    """Service configuration.

    ``service_url`` points at an OpenAI-compatible server. When it is unset the
    router falls back to the local hashing embedder and template reasoning.
    """

    catalog_path: Path | None = None
    service_url: str | None = None
    api_key: str | None = None
    embedding_model: str = "text-embedding-3-small"
    completion_model: str = "gpt-4o"
    service_timeout: float = 30.0
    execution_timeout: float = 30.0
    history_limit: int = 100
    negotiation_limit: int = 1000
    fallback_agent: str = "research-agent"
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> Settings:
        catalog = _env("CONFIG")
        return cls(
            catalog_path=Path(catalog).expanduser() if catalog else None,
            service_url=_env("SERVICE_URL"),
            api_key=_env("API_KEY"),
            embedding_model=_env("EMBEDDING_MODEL", cls.embedding_model),
            completion_model=_env("COMPLETION_MODEL", cls.completion_model),
            service_timeout=_env_float("SERVICE_TIMEOUT", cls.service_timeout),
            execution_timeout=_env_float("EXECUTION_TIMEOUT", cls.execution_timeout),
            history_limit=_env_int("HISTORY_LIMIT", cls.history_limit),
            negotiation_limit=_env_int("NEGOTIATION_LIMIT", cls.negotiation_limit),
            fallback_agent=_env("FALLBACK_AGENT", cls.fallback_agent),
            log_level=_env("LOG_LEVEL", cls.log_level).upper(),
        )
