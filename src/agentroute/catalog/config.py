"""
Catalog configuration loading.

A catalog file is JSON with optional ``capabilities``, ``synonyms``,
``clusters``, ``agents`` and ``tie_break`` keys. Keys that are absent fall
back to the built-in tables. A file that is named but missing or malformed
is a :class:`ConfigurationError`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from agentroute.catalog.models import Capability, PerformanceMetrics
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.errors import ConfigurationError


def _require_list(data: dict[str, Any], key: str) -> list[Any]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise ConfigurationError(f"'{key}' must be a list, got {type(value).__name__}")
    return value


def catalog_from_dict(data: dict[str, Any]) -> tuple[CapabilityCatalog, list[tuple[str, str]]]:
    """Build a catalog and tie-break table from a parsed configuration mapping."""
    if not isinstance(data, dict):
        raise ConfigurationError("catalog configuration must be a JSON object")

    synonyms = data.get("synonyms", {})
    if not isinstance(synonyms, dict):
        raise ConfigurationError("'synonyms' must be an object of name -> variants")

    try:
        capabilities = [Capability(**entry) for entry in _require_list(data, "capabilities")]
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"invalid capability entry: {e}") from e

    catalog = CapabilityCatalog(
        capabilities,
        synonyms={k: list(v) for k, v in synonyms.items()},
        clusters=_require_list(data, "clusters"),
    )

    for entry in _require_list(data, "agents"):
        if not isinstance(entry, dict) or "agent_id" not in entry:
            raise ConfigurationError(f"agent entry needs an agent_id: {entry!r}")
        entry = dict(entry)
        try:
            metrics = entry.pop("metrics", None)
            if metrics is not None:
                entry["metrics"] = PerformanceMetrics(**metrics)
            catalog.register_agent(
                entry.pop("agent_id"),
                entry.pop("capabilities", []),
                entry.pop("specializations", None),
                **entry,
            )
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"invalid agent entry: {e}") from e

    tie_break = []
    for pair in _require_list(data, "tie_break"):
        if not isinstance(pair, (list, tuple)) or len(pair) != 2:
            raise ConfigurationError(f"tie_break entries must be [preferred, other] pairs: {pair!r}")
        tie_break.append((str(pair[0]), str(pair[1])))
    return catalog, tie_break


def load_catalog(path: Path | None = None) -> tuple[CapabilityCatalog, list[tuple[str, str]]]:
    """Load a catalog file, or the built-in catalog when ``path`` is None."""
    from agentroute.catalog import defaults

    merged: dict[str, Any] = {
        "capabilities": defaults.DEFAULT_CAPABILITIES,
        "synonyms": defaults.DEFAULT_SYNONYMS,
        "clusters": defaults.RELATED_CLUSTERS,
        "agents": defaults.DEFAULT_AGENTS,
        "tie_break": defaults.DEFAULT_TIE_BREAK,
    }
    if path is not None:
        try:
            raw = json.loads(Path(path).read_text())
        except FileNotFoundError as e:
            raise ConfigurationError(f"catalog file not found: {path}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"cannot read catalog file {path}: {e}") from e
        if not isinstance(raw, dict):
            raise ConfigurationError(f"catalog file {path} must contain a JSON object")
        merged.update(raw)
    return catalog_from_dict(merged)
