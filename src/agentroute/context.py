"""Routing context: the state one router instance owns."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from agentroute.agents.registry import AgentRegistry
from agentroute.catalog.config import load_catalog
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.negotiation.history import HistoryStore
from agentroute.services.base import CompletionService, EmbeddingService
from agentroute.services.local import HashingEmbedder
from agentroute.services.openai_compat import OpenAICompatClient
from agentroute.settings import Settings

logger = logging.getLogger(__name__)


@dataclass
class RoutingContext:
    """
    Catalog, executable agents and histories for one router.

    Nothing here is process-global; two contexts never share state.
    """

    catalog: CapabilityCatalog
    agents: AgentRegistry
    history: HistoryStore
    settings: Settings = field(default_factory=Settings)
    tie_break: list[tuple[str, str]] = field(default_factory=list)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RoutingContext:
        settings = settings or Settings.from_env()
        catalog, tie_break = load_catalog(settings.catalog_path)
        logger.info(
            "Loaded catalog: %d capabilities, %d agents",
            len(catalog.capabilities()),
            len(catalog),
        )
        return cls(
            catalog=catalog,
            agents=AgentRegistry.from_catalog(catalog, timeout=settings.execution_timeout),
            history=HistoryStore(settings.negotiation_limit, settings.history_limit),
            settings=settings,
            tie_break=tie_break,
        )

    @classmethod
    def for_catalog(cls, catalog: CapabilityCatalog, **kwargs) -> RoutingContext:
        """Context around an existing catalog, with dry-run agents."""
        settings = kwargs.pop("settings", None) or Settings()
        return cls(
            catalog=catalog,
            agents=kwargs.pop("agents", None)
            or AgentRegistry.from_catalog(catalog, timeout=settings.execution_timeout),
            history=kwargs.pop("history", None)
            or HistoryStore(settings.negotiation_limit, settings.history_limit),
            settings=settings,
            **kwargs,
        )


def build_services(settings: Settings) -> tuple[EmbeddingService, CompletionService | None]:
    """Remote services when a URL is configured, else local embeddings and no completer."""
    if settings.service_url:
        client = OpenAICompatClient(
            settings.service_url,
            api_key=settings.api_key,
            embedding_model=settings.embedding_model,
            completion_model=settings.completion_model,
            timeout=settings.service_timeout,
        )
        return client, client
    return HashingEmbedder(), None
