"""Shared fixtures: deterministic services and small catalogs."""

from __future__ import annotations

import pytest

from agentroute.catalog.models import Capability
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.catalog.defaults import RELATED_CLUSTERS
from agentroute.errors import ExternalServiceError
from agentroute.services.base import CompletionService, EmbeddingService
from agentroute.services.local import HashingEmbedder


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class CountingEmbedder(HashingEmbedder):
    """Hashing embedder that records calls and can fail on marked texts."""

    def __init__(self, fail_on: str | None = None) -> None:
        super().__init__()
        self.calls: list[str] = []
        self.fail_on = fail_on

    async def embed(self, text: str) -> list[float]:
        self.calls.append(text)
        if self.fail_on is not None and self.fail_on in text:
            raise ExternalServiceError("embedding", "simulated outage")
        return await super().embed(text)


class FailingEmbedder(EmbeddingService):
    async def embed(self, text: str) -> list[float]:
        raise ExternalServiceError("embedding", "connection refused")


class FakeCompleter(CompletionService):
    def __init__(self, reply: str = '{"reasons": ["fits the task"]}', fail: bool = False) -> None:
        self.reply = reply
        self.fail = fail
        self.prompts: list[str] = []

    async def complete(self, prompt: str, json_mode: bool = False) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise ExternalServiceError("completion", "rate limited")
        return self.reply


@pytest.fixture
def default_catalog() -> CapabilityCatalog:
    return CapabilityCatalog.with_defaults()


@pytest.fixture
def small_catalog() -> CapabilityCatalog:
    """Two blockchain agents sharing a capability, plus a researcher."""
    catalog = CapabilityCatalog(
        [
            Capability(
                id="blockchain_operations",
                description="Core blockchain interaction",
                specific_tasks=["balance_check", "token_transfer"],
                tools=["check_balance", "transfer_tokens"],
                agents=["chain-a", "chain-b"],
            ),
            Capability(
                id="research",
                description="Research and analysis",
                specific_tasks=["market_research"],
                agents=["researcher"],
            ),
        ],
        synonyms={"token_transfer": ["send_tokens", "move_funds"]},
        clusters=RELATED_CLUSTERS,
    )
    catalog.register_agent("chain-a", ["blockchain_operations", "token_transfer"], ["transfer"])
    catalog.register_agent("chain-b", ["blockchain_operations", "balance_check"])
    catalog.register_agent("researcher", ["research", "market_research"])
    return catalog
