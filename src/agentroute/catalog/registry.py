"""Capability Catalog - capabilities, synonyms and agent profiles for one routing context."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Any

from agentroute.catalog.models import AgentProfile, Capability, PerformanceMetrics, clamp

logger = logging.getLogger(__name__)


class CapabilityCatalog:
    """
    Mutable registry of capabilities and the agents that provide them.

    Agent profiles are owned here. Other components hold references and
    read them; only :meth:`update_agent_metrics` changes live figures.
    """

    def __init__(
        self,
        capabilities: Iterable[Capability] = (),
        synonyms: dict[str, list[str]] | None = None,
        clusters: list[list[str]] | None = None,
    ) -> None:
        self._capabilities: dict[str, Capability] = {}
        self._agents: dict[str, AgentProfile] = {}
        self.synonyms: dict[str, list[str]] = dict(synonyms or {})
        self.clusters: list[list[str]] = [list(c) for c in (clusters or [])]
        for capability in capabilities:
            self.register_capability(capability)

    @classmethod
    def with_defaults(cls) -> CapabilityCatalog:
        """Catalog populated from the built-in tables."""
        from agentroute.catalog.config import catalog_from_dict
        from agentroute.catalog.defaults import (
            DEFAULT_AGENTS,
            DEFAULT_CAPABILITIES,
            DEFAULT_SYNONYMS,
            RELATED_CLUSTERS,
        )

        catalog, _ = catalog_from_dict(
            {
                "capabilities": DEFAULT_CAPABILITIES,
                "synonyms": DEFAULT_SYNONYMS,
                "clusters": RELATED_CLUSTERS,
                "agents": DEFAULT_AGENTS,
            }
        )
        return catalog

    # ── Capabilities ──

    def register_capability(self, capability: Capability) -> None:
        """Insert or replace a capability by id."""
        if capability.id in self._capabilities:
            logger.debug("Replacing capability %s", capability.id)
        self._capabilities[capability.id] = capability

    def get_capability(self, capability_id: str) -> Capability | None:
        return self._capabilities.get(capability_id)

    def capabilities(self) -> list[Capability]:
        return list(self._capabilities.values())

    def find_capability(self, name: str) -> Capability | None:
        """Capability by id or high-level name."""
        if name in self._capabilities:
            return self._capabilities[name]
        for capability in self._capabilities.values():
            if capability.high_level == name:
                return capability
        return None

    def normalize_capability(self, name: str) -> list[str]:
        """Expand a capability name into the concrete task names it covers."""
        capability = self.find_capability(name)
        if capability is not None:
            return list(capability.specific_tasks)
        if name in self.synonyms:
            return list(self.synonyms[name])
        return [name]

    def get_capability_description(self, name: str) -> str:
        capability = self.find_capability(name)
        if capability is not None:
            return capability.description
        return f"Unknown capability: {name}"

    # ── Agents ──

    def register_agent(
        self,
        agent_id: str,
        capabilities: list[str],
        specializations: list[str] | None = None,
        **profile: Any,
    ) -> AgentProfile:
        """Register (or re-register) an agent with fresh metrics.

        Extra keyword arguments are passed through to :class:`AgentProfile`
        (name, description, keywords, execution_capable, ...).
        """
        if not agent_id:
            raise ValueError("agent_id must not be empty")
        metrics = profile.pop("metrics", None) or PerformanceMetrics(
            success_rate=1.0, load_score=0.0
        )
        agent = AgentProfile(
            agent_id=agent_id,
            capabilities=list(capabilities),
            specializations=list(specializations or []),
            metrics=metrics,
            **profile,
        )
        self._agents[agent_id] = agent
        logger.debug("Registered agent %s with %d capabilities", agent_id, len(capabilities))
        return agent

    def update_agent_metrics(self, agent_id: str, load_score: float, success_rate: float) -> None:
        """Overwrite an agent's load and success figures. Unknown ids are ignored."""
        agent = self._agents.get(agent_id)
        if agent is None:
            logger.debug("Ignoring metrics for unknown agent %s", agent_id)
            return
        agent.metrics.load_score = clamp(load_score)
        agent.metrics.success_rate = clamp(success_rate)

    def get_agent(self, agent_id: str) -> AgentProfile | None:
        return self._agents.get(agent_id)

    def get_registered_agents(self) -> dict[str, AgentProfile]:
        """Snapshot of registered agents, in registration order."""
        return dict(self._agents)

    def agent_capabilities(self, agent_id: str) -> list[str]:
        agent = self._agents.get(agent_id)
        return list(agent.capabilities) if agent else []

    def task_agents(self) -> list[AgentProfile]:
        return [a for a in self._agents.values() if a.task_agent]

    def non_task_agents(self) -> list[AgentProfile]:
        return [a for a in self._agents.values() if not a.task_agent]

    def registration_index(self, agent_id: str) -> int:
        """Position in registration order; unknown agents sort last."""
        for index, known in enumerate(self._agents):
            if known == agent_id:
                return index
        return len(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)
