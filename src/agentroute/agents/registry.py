"""Agent Registry - typed map of executable agents with error wrapping."""

from __future__ import annotations

import asyncio
import logging

from agentroute.agents.base import Agent, AgentResponse, BidEstimate
from agentroute.agents.builtin import DryRunAgent, HttpAgent
from agentroute.catalog.models import TaskRequirement
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.errors import AgentExecutionError

logger = logging.getLogger(__name__)

EXECUTION_TIMEOUT = 30.0


class AgentRegistry:
    """
    Executable agents keyed by id.

    :meth:`execute` and :meth:`assess` are the only call sites into agent
    code; every failure (including timeouts and unknown ids) comes out as
    :class:`AgentExecutionError`.
    """

    def __init__(self, timeout: float = EXECUTION_TIMEOUT) -> None:
        self._agents: dict[str, Agent] = {}
        self.timeout = timeout

    @classmethod
    def from_catalog(
        cls, catalog: CapabilityCatalog, timeout: float = EXECUTION_TIMEOUT
    ) -> AgentRegistry:
        """HttpAgent for profiles with an endpoint, DryRunAgent otherwise."""
        registry = cls(timeout=timeout)
        for profile in catalog.get_registered_agents().values():
            if profile.endpoint:
                registry.register(
                    HttpAgent(profile.agent_id, profile.endpoint, profile.capabilities, timeout)
                )
            else:
                registry.register(DryRunAgent(profile))
        return registry

    def register(self, agent: Agent) -> None:
        self._agents[agent.agent_id] = agent

    def unregister(self, agent_id: str) -> None:
        self._agents.pop(agent_id, None)

    def get(self, agent_id: str) -> Agent | None:
        return self._agents.get(agent_id)

    def ids(self) -> list[str]:
        return list(self._agents)

    def __contains__(self, agent_id: object) -> bool:
        return agent_id in self._agents

    def __len__(self) -> int:
        return len(self._agents)

    def _require(self, agent_id: str) -> Agent:
        agent = self._agents.get(agent_id)
        if agent is None:
            raise AgentExecutionError(agent_id, "no executable agent registered")
        return agent

    async def execute(self, agent_id: str, requirement: TaskRequirement) -> AgentResponse:
        agent = self._require(agent_id)
        try:
            response = await asyncio.wait_for(agent.execute(requirement), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AgentExecutionError(agent_id, f"timed out after {self.timeout}s") from e
        except AgentExecutionError:
            raise
        except Exception as e:
            raise AgentExecutionError(agent_id, f"{type(e).__name__}: {e}") from e
        logger.debug("Agent %s executed %s (confidence %.2f)", agent_id, requirement.category, response.confidence)
        return response

    async def assess(self, agent_id: str, requirement: TaskRequirement) -> BidEstimate | None:
        """The agent's own estimate, None if it offers none or is not registered."""
        agent = self._agents.get(agent_id)
        if agent is None:
            return None
        try:
            return await asyncio.wait_for(agent.assess(requirement), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise AgentExecutionError(agent_id, f"assessment timed out after {self.timeout}s") from e
        except Exception as e:
            raise AgentExecutionError(agent_id, f"assessment failed: {type(e).__name__}: {e}") from e
