"""
Concrete agent variants.

    HandlerAgent  wraps an async callable (in-process agents, tests)
    HttpAgent     POSTs the requirement to a remote agent service
    DryRunAgent   plans without executing, derived from a catalog profile
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Coroutine

import httpx

from agentroute.agents.base import Agent, AgentResponse, BidEstimate
from agentroute.catalog.models import AgentProfile, TaskRequirement

logger = logging.getLogger(__name__)

# (requirement) -> result; result may be an AgentResponse, a dict with
# "result"/"confidence" keys, or any plain value.
HandlerFn = Callable[[TaskRequirement], Coroutine[Any, Any, Any]]
AssessFn = Callable[[TaskRequirement], Coroutine[Any, Any, BidEstimate | None]]

DEFAULT_CONFIDENCE = 0.8


class HandlerAgent(Agent):
    """Agent backed by an async handler function."""

    def __init__(
        self,
        agent_id: str,
        handler: HandlerFn,
        capabilities: list[str] | None = None,
        assessor: AssessFn | None = None,
        confidence: float = DEFAULT_CONFIDENCE,
    ) -> None:
        super().__init__(agent_id, capabilities)
        self._handler = handler
        self._assessor = assessor
        self.confidence = confidence

    async def execute(self, requirement: TaskRequirement) -> AgentResponse:
        raw = await self._handler(requirement)
        if isinstance(raw, AgentResponse):
            return raw
        if isinstance(raw, dict) and "result" in raw:
            return AgentResponse(
                agent_id=self.agent_id,
                result=raw["result"],
                confidence=float(raw.get("confidence", self.confidence)),
                task_type=requirement.category,
            )
        return AgentResponse(
            agent_id=self.agent_id,
            result=raw,
            confidence=self.confidence,
            task_type=requirement.category,
        )

    async def assess(self, requirement: TaskRequirement) -> BidEstimate | None:
        if self._assessor is None:
            return None
        return await self._assessor(requirement)


class HttpAgent(Agent):
    """Remote agent speaking JSON over HTTP.

    ``POST {endpoint}/execute`` with the requirement dict returns
    ``{"result": ..., "confidence": ...}``; ``POST {endpoint}/assess`` returns
    ``{"estimated_cost": ..., "estimated_time_sec": ...}`` or 404 when the
    agent does not estimate.
    """

    def __init__(
        self,
        agent_id: str,
        endpoint: str,
        capabilities: list[str] | None = None,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        super().__init__(agent_id, capabilities)
        self.endpoint = endpoint.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    async def _post(self, path: str, requirement: TaskRequirement) -> httpx.Response:
        async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
            return await client.post(f"{self.endpoint}{path}", json=requirement.to_dict())

    async def execute(self, requirement: TaskRequirement) -> AgentResponse:
        resp = await self._post("/execute", requirement)
        resp.raise_for_status()
        data = resp.json()
        return AgentResponse(
            agent_id=self.agent_id,
            result=data.get("result"),
            confidence=float(data.get("confidence", DEFAULT_CONFIDENCE)),
            task_type=requirement.category,
        )

    async def assess(self, requirement: TaskRequirement) -> BidEstimate | None:
        resp = await self._post("/assess", requirement)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        data = resp.json()
        return BidEstimate(
            estimated_cost=float(data["estimated_cost"]),
            estimated_time_sec=float(data["estimated_time_sec"]),
        )


class DryRunAgent(Agent):
    """Stands in for an agent with no executor: returns a plan, not a result.

    Confidence follows the profile's success rate; estimates come from the
    profile's cost factor and average latency when latency is known.
    """

    def __init__(self, profile: AgentProfile) -> None:
        super().__init__(profile.agent_id, profile.capabilities)
        self.profile = profile

    async def execute(self, requirement: TaskRequirement) -> AgentResponse:
        relevant = [c for c in self.capabilities if c in requirement.required_capabilities]
        return AgentResponse(
            agent_id=self.agent_id,
            result={
                "status": "planned",
                "agent": self.profile.name,
                "task": requirement.category,
                "description": requirement.description,
                "capabilities": relevant or self.capabilities[:3],
            },
            confidence=round(DEFAULT_CONFIDENCE * self.profile.metrics.success_rate, 4),
            task_type=requirement.category,
        )

    async def assess(self, requirement: TaskRequirement) -> BidEstimate | None:
        latency_ms = self.profile.metrics.average_latency_ms
        if not latency_ms:
            return None
        return BidEstimate(
            estimated_cost=self.profile.metrics.cost_factor,
            estimated_time_sec=latency_ms / 1000.0,
        )
