"""Agent Execution Interface - what the router needs from any agent."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

from agentroute.catalog.models import TaskRequirement


@dataclass
class AgentResponse:
    """Outcome of one agent execution."""

    agent_id: str
    result: Any
    confidence: float
    task_type: str = ""

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= 1.0:
            raise ValueError(f"confidence must be in [0.0, 1.0], got {self.confidence}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "result": self.result,
            "confidence": self.confidence,
            "task_type": self.task_type,
        }


@dataclass
class BidEstimate:
    """An agent's own cost/time estimate for a task."""

    estimated_cost: float
    estimated_time_sec: float

    def __post_init__(self) -> None:
        if not 0.0 <= self.estimated_cost <= 1.0:
            raise ValueError(
                f"estimated_cost must be in [0.0, 1.0], got {self.estimated_cost}"
            )
        if self.estimated_time_sec < 0:
            raise ValueError(
                f"estimated_time_sec must be >= 0, got {self.estimated_time_sec}"
            )


class Agent(ABC):
    """
    An executable agent.

    Subclasses set ``agent_id`` and ``capabilities`` and implement
    :meth:`execute`. :meth:`assess` is optional; returning None tells the
    negotiator to fall back to a placeholder estimate.
    """

    def __init__(self, agent_id: str, capabilities: list[str] | None = None) -> None:
        self.agent_id = agent_id
        self.capabilities = list(capabilities or [])

    @abstractmethod
    async def execute(self, requirement: TaskRequirement) -> AgentResponse:
        ...

    async def assess(self, requirement: TaskRequirement) -> BidEstimate | None:
        return None

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.agent_id!r})"
