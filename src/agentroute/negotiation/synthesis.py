"""
Collaboration Synthesizer — primary execution plus concurrent consultants.

The primary agent's failure aborts the collaboration. Consultant failures
are logged and recorded in ``failed_consultants``; the remaining
contributions still synthesize.
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from typing import Any

from agentroute.agents.base import AgentResponse
from agentroute.agents.registry import AgentRegistry
from agentroute.catalog.models import TaskRequirement
from agentroute.errors import AgentExecutionError
from agentroute.negotiation.history import HistoryStore
from agentroute.negotiation.models import CollaborativeResult

logger = logging.getLogger(__name__)

PRIMARY_WEIGHT = 0.7
CONSULTANT_WEIGHT = 0.3
DEFAULT_CONSULTANT_CONFIDENCE = 0.5


def calculate_synthesis_confidence(
    primary: AgentResponse, consultations: dict[str, AgentResponse]
) -> float:
    """70% primary, 30% consultants' mean (0.5 when there are none)."""
    if consultations:
        consultant_mean = sum(r.confidence for r in consultations.values()) / len(consultations)
    else:
        consultant_mean = DEFAULT_CONSULTANT_CONFIDENCE
    return PRIMARY_WEIGHT * primary.confidence + CONSULTANT_WEIGHT * consultant_mean


def calculate_collaboration_confidence(contributions: dict[str, AgentResponse]) -> float:
    """Arithmetic mean over every contribution; 0.0 when there are none."""
    if not contributions:
        return 0.0
    return sum(r.confidence for r in contributions.values()) / len(contributions)


def synthesize_results(
    primary: AgentResponse, consultations: dict[str, AgentResponse]
) -> dict[str, Any]:
    return {
        "primary": primary.to_dict(),
        "consultations": {k: v.to_dict() for k, v in consultations.items()},
        "summary": (
            f"Primary execution by {primary.agent_id} with "
            f"{len(consultations)} consultations"
        ),
        "confidence": calculate_synthesis_confidence(primary, consultations),
        "timestamp": time.time(),
    }


class CollaborationSynthesizer:
    """Executes a primary agent with consultants and merges their output."""

    def __init__(self, agents: AgentRegistry, history: HistoryStore | None = None) -> None:
        self.agents = agents
        self.history = history or HistoryStore()

    async def _consult(
        self, agent_id: str, requirement: TaskRequirement
    ) -> AgentResponse | AgentExecutionError:
        try:
            return await self.agents.execute(agent_id, requirement)
        except AgentExecutionError as e:
            logger.warning("Consultation failed for %s: %s", agent_id, e)
            return e

    async def execute_collaborative_task(
        self,
        primary_agent_id: str,
        consulting_agent_ids: list[str],
        requirement: TaskRequirement,
    ) -> CollaborativeResult:
        """Run primary then consultants concurrently and synthesize.

        Raises:
            AgentExecutionError: the primary agent failed.
        """
        consultants = [a for a in dict.fromkeys(consulting_agent_ids) if a != primary_agent_id]
        logger.info(
            "Collaboration: %s + %d consultants", primary_agent_id, len(consultants)
        )

        primary = await self.agents.execute(primary_agent_id, requirement)

        consult_requirement = requirement.derive(category=f"consult_on_{requirement.category}")
        outcomes = await asyncio.gather(
            *(self._consult(agent_id, consult_requirement) for agent_id in consultants)
        )

        consultations: dict[str, AgentResponse] = {}
        failed: dict[str, str] = {}
        for agent_id, outcome in zip(consultants, outcomes):
            if isinstance(outcome, AgentExecutionError):
                failed[agent_id] = str(outcome)
            else:
                consultations[agent_id] = outcome

        contributions = {primary_agent_id: primary, **consultations}
        result = CollaborativeResult(
            collaboration_id=str(uuid.uuid4()),
            primary_agent_id=primary_agent_id,
            consulting_agent_ids=consultants,
            synthesized_result=synthesize_results(primary, consultations),
            contributions=contributions,
            synthesis_confidence=calculate_synthesis_confidence(primary, consultations),
            collaboration_confidence=calculate_collaboration_confidence(contributions),
            failed_consultants=failed,
        )
        self.history.append_collaboration(result)
        logger.info(
            "Collaboration %s completed (synthesis %.2f, collaboration %.2f)",
            result.collaboration_id,
            result.synthesis_confidence,
            result.collaboration_confidence,
        )
        return result

    def get_collaboration_history(self, agent_id: str) -> list[CollaborativeResult]:
        return self.history.collaborations(agent_id)
