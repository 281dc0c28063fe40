"""
Negotiation Coordinator — Bounded Multi-Round Bidding

For a requirement, the top candidates bid in up to MAX_ROUNDS rounds.
From round 2 the three most confident bidders consult each other. A round
converges when some bid's weighted total exceeds ACCEPT_THRESHOLD:

    total = 0.4*confidence + 0.2*(1 - cost) + 0.2*max(0, 1 - time/120)
          + 0.2*min(1, specializations/5)

Without convergence the most confident bid of the last round is taken.
"""

from __future__ import annotations

import asyncio
import logging
import random
import uuid
from typing import Any

from agentroute.agents.base import BidEstimate
from agentroute.agents.registry import AgentRegistry
from agentroute.catalog.models import TaskRequirement
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.errors import AgentExecutionError, NoCandidateError
from agentroute.negotiation.history import HistoryStore
from agentroute.negotiation.models import (
    MAX_BID_CONFIDENCE,
    MAX_ROUNDS,
    Bid,
    Consultation,
    Negotiation,
    NegotiationRound,
    NegotiationState,
)
from agentroute.scoring.capability import CapabilityScorer

logger = logging.getLogger(__name__)

MAX_BIDDERS = 5
MAX_CONSULTANTS = 3
ACCEPT_THRESHOLD = 0.6
TIME_HORIZON_SEC = 120.0
SPECIALIZATION_CAP = 5

# Bid weights (sum to 1.0)
CONFIDENCE_WEIGHT = 0.4
COST_WEIGHT = 0.2
TIME_WEIGHT = 0.2
SPECIALIZATION_WEIGHT = 0.2

# Placeholder estimates for agents that do not assess themselves
PLACEHOLDER_COST = (0.3, 0.7)
PLACEHOLDER_TIME_SEC = (30.0, 90.0)

SHARED_EXPERTISE_CONFIDENCE = 0.8
GENERAL_CONFIDENCE = 0.5


def score_components(bid: Bid) -> dict[str, float]:
    return {
        "confidence": bid.confidence * CONFIDENCE_WEIGHT,
        "cost": (1 - bid.estimated_cost) * COST_WEIGHT,
        "time": max(0.0, 1 - bid.estimated_time_sec / TIME_HORIZON_SEC) * TIME_WEIGHT,
        "specialization": min(1.0, len(bid.specializations) / SPECIALIZATION_CAP)
        * SPECIALIZATION_WEIGHT,
    }


def score_bid(bid: Bid) -> float:
    """Weighted total for a bid, in [0, 1]."""
    return sum(score_components(bid).values())


def describe_score(bid: Bid) -> str:
    c = score_components(bid)
    return (
        f"Confidence: {c['confidence'] * 100:.1f}%, "
        f"Cost efficiency: {c['cost'] * 100:.1f}%, "
        f"Time efficiency: {c['time'] * 100:.1f}%, "
        f"Specialization: {c['specialization'] * 100:.1f}%"
    )


def evaluate_bids(bids: list[Bid], threshold: float = ACCEPT_THRESHOLD) -> Bid | None:
    """The strictly best bid above ``threshold``; the earliest bid wins ties."""
    best: Bid | None = None
    best_total = threshold
    for bid in bids:
        total = score_bid(bid)
        if total > best_total:
            best, best_total = bid, total
    return best


def most_confident(bids: list[Bid]) -> Bid | None:
    best: Bid | None = None
    for bid in bids:
        if best is None or bid.confidence > best.confidence:
            best = bid
    return best


class NegotiationCoordinator:
    """Runs negotiations and keeps them in the shared :class:`HistoryStore`."""

    def __init__(
        self,
        catalog: CapabilityCatalog,
        agents: AgentRegistry | None = None,
        history: HistoryStore | None = None,
        rng: random.Random | None = None,
        scorer: CapabilityScorer | None = None,
    ) -> None:
        self.catalog = catalog
        self.agents = agents or AgentRegistry()
        self.history = history or HistoryStore()
        self.rng = rng or random.Random()
        self.scorer = scorer or CapabilityScorer(catalog)

    # ── Bidding ──

    def _relevant_capabilities(self, agent_id: str, requirement: TaskRequirement) -> list[str]:
        required = [r.lower() for r in requirement.required_capabilities]
        return [
            cap
            for cap in self.catalog.agent_capabilities(agent_id)
            if any(req in cap.lower() for req in required)
        ]

    async def request_bid(self, agent_id: str, requirement: TaskRequirement, round_number: int) -> Bid:
        relevant = self._relevant_capabilities(agent_id, requirement)
        confidence = min(MAX_BID_CONFIDENCE, 0.6 + 0.1 * len(relevant))

        estimate = None
        try:
            estimate = await self.agents.assess(agent_id, requirement)
        except AgentExecutionError as e:
            logger.warning("Round %d: %s", round_number, e)

        if estimate is not None and not isinstance(estimate, BidEstimate):
            logger.warning("Round %d: ignoring malformed estimate from %s", round_number, agent_id)
            estimate = None
        if estimate is not None:
            cost, seconds, assessed = estimate.estimated_cost, estimate.estimated_time_sec, True
        else:
            cost = self.rng.uniform(*PLACEHOLDER_COST)
            seconds = self.rng.uniform(*PLACEHOLDER_TIME_SEC)
            assessed = False

        bid = Bid(
            agent_id=agent_id,
            confidence=confidence,
            estimated_cost=cost,
            estimated_time_sec=seconds,
            specializations=relevant,
            reasoning=f"Agent specializes in: {', '.join(relevant)}",
            self_assessed=assessed,
        )
        logger.debug("Round %d bid from %s: confidence=%.2f", round_number, agent_id, confidence)
        return bid

    # ── Consultation ──

    def consult(self, consulting_agent_id: str, consulted_agent_id: str) -> Consultation:
        consulting = self.catalog.agent_capabilities(consulting_agent_id)
        consulted = self.catalog.agent_capabilities(consulted_agent_id)
        shared = [cap for cap in consulting if cap in consulted]
        return Consultation(
            consulting_agent_id=consulting_agent_id,
            consulted_agent_id=consulted_agent_id,
            expertise=", ".join(shared) or "General collaboration",
            recommendation=(
                f"{consulted_agent_id} has complementary strengths in "
                f"{', '.join(consulted[:2])}"
            ),
            confidence=SHARED_EXPERTISE_CONFIDENCE if shared else GENERAL_CONFIDENCE,
        )

    def conduct_consultations(self, bids: list[Bid]) -> list[Consultation]:
        """Ordered-pair consultations among the most confident bidders."""
        top = sorted(bids, key=lambda b: b.confidence, reverse=True)[:MAX_CONSULTANTS]
        return [
            self.consult(a.agent_id, b.agent_id)
            for a in top
            for b in top
            if a.agent_id != b.agent_id
        ]

    # ── Negotiation ──

    async def delegate_task(self, requesting_agent_id: str, requirement: TaskRequirement) -> Negotiation:
        """Negotiate an agent for ``requirement``.

        Raises:
            NoCandidateError: no registered agent matches the requirement.
        """
        candidates = self.scorer.find_best_agents_for_task(requirement)
        if not candidates:
            raise NoCandidateError(requirement.category, requirement.required_capabilities)

        negotiation = Negotiation(
            task_id=str(uuid.uuid4()),
            requesting_agent_id=requesting_agent_id,
            requirement=requirement,
            candidates=candidates,
        )
        bidders = [c.agent_id for c in candidates[:MAX_BIDDERS]]

        for number in range(1, MAX_ROUNDS + 1):
            logger.info("Negotiation %s round %d", negotiation.task_id, number)
            bids = list(
                await asyncio.gather(
                    *(self.request_bid(agent_id, requirement, number) for agent_id in bidders)
                )
            )
            current = NegotiationRound(number=number, bids=bids)
            if number > 1:
                current.consultations = self.conduct_consultations(bids)
            negotiation.add_round(current)

            winner = evaluate_bids(bids)
            if winner is not None:
                negotiation.select(
                    winner.agent_id,
                    NegotiationState.CONVERGED,
                    f"Selected {winner.agent_id} after {number} rounds. {describe_score(winner)}",
                )
                break

        if negotiation.state is NegotiationState.OPEN:
            best = most_confident(negotiation.last_round.bids)
            agent_id = best.agent_id if best else candidates[0].agent_id
            detail = best.reasoning if best else "no bids received"
            negotiation.select(
                agent_id,
                NegotiationState.EXHAUSTED,
                f"Fallback selection: {agent_id} ({detail})",
            )

        logger.info(
            "Negotiation %s %s: %s", negotiation.task_id, negotiation.state, negotiation.selected_agent
        )
        self.history.put_negotiation(negotiation)
        return negotiation

    def get_negotiation(self, task_id: str) -> Negotiation | None:
        return self.history.get_negotiation(task_id)

    def get_protocol_stats(self) -> dict[str, Any]:
        collaborations = self.history.all_collaborations()
        average = (
            sum(c.collaboration_confidence for c in collaborations) / len(collaborations)
            if collaborations
            else 0.0
        )
        return {
            "active_negotiations": self.history.negotiation_count(),
            "completed_collaborations": len(collaborations),
            "average_confidence": round(average, 4),
        }
