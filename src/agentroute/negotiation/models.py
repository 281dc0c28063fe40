"""
Negotiation Data Models

Bids, consultations, rounds and the negotiation record itself. The
negotiation enforces its own invariants: at most MAX_ROUNDS rounds, and the
selected agent is always one of its candidates.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from agentroute.agents.base import AgentResponse
from agentroute.catalog.models import CandidateMatch, TaskRequirement

MAX_ROUNDS = 3
MAX_BID_CONFIDENCE = 0.95


class NegotiationState(StrEnum):
    """OPEN until a selection is made; CONVERGED and EXHAUSTED are terminal."""

    OPEN = "open"
    CONVERGED = "converged"
    EXHAUSTED = "exhausted"


@dataclass
class Bid:
    """A candidate's offer for a task."""

    agent_id: str
    confidence: float
    estimated_cost: float
    estimated_time_sec: float
    specializations: list[str] = field(default_factory=list)
    reasoning: str = ""
    self_assessed: bool = False

    def __post_init__(self) -> None:
        if not 0.0 <= self.confidence <= MAX_BID_CONFIDENCE:
            raise ValueError(
                f"confidence must be in [0.0, {MAX_BID_CONFIDENCE}], got {self.confidence}"
            )
        if not 0.0 <= self.estimated_cost <= 1.0:
            raise ValueError(
                f"estimated_cost must be in [0.0, 1.0], got {self.estimated_cost}"
            )
        if self.estimated_time_sec < 0:
            raise ValueError(
                f"estimated_time_sec must be >= 0, got {self.estimated_time_sec}"
            )

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "confidence": round(self.confidence, 4),
            "estimated_cost": round(self.estimated_cost, 4),
            "estimated_time_sec": round(self.estimated_time_sec, 2),
            "specializations": list(self.specializations),
            "reasoning": self.reasoning,
            "self_assessed": self.self_assessed,
        }


@dataclass
class Consultation:
    consulting_agent_id: str
    consulted_agent_id: str
    expertise: str
    recommendation: str
    confidence: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "consulting_agent_id": self.consulting_agent_id,
            "consulted_agent_id": self.consulted_agent_id,
            "expertise": self.expertise,
            "recommendation": self.recommendation,
            "confidence": self.confidence,
        }


@dataclass
class NegotiationRound:
    number: int
    bids: list[Bid] = field(default_factory=list)
    consultations: list[Consultation] = field(default_factory=list)
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        if not 1 <= self.number <= MAX_ROUNDS:
            raise ValueError(f"round number must be in [1, {MAX_ROUNDS}], got {self.number}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "number": self.number,
            "bids": [b.to_dict() for b in self.bids],
            "consultations": [c.to_dict() for c in self.consultations],
            "timestamp": self.timestamp,
        }


@dataclass
class Negotiation:
    """One bounded negotiation over a fixed candidate list."""

    task_id: str
    requesting_agent_id: str
    requirement: TaskRequirement
    candidates: list[CandidateMatch]
    rounds: list[NegotiationRound] = field(default_factory=list)
    selected_agent: str | None = None
    reasoning: str = "Initial capability matching completed"
    state: NegotiationState = NegotiationState.OPEN
    created_at: float = field(default_factory=time.time)

    @property
    def candidate_ids(self) -> list[str]:
        return [c.agent_id for c in self.candidates]

    @property
    def last_round(self) -> NegotiationRound | None:
        return self.rounds[-1] if self.rounds else None

    def add_round(self, negotiation_round: NegotiationRound) -> None:
        if self.state is not NegotiationState.OPEN:
            raise ValueError(f"negotiation {self.task_id} is already {self.state}")
        if len(self.rounds) >= MAX_ROUNDS:
            raise ValueError(f"negotiation {self.task_id} already has {MAX_ROUNDS} rounds")
        self.rounds.append(negotiation_round)

    def select(self, agent_id: str, state: NegotiationState, reasoning: str) -> None:
        if state is NegotiationState.OPEN:
            raise ValueError("a selection must end the negotiation")
        if agent_id not in self.candidate_ids:
            raise ValueError(f"{agent_id} is not a candidate of negotiation {self.task_id}")
        self.selected_agent = agent_id
        self.state = state
        self.reasoning = reasoning

    def to_dict(self) -> dict[str, Any]:
        return {
            "task_id": self.task_id,
            "requesting_agent_id": self.requesting_agent_id,
            "requirement": self.requirement.to_dict(),
            "candidates": [c.to_dict() for c in self.candidates],
            "rounds": [r.to_dict() for r in self.rounds],
            "selected_agent": self.selected_agent,
            "reasoning": self.reasoning,
            "state": str(self.state),
            "created_at": self.created_at,
        }


@dataclass
class CollaborativeResult:
    """Primary plus consultant output.

    Two confidence figures are kept side by side: ``synthesis_confidence``
    weights the primary 70/30 against the consultants' mean, while
    ``collaboration_confidence`` is the plain mean over all contributions.
    """

    collaboration_id: str
    primary_agent_id: str
    consulting_agent_ids: list[str]
    synthesized_result: dict[str, Any]
    contributions: dict[str, AgentResponse]
    synthesis_confidence: float
    collaboration_confidence: float
    failed_consultants: dict[str, str] = field(default_factory=dict)
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return {
            "collaboration_id": self.collaboration_id,
            "primary_agent_id": self.primary_agent_id,
            "consulting_agent_ids": list(self.consulting_agent_ids),
            "synthesized_result": self.synthesized_result,
            "contributions": {k: v.to_dict() for k, v in self.contributions.items()},
            "synthesis_confidence": round(self.synthesis_confidence, 4),
            "collaboration_confidence": round(self.collaboration_confidence, 4),
            "failed_consultants": dict(self.failed_consultants),
            "created_at": self.created_at,
        }
