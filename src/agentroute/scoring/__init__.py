"""Candidate scoring: rule-based capability matching and embedding similarity."""

from agentroute.scoring.capability import MAX_RAW_SCORE, MIN_ACCEPT_SCORE, CapabilityScorer
from agentroute.scoring.semantic import AgentMatch, SelectionRequest, SemanticMatcher, SemanticSelection

__all__ = [
    "MAX_RAW_SCORE",
    "MIN_ACCEPT_SCORE",
    "AgentMatch",
    "CapabilityScorer",
    "SelectionRequest",
    "SemanticMatcher",
    "SemanticSelection",
]
