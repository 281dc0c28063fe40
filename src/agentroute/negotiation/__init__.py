"""Multi-round bidding, peer consultation and collaborative synthesis."""

from agentroute.negotiation.coordinator import NegotiationCoordinator, evaluate_bids, score_bid
from agentroute.negotiation.history import HistoryStore
from agentroute.negotiation.models import (
    MAX_ROUNDS,
    Bid,
    CollaborativeResult,
    Consultation,
    Negotiation,
    NegotiationRound,
    NegotiationState,
)
from agentroute.negotiation.synthesis import CollaborationSynthesizer

__all__ = [
    "MAX_ROUNDS",
    "Bid",
    "CollaborationSynthesizer",
    "CollaborativeResult",
    "Consultation",
    "HistoryStore",
    "Negotiation",
    "NegotiationCoordinator",
    "NegotiationRound",
    "NegotiationState",
    "evaluate_bids",
    "score_bid",
]
