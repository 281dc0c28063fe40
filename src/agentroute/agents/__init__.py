"""Agent execution interface, concrete agent variants and the typed registry."""

from agentroute.agents.base import Agent, AgentResponse, BidEstimate
from agentroute.agents.builtin import DryRunAgent, HandlerAgent, HttpAgent
from agentroute.agents.registry import AgentRegistry

__all__ = [
    "Agent",
    "AgentRegistry",
    "AgentResponse",
    "BidEstimate",
    "DryRunAgent",
    "HandlerAgent",
    "HttpAgent",
]
