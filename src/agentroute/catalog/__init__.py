"""Capability catalog: capabilities, agent profiles and performance metrics."""

from agentroute.catalog.models import (
    AgentProfile,
    AgentType,
    CandidateMatch,
    Capability,
    MatchType,
    PerformanceMetrics,
    Priority,
    SecurityLevel,
    TaskRequirement,
)
from agentroute.catalog.registry import CapabilityCatalog

__all__ = [
    "AgentProfile",
    "AgentType",
    "CandidateMatch",
    "Capability",
    "CapabilityCatalog",
    "MatchType",
    "PerformanceMetrics",
    "Priority",
    "SecurityLevel",
    "TaskRequirement",
]
