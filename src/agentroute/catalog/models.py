"""
Catalog Data Models

Capabilities, agent profiles, task requirements and scored candidates.
Range-bound fields are validated on construction; candidate scores are
clamped since they come out of arithmetic rather than user input.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum
from typing import Any


class Priority(StrEnum):
    """Task priority."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SecurityLevel(StrEnum):
    """Security clearance required by a task or offered by an agent."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _SECURITY_RANK[self]


_SECURITY_RANK = {SecurityLevel.LOW: 1, SecurityLevel.MEDIUM: 2, SecurityLevel.HIGH: 3}


class MatchType(StrEnum):
    """How a candidate was matched to a requirement."""

    EXACT = "exact"
    SEMANTIC = "semantic"
    PARTIAL = "partial"


class AgentType(StrEnum):
    """Broad agent family, used in profile text and execution checks."""

    CORE = "core"
    SPECIALIZED = "specialized"
    MCP = "mcp"
    SUPPORT = "support"


def _unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0.0, 1.0], got {value}")


def clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def _dedupe(items: list[str]) -> list[str]:
    seen: dict[str, None] = {}
    for item in items:
        seen.setdefault(item, None)
    return list(seen)


@dataclass
class Capability:
    """A named unit of functionality and the agents that provide it."""

    id: str
    description: str = ""
    specific_tasks: list[str] = field(default_factory=list)  # aliases
    agents: list[str] = field(default_factory=list)
    priority: int = 1
    high_level: str | None = None
    tools: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("capability id must not be empty")
        self.specific_tasks = _dedupe(self.specific_tasks)
        self.agents = _dedupe(self.agents)

    def matches(self, name: str) -> bool:
        """True if ``name`` is this capability's id or one of its aliases."""
        return name == self.id or name in self.specific_tasks

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "description": self.description,
            "specific_tasks": list(self.specific_tasks),
            "agents": list(self.agents),
            "priority": self.priority,
            "high_level": self.high_level,
            "tools": list(self.tools),
        }


@dataclass
class PerformanceMetrics:
    """Live performance figures for an agent."""

    success_rate: float = 1.0
    load_score: float = 0.0
    average_latency_ms: float = 0.0
    cost_factor: float = 0.5

    def __post_init__(self) -> None:
        _unit("success_rate", self.success_rate)
        _unit("load_score", self.load_score)
        _unit("cost_factor", self.cost_factor)
        if self.average_latency_ms < 0:
            raise ValueError(
                f"average_latency_ms must be >= 0, got {self.average_latency_ms}"
            )


@dataclass
class AgentProfile:
    """Everything the catalog knows about one agent."""

    agent_id: str
    capabilities: list[str]
    specializations: list[str] = field(default_factory=list)
    metrics: PerformanceMetrics = field(default_factory=PerformanceMetrics)
    name: str = ""
    description: str = ""
    keywords: list[str] = field(default_factory=list)
    use_cases: list[str] = field(default_factory=list)
    agent_type: AgentType = AgentType.SPECIALIZED
    execution_capable: bool = False
    task_agent: bool = True
    security_level: SecurityLevel = SecurityLevel.MEDIUM
    endpoint: str | None = None  # HTTP agents only
    embedding: list[float] | None = None  # filled by SemanticMatcher.initialize

    def __post_init__(self) -> None:
        if not self.name:
            self.name = self.agent_id
        self.agent_type = AgentType(self.agent_type)
        self.security_level = SecurityLevel(self.security_level)

    def profile_text(self) -> str:
        """Structured text describing the agent, used for embeddings."""
        parts = [
            f"Agent: {self.name}",
            f"Description: {self.description}",
            f"Category: {self.agent_type}",
            f"Keywords: {', '.join(self.keywords)}",
            f"Capabilities: {', '.join(self.capabilities)}",
            f"Use cases: {'; '.join(self.use_cases)}",
            f"Execution capable: {'Yes' if self.execution_capable else 'No'}",
        ]
        return "\n".join(parts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "name": self.name,
            "description": self.description,
            "capabilities": list(self.capabilities),
            "specializations": list(self.specializations),
            "keywords": list(self.keywords),
            "use_cases": list(self.use_cases),
            "agent_type": str(self.agent_type),
            "execution_capable": self.execution_capable,
            "task_agent": self.task_agent,
            "security_level": str(self.security_level),
            "endpoint": self.endpoint,
            "metrics": {
                "success_rate": self.metrics.success_rate,
                "load_score": self.metrics.load_score,
                "average_latency_ms": self.metrics.average_latency_ms,
                "cost_factor": self.metrics.cost_factor,
            },
        }


@dataclass
class TaskRequirement:
    """What a task needs from the agent that performs it."""

    category: str
    priority: Priority = Priority.MEDIUM
    security_level: SecurityLevel = SecurityLevel.MEDIUM
    max_latency_ms: float | None = None
    required_capabilities: list[str] = field(default_factory=list)
    description: str = ""
    context: dict[str, Any] = field(default_factory=dict)
    operation: str | None = None

    def __post_init__(self) -> None:
        self.priority = Priority(self.priority)
        self.security_level = SecurityLevel(self.security_level)
        self.required_capabilities = _dedupe(self.required_capabilities)
        if self.max_latency_ms is not None and self.max_latency_ms <= 0:
            raise ValueError(f"max_latency_ms must be > 0, got {self.max_latency_ms}")

    def derive(self, **changes: Any) -> TaskRequirement:
        """Copy with some fields replaced; the context map is not shared."""
        changes.setdefault("context", dict(self.context))
        changes.setdefault("required_capabilities", list(self.required_capabilities))
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "priority": str(self.priority),
            "security_level": str(self.security_level),
            "max_latency_ms": self.max_latency_ms,
            "required_capabilities": list(self.required_capabilities),
            "description": self.description,
            "context": dict(self.context),
            "operation": self.operation,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TaskRequirement:
        if not data.get("category"):
            raise ValueError("category is required")
        return cls(
            category=data["category"],
            priority=data.get("priority", Priority.MEDIUM),
            security_level=data.get("security_level", SecurityLevel.MEDIUM),
            max_latency_ms=data.get("max_latency_ms"),
            required_capabilities=list(data.get("required_capabilities", [])),
            description=data.get("description", ""),
            context=dict(data.get("context", {})),
            operation=data.get("operation"),
        )


@dataclass
class CandidateMatch:
    """An agent scored against a requirement."""

    agent_id: str
    score: float
    match_type: MatchType
    reasoning: str = ""
    mapped_capability: str | None = None

    def __post_init__(self) -> None:
        self.score = clamp(self.score)
        self.match_type = MatchType(self.match_type)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "score": round(self.score, 4),
            "match_type": str(self.match_type),
            "reasoning": self.reasoning,
            "mapped_capability": self.mapped_capability,
        }
