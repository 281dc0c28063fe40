"""Exception hierarchy for routing, negotiation and collaboration."""

from __future__ import annotations


class RoutingError(Exception):
    """Base class for all agentroute errors."""


class NoCandidateError(RoutingError):
    """No registered agent matches the requirement."""

    def __init__(self, category: str, required: list[str] | None = None) -> None:
        self.category = category
        self.required = list(required or [])
        detail = f" (required: {', '.join(self.required)})" if self.required else ""
        super().__init__(f"No suitable agents found for task: {category}{detail}")


class ExternalServiceError(RoutingError):
    """The embedding or completion service failed or is unreachable."""

    def __init__(self, service: str, message: str) -> None:
        self.service = service
        super().__init__(f"{service} service error: {message}")


class AgentExecutionError(RoutingError):
    """An agent failed (or timed out) while executing or assessing a task."""

    def __init__(self, agent_id: str, message: str) -> None:
        self.agent_id = agent_id
        super().__init__(f"Agent {agent_id} failed: {message}")


class ConfigurationError(RoutingError):
    """Catalog or settings are missing or malformed."""
