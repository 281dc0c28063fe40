"""Task routing façade."""

from agentroute.routing.router import OutcomeStatus, RouteOutcome, SelectionResult, TaskRouter

__all__ = ["OutcomeStatus", "RouteOutcome", "SelectionResult", "TaskRouter"]
