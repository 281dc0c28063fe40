"""Bounded in-memory history of negotiations and collaborations."""

from __future__ import annotations

from collections import OrderedDict, deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from agentroute.negotiation.models import CollaborativeResult, Negotiation

DEFAULT_NEGOTIATION_LIMIT = 1000
DEFAULT_HISTORY_LIMIT = 100


class HistoryStore:
    """
    Negotiations by task id, oldest evicted past ``negotiation_limit``;
    collaborations per primary agent in a ring buffer of ``history_limit``.
    """

    def __init__(
        self,
        negotiation_limit: int = DEFAULT_NEGOTIATION_LIMIT,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        if negotiation_limit < 1 or history_limit < 1:
            raise ValueError("history limits must be >= 1")
        self.negotiation_limit = negotiation_limit
        self.history_limit = history_limit
        self._negotiations: OrderedDict[str, Negotiation] = OrderedDict()
        self._collaborations: dict[str, deque[CollaborativeResult]] = {}

    # ── Negotiations ──

    def put_negotiation(self, negotiation: Negotiation) -> None:
        self._negotiations[negotiation.task_id] = negotiation
        self._negotiations.move_to_end(negotiation.task_id)
        while len(self._negotiations) > self.negotiation_limit:
            self._negotiations.popitem(last=False)

    def get_negotiation(self, task_id: str) -> Negotiation | None:
        return self._negotiations.get(task_id)

    def negotiation_count(self) -> int:
        return len(self._negotiations)

    # ── Collaborations ──

    def append_collaboration(self, result: CollaborativeResult) -> None:
        buffer = self._collaborations.get(result.primary_agent_id)
        if buffer is None:
            buffer = deque(maxlen=self.history_limit)
            self._collaborations[result.primary_agent_id] = buffer
        buffer.append(result)

    def collaborations(self, agent_id: str) -> list[CollaborativeResult]:
        return list(self._collaborations.get(agent_id, ()))

    def all_collaborations(self) -> list[CollaborativeResult]:
        return [r for buffer in self._collaborations.values() for r in buffer]
