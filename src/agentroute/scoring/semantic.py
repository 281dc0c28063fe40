"""
Semantic Matcher — Embedding Similarity Ranking of Task Agents

Agent profile texts are embedded once at startup; each request embeds the
task text and ranks agents by cosine similarity. Execution-capable agents
move to the front when the task needs execution, and a precedence table
settles near ties between specific agents.

When the embedding service is unavailable the matcher returns a single
low-confidence default match flagged ``degraded`` instead of failing.
"""

from __future__ import annotations

import asyncio
import json
import logging
from dataclasses import dataclass, field
from functools import cmp_to_key
from typing import Any, Iterable

import numpy as np

from agentroute.catalog.models import AgentProfile, Priority, clamp
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.errors import ExternalServiceError, NoCandidateError
from agentroute.services.base import CompletionService, EmbeddingService
from agentroute.taxonomy import needs_execution

logger = logging.getLogger(__name__)

TIE_MARGIN = 0.1
MAX_ALTERNATIVES = 3
FALLBACK_CONFIDENCE = 0.5
PREFERENCE_THRESHOLD = 0.6


def cosine_similarity(a: Iterable[float], b: Iterable[float]) -> float:
    va = np.asarray(list(a), dtype=np.float64)
    vb = np.asarray(list(b), dtype=np.float64)
    if va.shape != vb.shape:
        raise ValueError(f"embedding dimensions differ: {va.shape} vs {vb.shape}")
    denom = np.linalg.norm(va) * np.linalg.norm(vb)
    if denom == 0:
        return 0.0
    return float(np.dot(va, vb) / denom)


@dataclass
class SelectionRequest:
    """A free-text selection request."""

    task_description: str
    priority: Priority = Priority.MEDIUM
    context: dict[str, Any] = field(default_factory=dict)
    require_execution: bool = False
    preferred_agent_id: str | None = None


@dataclass
class AgentMatch:
    """An agent ranked for a request."""

    agent_id: str
    agent_name: str
    confidence: float
    similarity: float
    agent_type: str
    execution_capable: bool
    capabilities: list[str] = field(default_factory=list)
    use_cases: list[str] = field(default_factory=list)
    reasoning: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.confidence = clamp(self.confidence)

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "agent_name": self.agent_name,
            "confidence": round(self.confidence, 4),
            "similarity": round(self.similarity, 4),
            "agent_type": self.agent_type,
            "execution_capable": self.execution_capable,
            "capabilities": list(self.capabilities),
            "reasoning": list(self.reasoning),
        }


@dataclass
class SemanticSelection:
    primary: AgentMatch
    alternatives: list[AgentMatch]
    reasoning: list[str]
    degraded: bool = False


class SemanticMatcher:
    """Ranks task agents by embedding similarity to the task text."""

    def __init__(
        self,
        catalog: CapabilityCatalog,
        embedder: EmbeddingService | None = None,
        completer: CompletionService | None = None,
        tie_break: Iterable[tuple[str, str]] = (),
        fallback_agent: str = "research-agent",
        tie_margin: float = TIE_MARGIN,
    ) -> None:
        self.catalog = catalog
        self.embedder = embedder
        self.completer = completer
        self.precedence: set[tuple[str, str]] = {tuple(pair) for pair in tie_break}
        self.fallback_agent = fallback_agent
        self.tie_margin = tie_margin
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    async def initialize(self) -> int:
        """Embed every task agent's profile text. Returns the number embedded."""
        if self.embedder is None:
            logger.warning("No embedding service configured; semantic matching disabled")
            return 0
        embedded = 0
        for agent in self.catalog.task_agents():
            try:
                agent.embedding = await self.embedder.embed(agent.profile_text())
                embedded += 1
            except ExternalServiceError as e:
                logger.warning("Skipping agent %s: %s", agent.agent_id, e)
        self._initialized = embedded > 0
        logger.info("Semantic matcher initialized with %d agent embeddings", embedded)
        return embedded

    # ── Ranking ──

    def _compare(self, a: AgentMatch, b: AgentMatch, execution_first: bool) -> int:
        if execution_first and a.execution_capable != b.execution_capable:
            return -1 if a.execution_capable else 1
        if abs(a.confidence - b.confidence) <= self.tie_margin:
            if (a.agent_id, b.agent_id) in self.precedence:
                return -1
            if (b.agent_id, a.agent_id) in self.precedence:
                return 1
        if a.confidence != b.confidence:
            return -1 if a.confidence > b.confidence else 1
        return 0

    def rank(self, matches: list[AgentMatch], execution_first: bool) -> list[AgentMatch]:
        key = cmp_to_key(lambda a, b: self._compare(a, b, execution_first))
        return sorted(matches, key=key)

    def _match(self, agent: AgentProfile, similarity: float) -> AgentMatch:
        return AgentMatch(
            agent_id=agent.agent_id,
            agent_name=agent.name,
            confidence=similarity,
            similarity=similarity,
            agent_type=str(agent.agent_type),
            execution_capable=agent.execution_capable,
            capabilities=list(agent.capabilities),
            use_cases=list(agent.use_cases),
        )

    async def _similarities(self, description: str) -> list[AgentMatch]:
        task_vector = await self.embedder.embed(description)
        matches = []
        for agent in self.catalog.task_agents():
            if agent.embedding is None:
                continue
            try:
                similarity = cosine_similarity(task_vector, agent.embedding)
            except ValueError as e:
                logger.warning("Cannot compare with %s: %s", agent.agent_id, e)
                continue
            matches.append(self._match(agent, similarity))
        return matches

    # ── Reasoning ──

    async def _reasons(self, description: str, match: AgentMatch) -> list[str]:
        template = [f"{match.agent_name} matched based on capabilities and use cases"]
        if self.completer is None:
            return template
        prompt = (
            f'Explain why the agent "{match.agent_name}" suits the task.\n'
            f"Capabilities: {', '.join(match.capabilities)}\n"
            f"Use cases: {'; '.join(match.use_cases)}\n"
            f"Execution capable: {match.execution_capable}\n"
            f'Task: "{description}"\n'
            'Reply with JSON: {"reasons": ["...", "..."]} giving 2-3 short reasons.'
        )
        try:
            reply = json.loads(await self.completer.complete(prompt, json_mode=True))
        except (ExternalServiceError, ValueError) as e:
            logger.warning("Reasoning for %s unavailable: %s", match.agent_id, e)
            return template
        reasons = reply.get("reasons") if isinstance(reply, dict) else None
        if isinstance(reasons, str):
            reasons = [reasons]
        if not isinstance(reasons, list) or not reasons or not all(isinstance(r, str) for r in reasons):
            return [f"{match.agent_name} has relevant capabilities for this task"]
        return reasons

    # ── Selection ──

    def _fallback(self, request: SelectionRequest, cause: str) -> SemanticSelection:
        agent = self.catalog.get_agent(self.fallback_agent)
        if agent is None:
            candidates = self.catalog.task_agents() or list(self.catalog.get_registered_agents().values())
            if not candidates:
                raise NoCandidateError(request.task_description)
            agent = candidates[0]
        match = self._match(agent, 0.0)
        match.confidence = FALLBACK_CONFIDENCE
        match.reasoning = [f"Default selection: {cause}"]
        logger.warning("Semantic selection degraded (%s); defaulting to %s", cause, agent.agent_id)
        return SemanticSelection(
            primary=match,
            alternatives=[],
            reasoning=[f"Using fallback selection: {cause}"],
            degraded=True,
        )

    def _apply_preference(self, request: SelectionRequest, matches: list[AgentMatch]) -> None:
        classification = request.context.get("classification") or {}
        confidence = classification.get("confidence", 0.0)
        if not request.preferred_agent_id or confidence <= PREFERENCE_THRESHOLD:
            return
        for match in matches:
            if match.agent_id == request.preferred_agent_id:
                match.confidence = max(match.confidence, clamp(confidence))
                match.reasoning.insert(
                    0, f"Keyword routing prefers {match.agent_id} ({confidence:.2f})"
                )
                logger.debug("Boosted %s to %.2f", match.agent_id, match.confidence)
                return

    async def select_best_agent(self, request: SelectionRequest) -> SemanticSelection:
        """Rank task agents for a request; never raises on service failure."""
        if self.embedder is None:
            return self._fallback(request, "embedding service not configured")
        if not self._initialized:
            return self._fallback(request, "semantic matcher not initialized")
        try:
            matches = await self._similarities(request.task_description)
        except ExternalServiceError as e:
            return self._fallback(request, str(e))
        if not matches:
            return self._fallback(request, "no agent embeddings available")

        self._apply_preference(request, matches)
        execution_first = request.require_execution or needs_execution(request.task_description)
        ranked = self.rank(matches, execution_first)

        top = ranked[: 1 + MAX_ALTERNATIVES]
        reasons = await asyncio.gather(
            *(self._reasons(request.task_description, m) for m in top)
        )
        for match, extra in zip(top, reasons):
            match.reasoning.extend(extra)

        primary = top[0]
        return SemanticSelection(
            primary=primary,
            alternatives=top[1:],
            reasoning=[
                f'Task "{request.task_description}" matched semantically to {primary.agent_name}',
                f"Semantic similarity: {primary.similarity * 100:.1f}%",
                f"Agent type: {primary.agent_type}",
                f"Execution capable: {'Yes' if primary.execution_capable else 'No'}",
                f"Use cases: {', '.join(primary.use_cases[:3])}",
            ],
        )
