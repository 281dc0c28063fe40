"""
Task Router — Entry Point for Agent Selection, Delegation and Collaboration

Classifies the task text, injects intent and network tags into the request
context, then routes:

    internal requests  -> rule-based CapabilityScorer over non-task agents
                          (optionally re-ranked by the completion service)
    everything else    -> SemanticMatcher over task agents

``try_*`` variants return a tagged :class:`RouteOutcome` instead of raising.
"""

from __future__ import annotations

import json
import logging
import random
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from agentroute.catalog.models import CandidateMatch, Priority, TaskRequirement
from agentroute.context import RoutingContext, build_services
from agentroute.errors import AgentExecutionError, ExternalServiceError, NoCandidateError
from agentroute.negotiation.coordinator import NegotiationCoordinator
from agentroute.negotiation.models import CollaborativeResult, Negotiation
from agentroute.negotiation.synthesis import CollaborationSynthesizer
from agentroute.scoring.capability import CapabilityScorer
from agentroute.scoring.semantic import AgentMatch, SelectionRequest, SemanticMatcher
from agentroute.services.base import CompletionService, EmbeddingService
from agentroute.taxonomy import (
    IntentClassification,
    TaskAnalysis,
    analyze_task,
    classify_intent,
    internal_category,
)

logger = logging.getLogger(__name__)

DEFAULT_REQUESTER = "task-router"
MAX_ALTERNATIVES = 3
MAX_AUTO_CONSULTANTS = 2


class OutcomeStatus(StrEnum):
    OK = "ok"
    NO_CANDIDATE = "no_candidate"
    SERVICE_DEGRADED = "service_degraded"
    EXECUTION_FAILED = "execution_failed"


@dataclass
class RouteOutcome:
    """Tagged result: ``value`` is set for OK and SERVICE_DEGRADED."""

    status: OutcomeStatus
    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is OutcomeStatus.OK

    def to_dict(self) -> dict[str, Any]:
        value = self.value.to_dict() if hasattr(self.value, "to_dict") else self.value
        return {"status": str(self.status), "value": value, "error": self.error}


@dataclass
class SelectionResult:
    primary_agent: AgentMatch
    alternative_agents: list[AgentMatch]
    task_analysis: TaskAnalysis
    reasoning: list[str]
    strategy: str = "semantic"
    degraded: bool = False
    classification: IntentClassification | None = None
    context: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "primary_agent": self.primary_agent.to_dict(),
            "alternative_agents": [a.to_dict() for a in self.alternative_agents],
            "task_analysis": self.task_analysis.to_dict(),
            "reasoning": list(self.reasoning),
            "strategy": self.strategy,
            "degraded": self.degraded,
            "classification": self.classification.to_dict() if self.classification else None,
        }


class TaskRouter:
    """Owns one :class:`RoutingContext` and the components that work on it."""

    def __init__(
        self,
        context: RoutingContext | None = None,
        embedder: EmbeddingService | None = None,
        completer: CompletionService | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.context = context or RoutingContext.from_settings()
        if embedder is None and completer is None:
            embedder, completer = build_services(self.context.settings)
        self.completer = completer
        catalog = self.context.catalog
        self.scorer = CapabilityScorer(catalog)
        self.matcher = SemanticMatcher(
            catalog,
            embedder=embedder,
            completer=completer,
            tie_break=self.context.tie_break,
            fallback_agent=self.context.settings.fallback_agent,
        )
        self.negotiator = NegotiationCoordinator(
            catalog,
            agents=self.context.agents,
            history=self.context.history,
            rng=rng,
            scorer=self.scorer,
        )
        self.synthesizer = CollaborationSynthesizer(self.context.agents, self.context.history)

    async def initialize(self) -> None:
        if not self.matcher.initialized:
            await self.matcher.initialize()

    # ── Requirements ──

    def build_requirement(
        self,
        description: str,
        priority: Priority | str = Priority.MEDIUM,
        context: dict[str, Any] | None = None,
    ) -> TaskRequirement:
        """Derive a :class:`TaskRequirement` from free text."""
        analysis = analyze_task(description)
        category = (
            analysis.required_capabilities[0] if analysis.required_capabilities else analysis.category
        )
        return TaskRequirement(
            category=category,
            priority=priority,
            required_capabilities=analysis.required_capabilities,
            description=description,
            context=dict(context or {}),
        )

    # ── Selection ──

    def _traditional_candidates(self, description: str) -> list[CandidateMatch]:
        category = internal_category(description)
        requirement = TaskRequirement(category=category, description=description)
        best: dict[str, CandidateMatch] = {}
        for m in self.scorer.find_best_agent(requirement):
            agent = self.context.catalog.get_agent(m.agent_id)
            if agent is not None and not agent.task_agent:
                best.setdefault(m.agent_id, m)
        return list(best.values())

    async def _refine(self, description: str, candidates: list[CandidateMatch]) -> list[str]:
        """Ask the completion service to pick among candidates; reorders in place."""
        if self.completer is None or len(candidates) < 2:
            return []
        options = "\n".join(
            f"- {c.agent_id}: {self.context.catalog.get_agent(c.agent_id).description}"
            for c in candidates
        )
        prompt = (
            f'Task: "{description}"\n'
            f"Candidate agents:\n{options}\n"
            'Reply with JSON: {"agent_id": "<one candidate id>", "reasons": ["..."]}'
        )
        try:
            reply = json.loads(await self.completer.complete(prompt, json_mode=True))
        except (ExternalServiceError, ValueError) as e:
            logger.warning("Traditional refinement unavailable: %s", e)
            return []
        chosen = reply.get("agent_id") if isinstance(reply, dict) else None
        ids = [c.agent_id for c in candidates]
        if chosen not in ids:
            logger.warning("Completion chose unknown agent %r; keeping scorer order", chosen)
            return []
        candidates.insert(0, candidates.pop(ids.index(chosen)))
        reasons = reply.get("reasons") or []
        if isinstance(reasons, str):
            return [reasons]
        if not isinstance(reasons, list):
            return []
        return [r for r in reasons if isinstance(r, str)]

    def _as_match(self, candidate: CandidateMatch) -> AgentMatch:
        agent = self.context.catalog.get_agent(candidate.agent_id)
        return AgentMatch(
            agent_id=candidate.agent_id,
            agent_name=agent.name,
            confidence=candidate.score,
            similarity=0.0,
            agent_type=str(agent.agent_type),
            execution_capable=agent.execution_capable,
            capabilities=list(agent.capabilities),
            use_cases=list(agent.use_cases),
            reasoning=[candidate.reasoning],
        )

    async def _route_traditional(
        self, description: str, analysis: TaskAnalysis, classification: IntentClassification
    ) -> SelectionResult:
        candidates = self._traditional_candidates(description)
        if not candidates:
            raise NoCandidateError(internal_category(description))
        reasons = await self._refine(description, candidates)
        matches = [self._as_match(c) for c in candidates]
        primary = matches[0]
        primary.reasoning.extend(reasons)
        return SelectionResult(
            primary_agent=primary,
            alternative_agents=matches[1 : 1 + MAX_ALTERNATIVES],
            task_analysis=analysis,
            reasoning=[
                "Internal request routed to system agents",
                f"Selected {primary.agent_name} ({primary.confidence:.2f})",
                *reasons,
            ],
            strategy="traditional",
            classification=classification,
        )

    async def route(
        self,
        description: str,
        priority: Priority | str = Priority.MEDIUM,
        context: dict[str, Any] | None = None,
        require_execution: bool = False,
    ) -> SelectionResult:
        """Select the best agent for a free-text task.

        Raises:
            NoCandidateError: no agent (not even a fallback) is available.
        """
        if not description or not description.strip():
            raise ValueError("task description must not be empty")
        classification = classify_intent(description)
        analysis = analyze_task(description, classification)
        if require_execution:
            analysis.needs_execution = True

        request_context = dict(context or {})
        request_context["classification"] = classification.to_dict()
        if classification.networks:
            request_context["networks"] = list(classification.networks)
        logger.info(
            "Routing %r: intent=%s internal=%s", description[:80], classification.intent, analysis.internal
        )

        if analysis.internal:
            result = await self._route_traditional(description, analysis, classification)
            result.context = request_context
            return result

        await self.initialize()
        selection = await self.matcher.select_best_agent(
            SelectionRequest(
                task_description=description,
                priority=Priority(priority),
                context=request_context,
                require_execution=require_execution,
                preferred_agent_id=classification.suggested_agent,
            )
        )
        return SelectionResult(
            primary_agent=selection.primary,
            alternative_agents=selection.alternatives,
            task_analysis=analysis,
            reasoning=classification.reasoning + selection.reasoning,
            strategy="fallback" if selection.degraded else "semantic",
            degraded=selection.degraded,
            classification=classification,
            context=request_context,
        )

    # ── Negotiation and collaboration ──

    async def delegate(
        self,
        task: str | TaskRequirement,
        requesting_agent_id: str = DEFAULT_REQUESTER,
    ) -> Negotiation:
        requirement = task if isinstance(task, TaskRequirement) else self.build_requirement(task)
        return await self.negotiator.delegate_task(requesting_agent_id, requirement)

    async def collaborate(
        self,
        task: str | TaskRequirement,
        primary_agent_id: str | None = None,
        consulting_agent_ids: list[str] | None = None,
    ) -> CollaborativeResult:
        """Execute a task collaboratively.

        Without a primary, one is negotiated and the next-best candidates
        become consultants.
        """
        requirement = task if isinstance(task, TaskRequirement) else self.build_requirement(task)
        if primary_agent_id is None:
            negotiation = await self.negotiator.delegate_task(DEFAULT_REQUESTER, requirement)
            primary_agent_id = negotiation.selected_agent
            if consulting_agent_ids is None:
                consulting_agent_ids = [
                    a for a in negotiation.candidate_ids if a != primary_agent_id
                ][:MAX_AUTO_CONSULTANTS]
        return await self.synthesizer.execute_collaborative_task(
            primary_agent_id, consulting_agent_ids or [], requirement
        )

    # ── Tagged results ──

    async def try_route(self, description: str, **kwargs: Any) -> RouteOutcome:
        try:
            result = await self.route(description, **kwargs)
        except NoCandidateError as e:
            return RouteOutcome(OutcomeStatus.NO_CANDIDATE, error=str(e))
        if result.degraded:
            return RouteOutcome(OutcomeStatus.SERVICE_DEGRADED, result, "semantic matching unavailable")
        return RouteOutcome(OutcomeStatus.OK, result)

    async def try_delegate(self, task: str | TaskRequirement, **kwargs: Any) -> RouteOutcome:
        try:
            return RouteOutcome(OutcomeStatus.OK, await self.delegate(task, **kwargs))
        except NoCandidateError as e:
            return RouteOutcome(OutcomeStatus.NO_CANDIDATE, error=str(e))

    async def try_collaborate(self, task: str | TaskRequirement, **kwargs: Any) -> RouteOutcome:
        try:
            return RouteOutcome(OutcomeStatus.OK, await self.collaborate(task, **kwargs))
        except NoCandidateError as e:
            return RouteOutcome(OutcomeStatus.NO_CANDIDATE, error=str(e))
        except AgentExecutionError as e:
            return RouteOutcome(OutcomeStatus.EXECUTION_FAILED, error=str(e))

    def stats(self) -> dict[str, Any]:
        return {
            **self.negotiator.get_protocol_stats(),
            "registered_agents": len(self.context.catalog),
            "executable_agents": len(self.context.agents),
            "semantic_ready": self.matcher.initialized,
        }
