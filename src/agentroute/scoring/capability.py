"""
Capability Scorer — Rule-Based Matching of Requirements to Agents

Three passes over the catalog, concatenated and sorted by score:

    exact     category is a capability id/alias, or operation is one of its tools
              raw = 10 - 0.1*load + 2*success
    semantic  category/operation hits a synonym variant of a known alias
              raw = 8 - 0.1*load + 2*success
    partial   agent capability strings overlap the category (substring or
              shared related-term cluster)
              raw = 3 + 0.5*overlap + 2*specialization_hit - 0.1*load + success

Raw scores are divided by MAX_RAW_SCORE and clamped into [0, 1].
"""

from __future__ import annotations

import logging

from agentroute.catalog.models import (
    AgentProfile,
    CandidateMatch,
    Capability,
    MatchType,
    SecurityLevel,
    TaskRequirement,
    clamp,
)
from agentroute.catalog.registry import CapabilityCatalog

logger = logging.getLogger(__name__)

EXACT_BASE = 10.0
SEMANTIC_BASE = 8.0
PARTIAL_BASE = 3.0
MAX_RAW_SCORE = 12.0  # exact base + full success bonus
MIN_ACCEPT_SCORE = 0.3

# Direct required-capability scoring weights
DIRECT_MATCH_WEIGHT = 0.4
SECURITY_WEIGHT = 0.2
SUCCESS_WEIGHT = 0.15
LOAD_WEIGHT = 0.1
COST_WEIGHT = 0.1
LATENCY_WEIGHT = 0.05
INSUFFICIENT_SECURITY = 0.3


def security_compatibility(agent_level: SecurityLevel, required: SecurityLevel) -> float:
    """1.0 when the agent's clearance covers the requirement, else a penalty factor."""
    return 1.0 if agent_level.rank >= required.rank else INSUFFICIENT_SECURITY


class CapabilityScorer:
    """Scores registered agents against a :class:`TaskRequirement`."""

    def __init__(self, catalog: CapabilityCatalog) -> None:
        self.catalog = catalog

    # ── Mapping lookup ──

    def _exact_capability(self, requirement: TaskRequirement) -> Capability | None:
        for capability in self.catalog.capabilities():
            if capability.matches(requirement.category):
                return capability
        if requirement.operation:
            for capability in self.catalog.capabilities():
                if requirement.operation in capability.tools:
                    return capability
        return None

    def _semantic_capability(self, requirement: TaskRequirement) -> Capability | None:
        category = requirement.category.lower()
        operation = (requirement.operation or "").lower()
        for canonical, variants in self.catalog.synonyms.items():
            hit = any(
                variant
                and (
                    variant in category
                    or (operation and variant in operation)
                    or (category and category in variant)
                )
                for variant in variants
            )
            if not hit:
                continue
            for capability in self.catalog.capabilities():
                if capability.matches(canonical):
                    return capability
        return None

    def _related(self, left: str, right: str) -> bool:
        left, right = left.lower(), right.lower()
        return any(
            any(term in left for term in cluster) and any(term in right for term in cluster)
            for cluster in self.catalog.clusters
        )

    # ── Passes ──

    def _score_mapping(self, capability: Capability, match_type: MatchType) -> list[CandidateMatch]:
        base = EXACT_BASE if match_type is MatchType.EXACT else SEMANTIC_BASE
        matches = []
        for agent_id in capability.agents:
            agent = self.catalog.get_agent(agent_id)
            if agent is None:
                continue
            m = agent.metrics
            raw = base - 0.1 * m.load_score + 2 * m.success_rate
            matches.append(
                CandidateMatch(
                    agent_id=agent_id,
                    score=raw / MAX_RAW_SCORE,
                    match_type=match_type,
                    mapped_capability=capability.id,
                    reasoning=(
                        f"{match_type} match for {capability.description or capability.id} "
                        f"(load: {m.load_score}, success: {m.success_rate})"
                    ),
                )
            )
        return matches

    def _partial_matches(self, requirement: TaskRequirement) -> list[CandidateMatch]:
        category = requirement.category.lower()
        if not category:
            return []
        matches = []
        for agent in self.catalog.get_registered_agents().values():
            related = [
                cap
                for cap in agent.capabilities
                if cap.lower() in category or category in cap.lower() or self._related(cap, category)
            ]
            if not related:
                continue
            matches.append(
                CandidateMatch(
                    agent_id=agent.agent_id,
                    score=self._partial_raw(agent, category, related) / MAX_RAW_SCORE,
                    match_type=MatchType.PARTIAL,
                    mapped_capability=related[0],
                    reasoning=f"Partial match based on related capabilities: {', '.join(related)}",
                )
            )
        return matches

    @staticmethod
    def _partial_raw(agent: AgentProfile, category: str, related: list[str]) -> float:
        raw = PARTIAL_BASE + 0.5 * len(related)
        if any(spec.lower() in category for spec in agent.specializations if spec):
            raw += 2
        raw -= 0.1 * agent.metrics.load_score
        raw += agent.metrics.success_rate
        return max(0.0, raw)

    # ── Public API ──

    def find_best_agent(self, requirement: TaskRequirement) -> list[CandidateMatch]:
        """All exact, semantic and partial matches, best first."""
        matches: list[CandidateMatch] = []

        exact = self._exact_capability(requirement)
        if exact is not None:
            matches.extend(self._score_mapping(exact, MatchType.EXACT))

        semantic = self._semantic_capability(requirement)
        if semantic is not None:
            matches.extend(self._score_mapping(semantic, MatchType.SEMANTIC))

        matches.extend(self._partial_matches(requirement))

        order = self.catalog.registration_index
        matches.sort(key=lambda m: (-m.score, order(m.agent_id)))
        logger.debug(
            "find_best_agent(%s): %d matches", requirement.category, len(matches)
        )
        return matches

    def direct_capability_score(self, agent: AgentProfile, requirement: TaskRequirement) -> float:
        """Weighted fitness for an agent that provides a required capability."""
        m = agent.metrics
        score = DIRECT_MATCH_WEIGHT
        score += SECURITY_WEIGHT * security_compatibility(agent.security_level, requirement.security_level)
        score += SUCCESS_WEIGHT * m.success_rate
        score += LOAD_WEIGHT * (1 - m.load_score)
        score += COST_WEIGHT * (1 - m.cost_factor)
        if requirement.max_latency_ms:
            score += LATENCY_WEIGHT * max(0.0, 1 - m.average_latency_ms / requirement.max_latency_ms)
        return clamp(score)

    def find_best_agents_for_task(self, requirement: TaskRequirement) -> list[CandidateMatch]:
        """Acceptable candidates for delegation, one per agent, best first.

        Combines thresholded :meth:`find_best_agent` results with agents that
        literally provide one of ``required_capabilities``.
        """
        best: dict[str, CandidateMatch] = {}

        def offer(match: CandidateMatch) -> None:
            current = best.get(match.agent_id)
            if current is None or match.score > current.score:
                best[match.agent_id] = match

        for match in self.find_best_agent(requirement):
            if match.score > MIN_ACCEPT_SCORE:
                offer(match)

        required = set(requirement.required_capabilities)
        if required:
            for agent in self.catalog.get_registered_agents().values():
                provided = [cap for cap in agent.capabilities if cap in required]
                if not provided:
                    continue
                score = self.direct_capability_score(agent, requirement)
                if score > MIN_ACCEPT_SCORE:
                    offer(
                        CandidateMatch(
                            agent_id=agent.agent_id,
                            score=score,
                            match_type=MatchType.EXACT,
                            mapped_capability=provided[0],
                            reasoning=f"Provides required capability: {', '.join(provided)}",
                        )
                    )

        order = self.catalog.registration_index
        return sorted(best.values(), key=lambda m: (-m.score, order(m.agent_id)))
