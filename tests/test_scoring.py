"""Tests for the rule-based capability scorer."""

import pytest

from agentroute.catalog.models import (
    Capability,
    MatchType,
    PerformanceMetrics,
    TaskRequirement,
)
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.scoring.capability import MAX_RAW_SCORE, CapabilityScorer


class TestExactMatching:
    def test_single_capability_single_agent(self):
        catalog = CapabilityCatalog(
            [Capability(id="erc20_deployment", agents=["blockchain-agent"])]
        )
        catalog.register_agent("blockchain-agent", ["erc20_deployment"])
        matches = CapabilityScorer(catalog).find_best_agent(
            TaskRequirement(category="erc20_deployment")
        )
        exact = [m for m in matches if m.match_type is MatchType.EXACT]
        assert len(exact) == 1
        assert exact[0].agent_id == "blockchain-agent"
        assert exact[0].score == pytest.approx(1.0)

    def test_exact_matches_only_name_listed_agents(self, default_catalog):
        scorer = CapabilityScorer(default_catalog)
        for capability in default_catalog.capabilities():
            for name in [capability.id, *capability.specific_tasks]:
                matches = scorer.find_best_agent(TaskRequirement(category=name))
                for m in matches:
                    if m.match_type is MatchType.EXACT:
                        owner = default_catalog.get_capability(m.mapped_capability)
                        assert m.agent_id in owner.agents

    def test_alias_match(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="balance_check")
        )
        exact = {m.agent_id for m in matches if m.match_type is MatchType.EXACT}
        assert exact == {"chain-a", "chain-b"}

    def test_operation_matches_tool(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="something_else", operation="transfer_tokens")
        )
        assert any(m.match_type is MatchType.EXACT for m in matches)

    def test_unregistered_agents_skipped(self):
        catalog = CapabilityCatalog([Capability(id="c", agents=["ghost", "real"])])
        catalog.register_agent("real", ["other"])
        matches = CapabilityScorer(catalog).find_best_agent(TaskRequirement(category="c"))
        assert [m.agent_id for m in matches if m.match_type is MatchType.EXACT] == ["real"]

    def test_load_penalty(self, small_catalog):
        small_catalog.update_agent_metrics("chain-b", load_score=1.0, success_rate=1.0)
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="blockchain_operations")
        )
        exact = [m for m in matches if m.match_type is MatchType.EXACT]
        assert [m.agent_id for m in exact] == ["chain-a", "chain-b"]
        assert exact[1].score == pytest.approx((10 - 0.1 + 2) / MAX_RAW_SCORE)

    def test_ties_follow_registration_order(self):
        catalog = CapabilityCatalog([Capability(id="c", agents=["second", "first"])])
        catalog.register_agent("first", ["x"])
        catalog.register_agent("second", ["y"])
        matches = CapabilityScorer(catalog).find_best_agent(TaskRequirement(category="c"))
        assert [m.agent_id for m in matches] == ["first", "second"]


class TestSemanticMatching:
    def test_synonym_variant(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="send_tokens")
        )
        semantic = [m for m in matches if m.match_type is MatchType.SEMANTIC]
        assert {m.agent_id for m in semantic} == {"chain-a", "chain-b"}
        assert semantic[0].score == pytest.approx(10 / MAX_RAW_SCORE)


class TestPartialMatching:
    def test_cluster_relation(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="crypto_wallet_lookup")
        )
        partial = {m.agent_id for m in matches if m.match_type is MatchType.PARTIAL}
        assert partial == {"chain-a", "chain-b"}

    def test_specialization_bonus(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(
            TaskRequirement(category="token_transfer_batch")
        )
        partial = {m.agent_id: m for m in matches if m.match_type is MatchType.PARTIAL}
        # chain-a: 2 related caps + "transfer" specialization
        assert partial["chain-a"].score == pytest.approx((3 + 1.0 + 2 + 1) / MAX_RAW_SCORE)
        assert partial["chain-a"].score > partial["chain-b"].score

    def test_scores_always_in_unit_range(self, default_catalog):
        scorer = CapabilityScorer(default_catalog)
        categories = ["token", "nft", "defi_swap", "task", "smart_contract", "a", "research"]
        for category in categories:
            for m in scorer.find_best_agent(TaskRequirement(category=category)):
                assert 0.0 <= m.score <= 1.0

    def test_empty_category_has_no_partial_matches(self, small_catalog):
        matches = CapabilityScorer(small_catalog).find_best_agent(TaskRequirement(category=""))
        assert matches == []


class TestFindBestAgentsForTask:
    def test_no_provider_returns_empty(self, small_catalog):
        req = TaskRequirement(category="nonexistent_cap", required_capabilities=["nonexistent_cap"])
        assert CapabilityScorer(small_catalog).find_best_agents_for_task(req) == []

    def test_one_candidate_per_agent(self, small_catalog):
        req = TaskRequirement(category="token_transfer", required_capabilities=["token_transfer"])
        candidates = CapabilityScorer(small_catalog).find_best_agents_for_task(req)
        ids = [c.agent_id for c in candidates]
        assert len(ids) == len(set(ids))
        assert set(ids) == {"chain-a", "chain-b"}

    def test_direct_capability_only(self):
        catalog = CapabilityCatalog()
        catalog.register_agent("solo", ["rare_skill"])
        req = TaskRequirement(category="unrelated", required_capabilities=["rare_skill"])
        candidates = CapabilityScorer(catalog).find_best_agents_for_task(req)
        assert [c.agent_id for c in candidates] == ["solo"]
        assert "rare_skill" in candidates[0].reasoning

    def test_direct_score_security(self):
        catalog = CapabilityCatalog()
        low = catalog.register_agent("low", ["x"], security_level="low")
        high = catalog.register_agent("high", ["x"], security_level="high")
        scorer = CapabilityScorer(catalog)
        req = TaskRequirement(category="x", security_level="high")
        # 0.4 + 0.2*sec + 0.15*1 + 0.1*(1-0) + 0.1*(1-0.5)
        assert scorer.direct_capability_score(high, req) == pytest.approx(0.9)
        assert scorer.direct_capability_score(low, req) == pytest.approx(0.76)

    def test_direct_score_latency(self):
        catalog = CapabilityCatalog()
        fast = catalog.register_agent(
            "fast", ["x"], metrics=PerformanceMetrics(average_latency_ms=100)
        )
        req = TaskRequirement(category="x", max_latency_ms=400)
        assert CapabilityScorer(catalog).direct_capability_score(fast, req) == pytest.approx(
            0.9 + 0.05 * 0.75
        )
