"""Tests for keyword classification and the task router."""

import pytest

from agentroute.catalog.models import TaskRequirement
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.context import RoutingContext
from agentroute.negotiation.models import NegotiationState
from agentroute.routing.router import OutcomeStatus, TaskRouter
from agentroute.services.local import HashingEmbedder
from agentroute.taxonomy import (
    TaskIntent,
    classify_intent,
    detect_networks,
    estimate_complexity,
    estimate_duration,
    extract_required_capabilities,
    internal_category,
    is_internal_request,
    needs_execution,
)

from conftest import FailingEmbedder, FakeCompleter

pytestmark = pytest.mark.anyio


def _router(embedder=None, completer=None) -> TaskRouter:
    context = RoutingContext.for_catalog(
        CapabilityCatalog.with_defaults(), tie_break=[("chaingpt-mcp", "nebula-mcp")]
    )
    return TaskRouter(context, embedder=embedder or HashingEmbedder(), completer=completer)


class TestClassification:
    def test_execution_beats_everything(self):
        result = classify_intent("transfer 5 tokens and swap on uniswap")
        assert result.intent is TaskIntent.EXECUTION
        assert result.suggested_agent == "goat-agent"
        assert result.networks == ["camp"]
        assert result.confidence == pytest.approx(0.9)

    def test_execution_without_defi_prefers_nebula(self):
        result = classify_intent("mint an nft on polygon")
        assert result.intent is TaskIntent.EXECUTION
        assert result.suggested_agent == "nebula-mcp"
        assert result.networks == ["polygon"]

    def test_query_beats_analysis(self):
        result = classify_intent("analyze the balance of my wallet")
        assert result.intent is TaskIntent.BLOCKCHAIN_QUERY
        assert result.suggested_agent == "nebula-mcp"

    def test_analysis(self):
        result = classify_intent("compare rollup research")
        assert result.intent is TaskIntent.ANALYSIS
        assert result.suggested_agent == "research-agent"
        assert result.confidence == pytest.approx(0.6)
        assert result.networks == []

    def test_general(self):
        result = classify_intent("hello there")
        assert result.intent is TaskIntent.GENERAL
        assert result.confidence == 0.5
        assert result.suggested_agent is None


class TestKeywordHelpers:
    @pytest.mark.parametrize(
        "text,expected",
        [
            ("run this operation on arbitrum", ["arbitrum"]),
            ("deploy a token on base", ["base"]),
            ("bridge eth to solana", ["ethereum", "solana"]),
            ("send some crypto", ["camp"]),
            ("migrate the database", []),
        ],
    )
    def test_detect_networks(self, text, expected):
        assert detect_networks(text) == expected

    def test_required_capabilities_in_hint_order(self):
        assert extract_required_capabilities("deploy a contract and transfer funds") == [
            "token_transfer",
            "contract_deployment",
        ]

    def test_needs_execution_matches_word_starts(self):
        assert needs_execution("Deploy the vault")
        assert not needs_execution("summarize the execution report")

    def test_internal_requests(self):
        assert is_internal_request("please coordinate the agents")
        assert internal_category("please coordinate the agents") == "task_orchestration"
        assert internal_category("system internal check") == "task_management"
        assert not is_internal_request("write documentation")

    def test_complexity(self):
        assert estimate_complexity("check balance") == "simple"
        assert estimate_complexity("design a comprehensive strategy") == "complex"
        assert estimate_complexity("summarize the quarterly numbers") == "moderate"
        assert estimate_duration("simple") == "10-30s"
        assert estimate_duration("unknown") == "1-2m"


class TestRoute:
    async def test_internal_request_uses_system_agents(self):
        router = _router()
        result = await router.route("orchestrate the weekly report workflow")
        assert result.strategy == "traditional"
        assert result.primary_agent.agent_id == "task-orchestrator"
        task_agents = {a.agent_id for a in router.context.catalog.task_agents()}
        assert all(a.agent_id not in task_agents for a in result.alternative_agents)

    async def test_internal_request_refined_by_completion(self):
        completer = FakeCompleter('{"agent_id": "task-analyzer", "reasons": ["analysis first"]}')
        router = _router(completer=completer)
        result = await router.route("orchestrate the weekly report workflow")
        assert result.primary_agent.agent_id == "task-analyzer"
        assert "analysis first" in result.reasoning

    async def test_refinement_reason_as_bare_string(self):
        completer = FakeCompleter('{"agent_id": "task-analyzer", "reasons": "analysis first"}')
        result = await _router(completer=completer).route("orchestrate the weekly report workflow")
        assert result.primary_agent.agent_id == "task-analyzer"
        assert result.primary_agent.reasoning[-1] == "analysis first"
        assert "a" not in result.reasoning

    async def test_semantic_route(self):
        router = _router()
        result = await router.route("Research market trends and competitor analysis")
        assert result.strategy == "semantic"
        assert not result.degraded
        assert result.primary_agent.agent_id == "research-agent"
        assert result.classification.intent is TaskIntent.ANALYSIS
        assert len(result.alternative_agents) == 3

    async def test_require_execution(self):
        result = await _router().route("write a report", require_execution=True)
        assert result.primary_agent.execution_capable
        assert result.task_analysis.needs_execution

    async def test_networks_injected_into_context(self):
        result = await _router().route("check wallet balance on polygon", context={"user": "u1"})
        assert result.context["networks"] == ["polygon"]
        assert result.context["user"] == "u1"
        assert result.context["classification"]["intent"] == "blockchain_query"

    async def test_empty_description(self):
        with pytest.raises(ValueError):
            await _router().route("   ")

    async def test_embedding_outage_is_degraded(self):
        outcome = await _router(embedder=FailingEmbedder()).try_route("research the market")
        assert outcome.status is OutcomeStatus.SERVICE_DEGRADED
        assert outcome.value.primary_agent.agent_id == "research-agent"
        assert outcome.value.primary_agent.confidence == 0.5
        assert outcome.to_dict()["status"] == "service_degraded"

    async def test_try_route_ok(self):
        outcome = await _router().try_route("write technical documentation")
        assert outcome.ok
        assert outcome.error is None


class TestDelegateAndCollaborate:
    async def test_build_requirement(self):
        requirement = _router().build_requirement("deploy an erc20 token contract")
        assert requirement.category == "contract_deployment"
        assert requirement.required_capabilities == ["contract_deployment"]

    async def test_delegate(self):
        router = _router()
        negotiation = await router.delegate("deploy an erc20 token contract")
        assert negotiation.state is not NegotiationState.OPEN
        assert negotiation.selected_agent in negotiation.candidate_ids
        assert router.negotiator.get_negotiation(negotiation.task_id) is negotiation

    async def test_delegate_without_candidates(self):
        requirement = TaskRequirement(
            category="nonexistent_cap", required_capabilities=["nonexistent_cap"]
        )
        outcome = await _router().try_delegate(requirement)
        assert outcome.status is OutcomeStatus.NO_CANDIDATE
        assert "nonexistent_cap" in outcome.error

    async def test_collaborate_negotiates_primary(self):
        router = _router()
        result = await router.collaborate("Research market trends")
        assert result.primary_agent_id in {"research-agent", "chaingpt-mcp"}
        assert result.primary_agent_id not in result.consulting_agent_ids
        assert len(result.consulting_agent_ids) <= 2
        stats = router.stats()
        assert stats["active_negotiations"] == 1
        assert stats["completed_collaborations"] == 1

    async def test_collaborate_with_unknown_primary(self):
        outcome = await _router().try_collaborate(
            "Research market trends", primary_agent_id="ghost", consulting_agent_ids=[]
        )
        assert outcome.status is OutcomeStatus.EXECUTION_FAILED
        assert "ghost" in outcome.error

    async def test_stats(self):
        router = _router()
        await router.initialize()
        stats = router.stats()
        assert stats["semantic_ready"] is True
        assert stats["registered_agents"] == len(router.context.catalog)
        assert stats["completed_collaborations"] == 0
        assert stats["average_confidence"] == 0.0
