"""Tests for the embedding-based semantic matcher."""

import pytest

from agentroute.catalog.registry import CapabilityCatalog
from agentroute.scoring.semantic import (
    FALLBACK_CONFIDENCE,
    AgentMatch,
    SelectionRequest,
    SemanticMatcher,
    cosine_similarity,
)
from agentroute.services.local import HashingEmbedder

from conftest import CountingEmbedder, FailingEmbedder, FakeCompleter

pytestmark = pytest.mark.anyio


def _match(agent_id: str, confidence: float, execution_capable: bool = False) -> AgentMatch:
    return AgentMatch(
        agent_id=agent_id,
        agent_name=agent_id,
        confidence=confidence,
        similarity=confidence,
        agent_type="mcp",
        execution_capable=execution_capable,
    )


@pytest.fixture
def two_agent_catalog() -> CapabilityCatalog:
    catalog = CapabilityCatalog()
    catalog.register_agent(
        "writer",
        ["documentation"],
        description="Writes technical documentation and guides",
        keywords=["document", "markdown"],
    )
    catalog.register_agent(
        "executor",
        ["token_transfer"],
        description="Sends tokens on chain",
        keywords=["transfer", "wallet"],
        execution_capable=True,
    )
    return catalog


class TestCosineSimilarity:
    def test_identical(self):
        assert cosine_similarity([1.0, 2.0, 3.0], [1.0, 2.0, 3.0]) == pytest.approx(1.0)

    def test_orthogonal(self):
        assert cosine_similarity([1.0, 0.0], [0.0, 1.0]) == pytest.approx(0.0)

    def test_zero_vector(self):
        assert cosine_similarity([0.0, 0.0], [1.0, 1.0]) == 0.0

    def test_dimension_mismatch(self):
        with pytest.raises(ValueError, match="dimensions"):
            cosine_similarity([1.0], [1.0, 2.0])


class TestHashingEmbedder:
    async def test_deterministic_and_normalized(self):
        embedder = HashingEmbedder(dimensions=64)
        a = await embedder.embed("Deploy an ERC20 token")
        b = await embedder.embed("deploy an erc20 token")
        assert a == b
        assert sum(x * x for x in a) == pytest.approx(1.0)

    def test_rejects_bad_dimensions(self):
        with pytest.raises(ValueError):
            HashingEmbedder(dimensions=0)


class TestSemanticSelection:
    async def test_own_profile_text_ranks_agent_first(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        text = default_catalog.get_agent("research-agent").profile_text()

        selection = await matcher.select_best_agent(SelectionRequest(task_description=text))

        assert selection.primary.agent_id == "research-agent"
        assert selection.primary.similarity == pytest.approx(1.0, abs=1e-9)
        assert not selection.degraded
        assert len(selection.alternatives) <= 3

    async def test_initialize_embeds_task_agents_only(self, default_catalog):
        embedder = CountingEmbedder()
        matcher = SemanticMatcher(default_catalog, embedder=embedder)
        count = await matcher.initialize()
        assert count == len(default_catalog.task_agents())
        assert default_catalog.get_agent("task-orchestrator").embedding is None

    async def test_initialize_skips_failing_agent(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=CountingEmbedder(fail_on="Agent: writer"))
        assert await matcher.initialize() == 1
        assert two_agent_catalog.get_agent("writer").embedding is None
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert selection.primary.agent_id == "executor"

    async def test_execution_capable_agents_first(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        text = two_agent_catalog.get_agent("writer").profile_text()

        plain = await matcher.select_best_agent(SelectionRequest(text))
        forced = await matcher.select_best_agent(SelectionRequest(text, require_execution=True))

        assert plain.primary.agent_id == "writer"
        assert forced.primary.agent_id == "executor"

    async def test_execution_verb_in_text_implies_execution(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        selection = await matcher.select_best_agent(
            SelectionRequest("mint the documentation guides markdown")
        )
        assert selection.primary.agent_id == "executor"

    async def test_preferred_agent_boost(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        request = SelectionRequest(
            "write documentation",
            context={"classification": {"confidence": 0.95}},
            preferred_agent_id="executor",
        )
        selection = await matcher.select_best_agent(request)
        executor = next(
            m for m in [selection.primary, *selection.alternatives] if m.agent_id == "executor"
        )
        assert executor.confidence == pytest.approx(0.95)

    async def test_preference_ignored_below_threshold(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        request = SelectionRequest(
            "write documentation",
            context={"classification": {"confidence": 0.5}},
            preferred_agent_id="executor",
        )
        selection = await matcher.select_best_agent(request)
        assert selection.primary.agent_id == "writer"


class TestRanking:
    def test_precedence_within_margin(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, tie_break=[("chaingpt-mcp", "nebula-mcp")])
        ranked = matcher.rank([_match("nebula-mcp", 0.90), _match("chaingpt-mcp", 0.85)], False)
        assert [m.agent_id for m in ranked] == ["chaingpt-mcp", "nebula-mcp"]

    def test_precedence_outside_margin(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, tie_break=[("chaingpt-mcp", "nebula-mcp")])
        ranked = matcher.rank([_match("nebula-mcp", 0.90), _match("chaingpt-mcp", 0.70)], False)
        assert [m.agent_id for m in ranked] == ["nebula-mcp", "chaingpt-mcp"]

    def test_no_table_means_similarity_order(self, default_catalog):
        matcher = SemanticMatcher(default_catalog)
        ranked = matcher.rank([_match("nebula-mcp", 0.90), _match("chaingpt-mcp", 0.85)], False)
        assert ranked[0].agent_id == "nebula-mcp"

    def test_execution_first_beats_similarity(self, default_catalog):
        matcher = SemanticMatcher(default_catalog)
        ranked = matcher.rank([_match("a", 0.99), _match("b", 0.10, execution_capable=True)], True)
        assert ranked[0].agent_id == "b"


class TestReasoning:
    async def test_completion_reasons_used(self, two_agent_catalog):
        completer = FakeCompleter('{"reasons": ["documents well", "knows markdown"]}')
        matcher = SemanticMatcher(two_agent_catalog, HashingEmbedder(), completer)
        await matcher.initialize()
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert "documents well" in selection.primary.reasoning
        # primary + one alternative
        assert len(completer.prompts) == 2

    async def test_completion_failure_uses_template(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, HashingEmbedder(), FakeCompleter(fail=True))
        await matcher.initialize()
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert selection.primary.reasoning == [
            "writer matched based on capabilities and use cases"
        ]

    async def test_bare_string_reason_kept_whole(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, HashingEmbedder(), FakeCompleter('{"reasons": "fits"}'))
        await matcher.initialize()
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert selection.primary.reasoning == ["fits"]

    async def test_non_list_reasons_use_fallback_text(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, HashingEmbedder(), FakeCompleter('{"reasons": 3}'))
        await matcher.initialize()
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert selection.primary.reasoning == ["writer has relevant capabilities for this task"]

    async def test_unparseable_completion_uses_template(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, HashingEmbedder(), FakeCompleter("not json"))
        await matcher.initialize()
        selection = await matcher.select_best_agent(SelectionRequest("write documentation"))
        assert "matched based on capabilities" in selection.primary.reasoning[0]


class TestDegradedSelection:
    async def test_no_embedder(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, embedder=None, fallback_agent="research-agent")
        selection = await matcher.select_best_agent(SelectionRequest("anything"))
        assert selection.degraded
        assert selection.primary.agent_id == "research-agent"
        assert selection.primary.confidence == FALLBACK_CONFIDENCE

    async def test_not_initialized(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, embedder=HashingEmbedder())
        selection = await matcher.select_best_agent(SelectionRequest("anything"))
        assert selection.degraded

    async def test_embedding_outage(self, default_catalog):
        matcher = SemanticMatcher(default_catalog, embedder=HashingEmbedder())
        await matcher.initialize()
        matcher.embedder = FailingEmbedder()
        selection = await matcher.select_best_agent(SelectionRequest("anything"))
        assert selection.degraded
        assert selection.alternatives == []

    async def test_unknown_fallback_uses_first_task_agent(self, two_agent_catalog):
        matcher = SemanticMatcher(two_agent_catalog, embedder=None, fallback_agent="missing")
        selection = await matcher.select_best_agent(SelectionRequest("anything"))
        assert selection.primary.agent_id == "writer"
