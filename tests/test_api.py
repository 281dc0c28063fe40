"""Tests for the FastAPI server."""

from __future__ import annotations

from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient

from agentroute.api.server import app, set_router
from agentroute.catalog.registry import CapabilityCatalog
from agentroute.context import RoutingContext
from agentroute.routing.router import TaskRouter
from agentroute.services.local import HashingEmbedder


@pytest.fixture
async def client() -> AsyncIterator[AsyncClient]:
    context = RoutingContext.for_catalog(
        CapabilityCatalog.with_defaults(), tie_break=[("chaingpt-mcp", "nebula-mcp")]
    )
    set_router(TaskRouter(context, embedder=HashingEmbedder()))
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    set_router(None)


@pytest.mark.anyio
async def test_health(client: AsyncClient) -> None:
    response = await client.get("/api/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert "version" in data
    assert "uptime_seconds" in data


@pytest.mark.anyio
async def test_agents(client: AsyncClient) -> None:
    response = await client.get("/api/agents")
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == len(data["agents"])
    assert "research-agent" in {a["agent_id"] for a in data["agents"]}


@pytest.mark.anyio
async def test_route(client: AsyncClient) -> None:
    response = await client.post("/api/route", json={"task": "check wallet balance on polygon"})
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["value"]["primary_agent"]["agent_id"]
    assert data["value"]["task_analysis"]["networks"] == ["polygon"]


@pytest.mark.anyio
async def test_route_requires_task(client: AsyncClient) -> None:
    response = await client.post("/api/route", json={"priority": "high"})
    assert response.status_code == 422


@pytest.mark.anyio
async def test_delegate_and_lookup(client: AsyncClient) -> None:
    response = await client.post("/api/delegate", json={"task": "deploy an erc20 token contract"})
    assert response.status_code == 200
    negotiation = response.json()
    assert negotiation["state"] in ("converged", "exhausted")
    assert negotiation["selected_agent"] in [c["agent_id"] for c in negotiation["candidates"]]

    response = await client.get(f"/api/negotiations/{negotiation['task_id']}")
    assert response.status_code == 200
    assert response.json()["task_id"] == negotiation["task_id"]


@pytest.mark.anyio
async def test_delegate_without_candidates(client: AsyncClient) -> None:
    response = await client.post(
        "/api/delegate",
        json={"requirement": {"category": "nonexistent_cap", "required_capabilities": ["nonexistent_cap"]}},
    )
    assert response.status_code == 404


@pytest.mark.anyio
async def test_delegate_rejects_bad_requirement(client: AsyncClient) -> None:
    response = await client.post("/api/delegate", json={"requirement": {"priority": "high"}})
    assert response.status_code == 422


@pytest.mark.anyio
async def test_delegate_rejects_non_object_requirement(client: AsyncClient) -> None:
    response = await client.post("/api/delegate", json={"requirement": ["check balance"]})
    assert response.status_code == 422
    assert "object" in response.json()["detail"]


@pytest.mark.anyio
async def test_delegate_rejects_unknown_priority(client: AsyncClient) -> None:
    response = await client.post(
        "/api/delegate", json={"task": "check balance", "priority": "urgent"}
    )
    assert response.status_code == 422


@pytest.mark.anyio
async def test_collaborate_rejects_unknown_priority(client: AsyncClient) -> None:
    response = await client.post(
        "/api/collaborate", json={"task": "Research market trends", "priority": "urgent"}
    )
    assert response.status_code == 422


@pytest.mark.anyio
async def test_unknown_negotiation(client: AsyncClient) -> None:
    response = await client.get("/api/negotiations/does-not-exist")
    assert response.status_code == 404


@pytest.mark.anyio
async def test_collaborate_and_history(client: AsyncClient) -> None:
    response = await client.post(
        "/api/collaborate",
        json={
            "task": "research market trends",
            "primary_agent_id": "research-agent",
            "consulting_agent_ids": ["chaingpt-mcp"],
        },
    )
    assert response.status_code == 200
    data = response.json()
    assert set(data["contributions"]) == {"research-agent", "chaingpt-mcp"}
    assert 0.0 <= data["synthesis_confidence"] <= 1.0

    response = await client.get("/api/collaborations/research-agent")
    assert response.status_code == 200
    assert len(response.json()["collaborations"]) == 1


@pytest.mark.anyio
async def test_collaborate_with_unknown_primary(client: AsyncClient) -> None:
    response = await client.post(
        "/api/collaborate",
        json={"task": "research market trends", "primary_agent_id": "ghost", "consulting_agent_ids": []},
    )
    assert response.status_code == 502


@pytest.mark.anyio
async def test_stats(client: AsyncClient) -> None:
    await client.post("/api/delegate", json={"task": "deploy an erc20 token contract"})
    response = await client.get("/api/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["active_negotiations"] == 1
    assert data["completed_collaborations"] == 0
