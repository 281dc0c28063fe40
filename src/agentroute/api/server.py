"""FastAPI server for programmatic routing access."""

from __future__ import annotations

import time
from typing import Any

import click
from fastapi import FastAPI, HTTPException

from agentroute import __version__
from agentroute.catalog.models import TaskRequirement
from agentroute.errors import AgentExecutionError, ConfigurationError, NoCandidateError
from agentroute.routing.router import TaskRouter

app = FastAPI(
    title="agentroute API",
    version=__version__,
    description="Task routing, agent negotiation and collaborative execution",
)

_start_time = time.monotonic()
_router: TaskRouter | None = None


def get_router() -> TaskRouter:
    """Router built lazily from environment settings."""
    global _router
    if _router is None:
        try:
            _router = TaskRouter()
        except ConfigurationError as e:
            raise HTTPException(status_code=500, detail=str(e)) from e
    return _router


def set_router(router: TaskRouter | None) -> None:
    global _router
    _router = router


def _requirement(request: dict[str, Any], router: TaskRouter) -> TaskRequirement:
    if request.get("requirement"):
        if not isinstance(request["requirement"], dict):
            raise HTTPException(status_code=422, detail="requirement must be an object")
        try:
            return TaskRequirement.from_dict(request["requirement"])
        except ValueError as e:
            raise HTTPException(status_code=422, detail=str(e)) from e
    task = request.get("task", "")
    if not task:
        raise HTTPException(status_code=422, detail="task or requirement is required")
    try:
        return router.build_requirement(
            task, request.get("priority", "medium"), request.get("context")
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e


@app.get("/api/health")
async def health() -> dict[str, Any]:
    """Health check."""
    uptime = time.monotonic() - _start_time
    return {"status": "ok", "version": __version__, "uptime_seconds": round(uptime, 1)}


@app.get("/api/agents")
async def agents() -> dict[str, Any]:
    """Registered agent profiles."""
    catalog = get_router().context.catalog
    profiles = [p.to_dict() for p in catalog.get_registered_agents().values()]
    return {"agents": profiles, "count": len(profiles)}


@app.post("/api/route")
async def route(request: dict[str, Any]) -> dict[str, Any]:
    """Select an agent for a free-text task."""
    task = request.get("task", "")
    if not task:
        raise HTTPException(status_code=422, detail="task is required")
    router = get_router()
    try:
        priority = request.get("priority", "medium")
        outcome = await router.try_route(
            task,
            priority=priority,
            context=request.get("context"),
            require_execution=bool(request.get("require_execution", False)),
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if outcome.value is None:
        raise HTTPException(status_code=404, detail=outcome.error)
    return outcome.to_dict()


@app.post("/api/delegate")
async def delegate(request: dict[str, Any]) -> dict[str, Any]:
    """Negotiate an agent for a task or explicit requirement."""
    router = get_router()
    requirement = _requirement(request, router)
    try:
        negotiation = await router.delegate(
            requirement, request.get("requesting_agent_id", "task-router")
        )
    except NoCandidateError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    return negotiation.to_dict()


@app.get("/api/negotiations/{task_id}")
async def negotiation(task_id: str) -> dict[str, Any]:
    found = get_router().negotiator.get_negotiation(task_id)
    if found is None:
        raise HTTPException(status_code=404, detail=f"unknown negotiation {task_id}")
    return found.to_dict()


@app.post("/api/collaborate")
async def collaborate(request: dict[str, Any]) -> dict[str, Any]:
    """Execute a task with a primary agent and consultants."""
    router = get_router()
    requirement = _requirement(request, router)
    try:
        result = await router.collaborate(
            requirement,
            primary_agent_id=request.get("primary_agent_id"),
            consulting_agent_ids=request.get("consulting_agent_ids"),
        )
    except NoCandidateError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e
    except AgentExecutionError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return result.to_dict()


@app.get("/api/collaborations/{agent_id}")
async def collaborations(agent_id: str) -> dict[str, Any]:
    history = get_router().synthesizer.get_collaboration_history(agent_id)
    return {"agent_id": agent_id, "collaborations": [c.to_dict() for c in history]}


@app.get("/api/stats")
async def stats() -> dict[str, Any]:
    """Protocol statistics."""
    return get_router().stats()


@click.command()
@click.option("--host", default="127.0.0.1", help="Bind address")
@click.option("--port", default=8765, type=int, help="Port")
def main(host: str, port: int) -> None:
    """Start the agentroute API server."""
    import uvicorn

    uvicorn.run(app, host=host, port=port)
