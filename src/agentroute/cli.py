"""CLI entry point for agentroute."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from agentroute import __version__
from agentroute.errors import RoutingError

if TYPE_CHECKING:
    from agentroute.routing.router import SelectionResult, TaskRouter

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="aroute")
@click.option(
    "--config",
    "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Catalog JSON file (overrides AGENTROUTE_CONFIG).",
)
@click.option("-v", "--verbose", is_flag=True, help="Log routing decisions.")
@click.pass_context
def main(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """agentroute: route tasks to agents and negotiate between them."""
    from agentroute.settings import Settings

    try:
        settings = Settings.from_env()
    except RoutingError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)
    if config_path is not None:
        settings.catalog_path = config_path
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    ctx.obj = settings


def _get_router(ctx: click.Context) -> TaskRouter:
    from agentroute.context import RoutingContext
    from agentroute.routing.router import TaskRouter

    try:
        return TaskRouter(RoutingContext.from_settings(ctx.obj))
    except RoutingError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)


def _run(ctx: click.Context, coro: Any) -> Any:
    try:
        return asyncio.run(coro)
    except RoutingError as e:
        console.print(f"[red]{e}[/red]")
        ctx.exit(1)


def _print_json(data: Any) -> None:
    console.print_json(json.dumps(data, default=str))


@main.command()
@click.option("--all", "show_all", is_flag=True, help="Include non-task (system) agents.")
@click.pass_context
def agents(ctx: click.Context, show_all: bool) -> None:
    """List registered agents."""
    router = _get_router(ctx)
    catalog = router.context.catalog
    profiles = catalog.get_registered_agents().values() if show_all else catalog.task_agents()

    table = Table(title="Registered Agents")
    table.add_column("Agent ID", style="cyan")
    table.add_column("Type")
    table.add_column("Exec", justify="center")
    table.add_column("Success", justify="right")
    table.add_column("Load", justify="right")
    table.add_column("Capabilities", max_width=50)

    for profile in profiles:
        table.add_row(
            profile.agent_id,
            str(profile.agent_type),
            "✓" if profile.execution_capable else "",
            f"{profile.metrics.success_rate:.0%}",
            f"{profile.metrics.load_score:.0%}",
            ", ".join(profile.capabilities),
        )
    console.print(table)


@main.command()
@click.pass_context
def capabilities(ctx: click.Context) -> None:
    """List capabilities and the agents that provide them."""
    router = _get_router(ctx)

    table = Table(title="Capabilities")
    table.add_column("Capability", style="cyan")
    table.add_column("Priority", justify="right")
    table.add_column("Aliases", max_width=40)
    table.add_column("Agents", style="green")

    for capability in router.context.catalog.capabilities():
        table.add_row(
            capability.id,
            str(capability.priority),
            ", ".join(capability.specific_tasks),
            ", ".join(capability.agents),
        )
    console.print(table)


@main.command()
@click.argument("category")
@click.option("--operation", default=None, help="Tool/operation name.")
@click.option("--require", "required", multiple=True, help="Required capability (repeatable).")
@click.pass_context
def score(ctx: click.Context, category: str, operation: str | None, required: tuple[str, ...]) -> None:
    """Score agents for a capability CATEGORY with the rule-based scorer."""
    from agentroute.catalog.models import TaskRequirement

    router = _get_router(ctx)
    requirement = TaskRequirement(
        category=category, operation=operation, required_capabilities=list(required)
    )
    matches = (
        router.scorer.find_best_agents_for_task(requirement)
        if required
        else router.scorer.find_best_agent(requirement)
    )
    if not matches:
        console.print(f"[yellow]No agents match {category}.[/yellow]")
        return

    table = Table(title=f"Candidates for {category}")
    table.add_column("Agent", style="cyan")
    table.add_column("Score", justify="right", style="bold")
    table.add_column("Match")
    table.add_column("Reasoning", max_width=60)
    for m in matches:
        table.add_row(m.agent_id, f"{m.score:.3f}", str(m.match_type), m.reasoning)
    console.print(table)


def _print_selection(result: SelectionResult) -> None:
    primary = result.primary_agent
    style = "yellow" if result.degraded else "green"
    console.print(
        f"[bold]Primary:[/bold] [{style}]{primary.agent_id}[/{style}] "
        f"({primary.confidence:.0%}, {result.strategy})"
    )
    analysis = result.task_analysis
    console.print(
        f"[bold]Analysis:[/bold] {analysis.category} / {analysis.intent} / "
        f"{analysis.complexity} ({analysis.estimated_duration})"
    )
    if analysis.networks:
        console.print(f"[bold]Networks:[/bold] {', '.join(analysis.networks)}")
    for alt in result.alternative_agents:
        console.print(f"  [dim]alt[/dim] {alt.agent_id} ({alt.confidence:.0%})")
    for line in result.reasoning:
        console.print(f"  [dim]-[/dim] {line}")


@main.command()
@click.argument("task")
@click.option(
    "--priority",
    type=click.Choice(["low", "medium", "high"]),
    default="medium",
    show_default=True,
)
@click.option("--execute", "require_execution", is_flag=True, help="Require an execution-capable agent.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def route(ctx: click.Context, task: str, priority: str, require_execution: bool, as_json: bool) -> None:
    """Select the best agent for TASK."""
    router = _get_router(ctx)
    result = _run(ctx, router.route(task, priority=priority, require_execution=require_execution))
    if as_json:
        _print_json(result.to_dict())
    else:
        _print_selection(result)


@main.command()
@click.argument("task")
@click.option("--require", "required", multiple=True, help="Required capability (repeatable).")
@click.option("--requester", default="task-router", show_default=True)
@click.option("--json", "as_json", is_flag=True, help="Print the negotiation as JSON.")
@click.pass_context
def delegate(ctx: click.Context, task: str, required: tuple[str, ...], requester: str, as_json: bool) -> None:
    """Negotiate an agent for TASK through bidding rounds."""
    router = _get_router(ctx)
    requirement = router.build_requirement(task)
    if required:
        requirement = requirement.derive(
            category=required[0],
            required_capabilities=list(dict.fromkeys([*required, *requirement.required_capabilities])),
        )
    negotiation = _run(ctx, router.delegate(requirement, requesting_agent_id=requester))
    if as_json:
        _print_json(negotiation.to_dict())
        return

    console.print(f"[bold]Negotiation:[/bold] {negotiation.task_id}")
    table = Table(title="Rounds")
    table.add_column("Round", justify="right")
    table.add_column("Bids", justify="right")
    table.add_column("Consultations", justify="right")
    table.add_column("Best confidence", justify="right")
    for r in negotiation.rounds:
        best = max((b.confidence for b in r.bids), default=0.0)
        table.add_row(str(r.number), str(len(r.bids)), str(len(r.consultations)), f"{best:.2f}")
    console.print(table)
    color = "green" if negotiation.state == "converged" else "yellow"
    console.print(
        f"[{color}]{negotiation.state}[/{color}] → [bold]{negotiation.selected_agent}[/bold]"
    )
    console.print(f"[dim]{negotiation.reasoning}[/dim]")


@main.command()
@click.argument("task")
@click.option("--primary", default=None, help="Primary agent (negotiated when omitted).")
@click.option("--consultant", "consultants", multiple=True, help="Consulting agent (repeatable).")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.pass_context
def collaborate(
    ctx: click.Context, task: str, primary: str | None, consultants: tuple[str, ...], as_json: bool
) -> None:
    """Execute TASK with a primary agent and consultants."""
    router = _get_router(ctx)
    result = _run(
        ctx,
        router.collaborate(task, primary_agent_id=primary, consulting_agent_ids=list(consultants) or None),
    )
    if as_json:
        _print_json(result.to_dict())
        return

    console.print(f"[bold]Primary:[/bold] {result.primary_agent_id}")
    console.print(f"[bold]Consultants:[/bold] {', '.join(result.consulting_agent_ids) or '-'}")
    console.print(f"[bold]Synthesis confidence:[/bold] {result.synthesis_confidence:.2f}")
    console.print(f"[bold]Collaboration confidence:[/bold] {result.collaboration_confidence:.2f}")
    for agent_id, error in result.failed_consultants.items():
        console.print(f"  [red]failed[/red] {agent_id}: {error}")
