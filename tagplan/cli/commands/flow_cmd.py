"""Flow command - show how the current pipeline run is classified."""

from __future__ import annotations

from pathlib import Path

import typer

from tagplan.ci.environment import read_run_facts
from tagplan.cli.commands._helpers import parse_flow_or_exit
from tagplan.cli.context import build_context
from tagplan.engine.context import build_run_context
from tagplan.engine.flow import describe_context, resolve_flow
from tagplan.output.console import Style


def flow(
    forced: str | None = typer.Option(
        None, "--flow", help="Force a flow instead of deriving it", show_default=False
    ),
    config: Path | None = typer.Option(None, "--config", help="Settings file", show_default=False),
) -> None:
    """Print the resolved release flow for the current environment."""
    ctx = build_context(config)
    requested = parse_flow_or_exit(
        forced if forced is not None else ctx.settings.context.flow, ctx.console
    )

    context = build_run_context(read_run_facts(ctx.settings.context, ctx.env))
    ctx.console.print(describe_context(context), Style.DIM)
    typer.echo(resolve_flow(context, requested).value)
