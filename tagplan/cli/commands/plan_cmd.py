"""Plan command - decide image tags and publishing for the current pipeline run."""

from __future__ import annotations

from pathlib import Path

import typer

from tagplan.ci.environment import read_run_facts
from tagplan.cli.commands._helpers import exit_with_error, parse_bump_or_exit, parse_flow_or_exit
from tagplan.cli.context import build_context
from tagplan.core.errors import ErrorCode
from tagplan.core.lookup import Unavailable
from tagplan.core.result import Err, Ok
from tagplan.engine.context import build_run_context
from tagplan.gitlab.client import gitlab_client_from_env
from tagplan.gitlab.merge_requests import GitLabManualBump
from tagplan.gitlab.tags import GitLabTagHistory
from tagplan.output.summary import print_plan, print_summary
from tagplan.services.plan_file import PlanFormat, render_plan, write_plan_file
from tagplan.services.run import RunRequest, evaluate_run


def plan(
    flow: str | None = typer.Option(
        None, "--flow", help="Force a flow: auto, feature, mr, default, release", show_default=False
    ),
    bump: str | None = typer.Option(
        None, "--bump", help="Bump override: major, minor, patch", show_default=False
    ),
    latest_tag: str | None = typer.Option(
        None,
        "--latest-tag",
        help="Latest release tag (skips the GitLab tag lookup; '' means never released)",
        show_default=False,
    ),
    offline: bool = typer.Option(False, "--offline", help="Do not query GitLab"),
    require_gitlab: bool = typer.Option(
        False,
        "--require-gitlab",
        help="Fail instead of falling back when a GitLab lookup is unavailable",
    ),
    fmt: PlanFormat = typer.Option(PlanFormat.text, "--format", help="Plan output format"),
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Write the plan to a file instead of stdout", show_default=False
    ),
    config: Path | None = typer.Option(
        None, "--config", help="Settings file (default: ./tagplan.toml if present)", show_default=False
    ),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Skip the run summary"),
) -> None:
    """Resolve flow, bump and next version, then print the image tag plan."""
    ctx = build_context(config)
    console = ctx.console

    forced_flow = parse_flow_or_exit(flow if flow is not None else ctx.settings.context.flow, console)
    bump_override = parse_bump_or_exit(
        bump if bump is not None else ctx.settings.context.bump, console
    )

    if offline and require_gitlab:
        exit_with_error(
            console, "--offline and --require-gitlab cannot be combined", code=ErrorCode.USER_ERROR
        )

    context = build_run_context(read_run_facts(ctx.settings.context, ctx.env))

    tags = None
    manual_bump = None
    if not offline:
        client = gitlab_client_from_env(ctx.settings.gitlab, ctx.env)
        match client:
            case Ok(gitlab):
                tags = GitLabTagHistory(gitlab)
                manual_bump = GitLabManualBump(gitlab)
            case Err(reason):
                if require_gitlab:
                    exit_with_error(
                        console, f"GitLab lookups required: {reason}", code=ErrorCode.NETWORK_ERROR
                    )
                console.warning(f"GitLab lookups disabled: {reason}")

    outcome = evaluate_run(
        RunRequest(
            context=context,
            settings=ctx.settings,
            forced_flow=forced_flow,
            bump_override=bump_override,
            latest_tag=latest_tag,
        ),
        tags=tags,
        manual_bump=manual_bump,
    )

    if require_gitlab:
        for lookup in (outcome.latest_lookup, outcome.bump_lookup):
            if isinstance(lookup, Unavailable):
                exit_with_error(console, lookup.reason, code=ErrorCode.NETWORK_ERROR)

    if not quiet:
        print_summary(outcome, console)

    if isinstance(outcome.plan, Err):
        error = outcome.plan.error
        exit_with_error(console, error.message, code=ErrorCode.CONFIG_ERROR, hint=error.hint)

    result = outcome.plan.value
    if not quiet:
        print_plan(result, console)
    rendered = render_plan(result, flow=outcome.flow, forecast=outcome.forecast, fmt=fmt)

    if output is None:
        typer.echo(rendered, nl=False)
        return

    written = write_plan_file(output, rendered)
    if isinstance(written, Err):
        exit_with_error(console, written.error.message, code=ErrorCode.IO_ERROR)
    console.success(f"plan written to {output}")
