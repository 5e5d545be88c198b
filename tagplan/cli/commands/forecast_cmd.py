"""Forecast command - next version for a given latest tag."""

from __future__ import annotations

import typer

from tagplan.cli.commands._helpers import exit_with_error, parse_bump_or_exit
from tagplan.core.errors import ErrorCode
from tagplan.engine.errors import FormatError
from tagplan.engine.forecast import forecast_next, forecast_next_rc
from tagplan.engine.semver import BumpKind
from tagplan.output.console import RichConsole


def forecast(
    latest_tag: str = typer.Argument("", help="Latest tag (e.g. 1.2.3 or v1.2.3); empty = never released"),
    bump: str = typer.Option("patch", "--bump", help="major, minor or patch"),
    rc: str | None = typer.Option(
        None,
        "--rc",
        help="Append a pre-release identifier ('' = rc.1)",
        show_default=False,
    ),
) -> None:
    """Print the next version after LATEST_TAG."""
    console = RichConsole()
    kind = parse_bump_or_exit(bump, console) or BumpKind.PATCH

    try:
        if rc is None:
            result = forecast_next(latest_tag, kind)
        else:
            result = forecast_next_rc(latest_tag, kind, rc)
    except FormatError as e:
        exit_with_error(console, str(e), code=ErrorCode.USER_ERROR)

    typer.echo(result)
