from __future__ import annotations

import typer

from tagplan import __version__
from tagplan.cli.commands.flow_cmd import flow
from tagplan.cli.commands.forecast_cmd import forecast
from tagplan.cli.commands.plan_cmd import plan


app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help="Release-policy engine for CI pipelines.",
)


app.command()(plan)
app.command()(forecast)
app.command()(flow)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_print_version,
        is_eager=True,
    ),
) -> None:
    pass


def main() -> None:
    app()
