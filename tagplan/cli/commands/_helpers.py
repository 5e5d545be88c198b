"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn

import typer

from tagplan.core.errors import ErrorCode
from tagplan.engine.errors import FormatError
from tagplan.engine.flow import Flow, parse_flow
from tagplan.engine.semver import BumpKind, parse_bump_kind
from tagplan.output.console import Style

if TYPE_CHECKING:
    from tagplan.output.console import ConsoleProtocol


def exit_with_error(
    console: ConsoleProtocol,
    message: str,
    *,
    code: ErrorCode,
    hint: str | None = None,
) -> NoReturn:
    console.error(message)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)
    raise typer.Exit(code=int(code))


def parse_flow_or_exit(text: str | None, console: ConsoleProtocol) -> Flow:
    if text is None:
        return Flow.AUTO
    try:
        return parse_flow(text)
    except FormatError as e:
        exit_with_error(console, str(e), code=ErrorCode.USER_ERROR)


def parse_bump_or_exit(text: str | None, console: ConsoleProtocol) -> BumpKind | None:
    if text is None:
        return None
    try:
        return parse_bump_kind(text)
    except FormatError as e:
        exit_with_error(console, str(e), code=ErrorCode.USER_ERROR)
