from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import typer

from tagplan.core.errors import ErrorCode
from tagplan.core.result import Err
from tagplan.core.settings import DEFAULT_CONFIG_FILENAME, Settings, apply_env, load_settings
from tagplan.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    settings: Settings
    env: Mapping[str, str]
    console: ConsoleProtocol


def build_context(config: Path | None = None) -> CLIContext:
    """Settings (file + environment) and a console for one command invocation.

    An explicit --config must load; the default tagplan.toml is optional.
    """
    path = config if config is not None else Path.cwd() / DEFAULT_CONFIG_FILENAME

    settings = Settings()
    if config is not None or path.is_file():
        result = load_settings(path)
        if isinstance(result, Err):
            typer.echo(f"error: {result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.CONFIG_ERROR))
        settings = result.value

    env = dict(os.environ)
    return CLIContext(
        settings=apply_env(settings, env),
        env=env,
        console=RichConsole(),
    )
