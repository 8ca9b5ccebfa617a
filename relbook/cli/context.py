from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import typer

from relbook.core.config import CONFIG_FILENAME, Config, load_config_or_default
from relbook.core.errors import ErrorCode
from relbook.core.result import Err
from relbook.output.console import ConsoleProtocol, RichConsole

ROOT_ENV_VAR = "RELBOOK_ROOT"


@dataclass(frozen=True, slots=True)
class CLIContext:
    root: Path
    config: Config
    console: ConsoleProtocol


def project_root() -> Path:
    """`--root` / `RELBOOK_ROOT`, else the current directory."""
    env = os.environ.get(ROOT_ENV_VAR)
    if env:
        return Path(env).expanduser().resolve()
    return Path.cwd().resolve()


def build_context() -> CLIContext:
    root = project_root()
    config_result = load_config_or_default(root / CONFIG_FILENAME)
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(root=root, config=config_result.value, console=RichConsole())
