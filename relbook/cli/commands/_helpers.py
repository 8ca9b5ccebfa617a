"""Shared helpers for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from relbook.core.errors import ErrorCode
from relbook.core.result import Err, Result
from relbook.output.console import Style
from relbook.release.errors import ReleaseError

if TYPE_CHECKING:
    from relbook.cli.context import CLIContext

T = TypeVar("T")


def release_error_code(kind: str) -> ErrorCode:
    if kind in {"gh_missing", "gh_auth_required", "ocm_missing"}:
        return ErrorCode.ENV_ERROR
    if kind in {"registry_failed", "github_failed"}:
        return ErrorCode.NETWORK_ERROR
    if kind in {"io_failed"}:
        return ErrorCode.IO_ERROR
    return ErrorCode.USER_ERROR


def exit_release_error(ctx: CLIContext, error: ReleaseError) -> NoReturn:
    ctx.console.error(error.message)
    if error.hint:
        ctx.console.print(f"hint: {error.hint}", Style.DIM)
    raise typer.Exit(code=int(release_error_code(error.kind)))


def unwrap_or_exit(result: Result[T, ReleaseError], ctx: CLIContext) -> T:
    """Value of `result`, or exit with the error's code."""
    if isinstance(result, Err):
        exit_release_error(ctx, result.error)
    return result.value


def resolve_path(ctx: CLIContext, path: Path) -> Path:
    """Relative paths are taken from the project root, not the shell's cwd."""
    return path if path.is_absolute() else ctx.root / path
