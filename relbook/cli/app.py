from __future__ import annotations

import os
from pathlib import Path

import typer

from relbook import __version__
from relbook.cli.commands.changelog_cmd import changelog
from relbook.cli.commands.create_cmd import create
from relbook.cli.commands.draft_cmd import draft
from relbook.cli.commands.fetch_cmd import fetch
from relbook.cli.commands.notes_cmd import notes
from relbook.cli.commands.version_cmd import next_version
from relbook.cli.context import ROOT_ENV_VAR
from relbook.core.errors import ErrorCode

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
)


# Commands
app.command("version")(next_version)
app.command()(fetch)
app.command()(changelog)
app.command()(notes)
app.command()(draft)
app.command()(create)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        callback=_print_version,
        is_eager=True,
        help="Show version and exit.",
    ),
    root: Path | None = typer.Option(
        None,
        "--root",
        help="Project root holding relbook.toml and the workflow (default: current directory)",
    ),
) -> None:
    if root is not None:
        try:
            resolved = root.expanduser().resolve()
        except OSError as e:
            typer.echo(f"error: invalid --root: {e}", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        if not resolved.is_dir():
            typer.echo(f"error: --root '{resolved}' is not a directory", err=True)
            raise typer.Exit(code=int(ErrorCode.USER_ERROR))

        os.environ[ROOT_ENV_VAR] = str(resolved)


def main() -> None:
    app()
