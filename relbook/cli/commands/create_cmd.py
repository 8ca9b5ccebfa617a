from __future__ import annotations

from pathlib import Path

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.draft import create_release
from relbook.release.infra.versions_file import DEFAULT_NOTES_FILE


def create(
    version: str = typer.Argument(..., help="Release tag, e.g. 0.2.0"),
    notes_file: Path = typer.Argument(DEFAULT_NOTES_FILE, help="Rendered release notes"),
    create_: bool = typer.Option(False, "--create", help="Create the draft (default: dry run)"),
) -> None:
    """Create a draft GitHub release from an existing notes file."""
    ctx = build_context()

    outcome = unwrap_or_exit(
        create_release(
            cwd=ctx.root,
            config=ctx.config,
            console=ctx.console,
            version=version,
            notes_file=resolve_path(ctx, notes_file),
            create=create_,
        ),
        ctx,
    )
    if outcome.url is not None:
        typer.echo(outcome.url)
