from __future__ import annotations

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.draft import DraftPaths, draft_release
from relbook.release.infra.versions_file import (
    DEFAULT_CHANGELOG_FILE,
    DEFAULT_NOTES_FILE,
    DEFAULT_VERSIONS_FILE,
)


def draft(
    to_version: str = typer.Argument(..., help="Version to release (a -rc.N suffix is stripped)"),
    from_version: str | None = typer.Option(
        None, "--from", help="Previous release (default: latest stable release before TO)"
    ),
    create: bool = typer.Option(False, "--create", help="Create the draft (default: dry run)"),
) -> None:
    """Fetch, aggregate and render, then create a draft GitHub release."""
    ctx = build_context()

    outcome = unwrap_or_exit(
        draft_release(
            cwd=ctx.root,
            config=ctx.config,
            console=ctx.console,
            to_version=to_version,
            from_version=from_version,
            paths=DraftPaths(
                versions_file=resolve_path(ctx, DEFAULT_VERSIONS_FILE),
                changelog_file=resolve_path(ctx, DEFAULT_CHANGELOG_FILE),
                notes_file=resolve_path(ctx, DEFAULT_NOTES_FILE),
            ),
            create=create,
        ),
        ctx,
    )
    if outcome.url is not None:
        typer.echo(outcome.url)
