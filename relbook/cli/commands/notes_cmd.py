from __future__ import annotations

from pathlib import Path

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.notes import write_release_notes
from relbook.release.infra.versions_file import (
    DEFAULT_CHANGELOG_FILE,
    DEFAULT_NOTES_FILE,
    DEFAULT_VERSIONS_FILE,
    read_changelog_file,
    read_versions_file,
)
from relbook.release.resolve.candidates import release_base


def notes(
    version: str | None = typer.Argument(
        None, help="Version in the title (default: the snapshot's target, without -rc.N)"
    ),
    versions: Path = typer.Option(DEFAULT_VERSIONS_FILE, "--versions", help="Versions snapshot"),
    changelog_file: Path = typer.Option(DEFAULT_CHANGELOG_FILE, "--changelog", help="Changelog JSON"),
    out: Path = typer.Option(DEFAULT_NOTES_FILE, "--out", help="Markdown file to write"),
) -> None:
    """Render Markdown release notes."""
    ctx = build_context()

    snapshot = unwrap_or_exit(read_versions_file(resolve_path(ctx, versions)), ctx)
    changes = unwrap_or_exit(read_changelog_file(resolve_path(ctx, changelog_file)), ctx)
    title_version = version or release_base(snapshot.to_version).removeprefix("v")

    path = unwrap_or_exit(
        write_release_notes(
            version=title_version,
            snapshot=snapshot,
            changelog=changes,
            config=ctx.config,
            output=resolve_path(ctx, out),
            console=ctx.console,
        ),
        ctx,
    )
    typer.echo(str(path))
