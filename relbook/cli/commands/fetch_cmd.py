from __future__ import annotations

from pathlib import Path

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.fetch import fetch_versions, resolve_from_version
from relbook.release.infra.versions_file import DEFAULT_VERSIONS_FILE, write_versions_file


def fetch(
    to_version: str = typer.Argument(..., help="Target version (may be a release candidate)"),
    from_version: str | None = typer.Option(
        None, "--from", help="Previous release (default: latest stable release before TO)"
    ),
    out: Path = typer.Option(DEFAULT_VERSIONS_FILE, "--out", help="Versions snapshot to write"),
) -> None:
    """Fetch component versions for a release from the OCM registry."""
    ctx = build_context()

    if from_version is None:
        from_version = unwrap_or_exit(
            resolve_from_version(cwd=ctx.root, config=ctx.config, to_version=to_version), ctx
        )

    snapshot = unwrap_or_exit(
        fetch_versions(
            cwd=ctx.root,
            config=ctx.config,
            console=ctx.console,
            from_version=from_version,
            to_version=to_version,
        ),
        ctx,
    )
    path = unwrap_or_exit(write_versions_file(resolve_path(ctx, out), snapshot), ctx)
    typer.echo(str(path))
