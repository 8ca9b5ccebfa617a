from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.changelog import generate_changelog
from relbook.release.infra import gh, ocm
from relbook.release.infra.datasource import RegistryDataSource
from relbook.release.infra.versions_file import (
    DEFAULT_CHANGELOG_FILE,
    DEFAULT_VERSIONS_FILE,
    read_versions_file,
    write_changelog_file,
)


def changelog(
    versions: Path = typer.Option(DEFAULT_VERSIONS_FILE, "--versions", help="Versions snapshot"),
    out: Path = typer.Option(DEFAULT_CHANGELOG_FILE, "--out", help="Changelog JSON to write"),
    workers: int | None = typer.Option(
        None, "--workers", min=1, help="Components enriched concurrently (default: config)"
    ),
) -> None:
    """Aggregate per-component changelogs between two releases."""
    ctx = build_context()
    for check in (gh.ensure_gh_available, ocm.ensure_ocm_available):
        unwrap_or_exit(check(), ctx)

    snapshot = unwrap_or_exit(read_versions_file(resolve_path(ctx, versions)), ctx)
    settings = ctx.config.changelog
    if workers is not None:
        settings = replace(settings, workers=workers)

    result = generate_changelog(
        snapshot=snapshot,
        source=RegistryDataSource(cwd=ctx.root, registry=ctx.config.registry),
        settings=settings,
        console=ctx.console,
    )
    path = unwrap_or_exit(write_changelog_file(resolve_path(ctx, out), result), ctx)
    typer.echo(str(path))
