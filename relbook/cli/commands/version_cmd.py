from __future__ import annotations

from pathlib import Path

import typer

from relbook.cli.commands._helpers import resolve_path, unwrap_or_exit
from relbook.cli.context import build_context
from relbook.release.flow.bump import bump_version, parse_directive


def next_version(
    current: str = typer.Argument(..., help="Current version, e.g. 0.4.0-build.3"),
    increment: str = typer.Option("none", "--increment", help="none/patch/minor/major"),
    release_type: str = typer.Option("build", "--release-type", help="build/rc/full"),
    force: bool = typer.Option(False, "--force", help="Bump even without dependency changes"),
    recorded: Path | None = typer.Option(
        None, "--recorded", help="JSON map of dependency versions the current version was built from"
    ),
    observed: Path | None = typer.Option(
        None, "--observed", help="JSON map of the dependency versions available now"
    ),
) -> None:
    """Print the next version, or nothing when there is nothing to release."""
    ctx = build_context()

    directive = unwrap_or_exit(
        parse_directive(force_upgrade=force, increment=increment, release_type=release_type), ctx
    )
    result = bump_version(
        current=current,
        directive=directive,
        recorded_file=resolve_path(ctx, recorded) if recorded is not None else None,
        observed_file=resolve_path(ctx, observed) if observed is not None else None,
        console=ctx.console,
    )
    nxt = unwrap_or_exit(result, ctx)
    if nxt is not None:
        typer.echo(str(nxt))
