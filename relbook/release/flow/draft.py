"""End-to-end draft release: fetch, changelog, notes, then `gh release create --draft`."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from relbook.core.config import Config
from relbook.core.result import Err, Ok, Result
from relbook.output.console import ConsoleProtocol, Style
from relbook.release.domain.source import ChangelogDataSource
from relbook.release.errors import ReleaseError
from relbook.release.flow.changelog import generate_changelog
from relbook.release.flow.fetch import fetch_versions, resolve_from_version
from relbook.release.flow.notes import write_release_notes
from relbook.release.infra import gh, ocm
from relbook.release.infra.datasource import RegistryDataSource
from relbook.release.infra.versions_file import write_changelog_file, write_versions_file
from relbook.release.resolve.candidates import release_base

_TOTAL_STEPS = 5


@dataclass(frozen=True, slots=True)
class DraftPaths:
    versions_file: Path
    changelog_file: Path
    notes_file: Path


@dataclass(frozen=True, slots=True)
class DraftOutcome:
    tag: str
    notes_file: Path
    created: bool
    url: str | None = None


def _check_prerequisites(
    *, cwd: Path, console: ConsoleProtocol, need_ocm: bool = True
) -> Result[None, ReleaseError]:
    checks = [gh.ensure_gh_available]
    if need_ocm:
        checks.append(ocm.ensure_ocm_available)
    for check in checks:
        ok = check()
        if isinstance(ok, Err):
            return ok
    ok = gh.ensure_gh_auth(cwd=cwd)
    if isinstance(ok, Err):
        return ok
    console.success("gh, ocm: OK" if need_ocm else "gh: OK")
    return Ok(None)


def _refuse_existing(*, cwd: Path, repo: str, tag: str) -> Result[None, ReleaseError]:
    exists = gh.release_exists(cwd=cwd, repo=repo, tag=tag)
    if isinstance(exists, Err):
        return exists
    if exists.value:
        return Err(
            ReleaseError(
                kind="release_exists",
                message=f"release {tag} already exists in {repo}",
                hint=f"https://github.com/{repo}/releases/tag/{tag}",
            )
        )
    return Ok(None)


def _publish(
    *,
    cwd: Path,
    config: Config,
    console: ConsoleProtocol,
    tag: str,
    notes_file: Path,
    create: bool,
) -> Result[DraftOutcome, ReleaseError]:
    repo = config.github.release_repo
    title = f"{config.github.release_title} {tag}"
    if not create:
        console.print("DRY RUN: would create draft release", Style.WARNING)
        console.print(f"  tag: {tag}", Style.DIM)
        console.print(f"  title: {title}", Style.DIM)
        console.print(f"  repository: {repo}", Style.DIM)
        console.print(f"  notes: {notes_file}", Style.DIM)
        console.info("Re-run with --create to publish the draft")
        return Ok(DraftOutcome(tag=tag, notes_file=notes_file, created=False))

    url = gh.create_draft_release(cwd=cwd, repo=repo, tag=tag, title=title, notes_file=notes_file)
    if isinstance(url, Err):
        return url
    console.success(f"Draft release created: {url.value}")
    console.print("Review the notes on GitHub, edit if needed, then publish.", Style.DIM)
    return Ok(DraftOutcome(tag=tag, notes_file=notes_file, created=True, url=url.value))


def draft_release(
    *,
    cwd: Path,
    config: Config,
    console: ConsoleProtocol,
    to_version: str,
    from_version: str | None,
    paths: DraftPaths,
    create: bool,
    source: ChangelogDataSource | None = None,
) -> Result[DraftOutcome, ReleaseError]:
    """Run the whole pipeline for `to_version`.

    `to_version` may be a release candidate; the draft is tagged with its
    base version. Without `create` nothing is published (dry run).
    """
    tag = release_base(to_version).removeprefix("v")
    repo = config.github.release_repo
    console.header(f"Draft release {tag} (from {to_version})")
    console.print(f"repository: {repo}", Style.DIM)
    console.print(f"dry run: {'no' if create else 'yes'}", Style.DIM)

    console.step(1, _TOTAL_STEPS, "Validating prerequisites")
    ok = _check_prerequisites(cwd=cwd, console=console)
    if isinstance(ok, Err):
        return ok

    ok = _refuse_existing(cwd=cwd, repo=repo, tag=tag)
    if isinstance(ok, Err):
        return ok

    console.step(2, _TOTAL_STEPS, "Fetching component versions")
    if from_version is None:
        resolved = resolve_from_version(cwd=cwd, config=config, to_version=to_version)
        if isinstance(resolved, Err):
            return resolved
        from_version = resolved.value
        console.print(f"previous release: {from_version}", Style.DIM)

    snapshot = fetch_versions(
        cwd=cwd, config=config, console=console, from_version=from_version, to_version=to_version
    )
    if isinstance(snapshot, Err):
        return snapshot
    written = write_versions_file(paths.versions_file, snapshot.value)
    if isinstance(written, Err):
        return written

    console.step(3, _TOTAL_STEPS, "Generating changelog")
    changelog = generate_changelog(
        snapshot=snapshot.value,
        source=source or RegistryDataSource(cwd=cwd, registry=config.registry),
        settings=config.changelog,
        console=console,
    )
    written = write_changelog_file(paths.changelog_file, changelog)
    if isinstance(written, Err):
        return written

    console.step(4, _TOTAL_STEPS, "Formatting release notes")
    notes = write_release_notes(
        version=tag,
        snapshot=snapshot.value,
        changelog=changelog,
        config=config,
        output=paths.notes_file,
        console=console,
    )
    if isinstance(notes, Err):
        return notes

    console.step(5, _TOTAL_STEPS, "Creating draft release")
    return _publish(
        cwd=cwd, config=config, console=console, tag=tag, notes_file=paths.notes_file, create=create
    )


def create_release(
    *,
    cwd: Path,
    config: Config,
    console: ConsoleProtocol,
    version: str,
    notes_file: Path,
    create: bool,
) -> Result[DraftOutcome, ReleaseError]:
    """Publish an already rendered notes file as a draft release."""
    tag = version.removeprefix("v")
    if not notes_file.is_file():
        return Err(
            ReleaseError(
                kind="invalid_input",
                message=f"release notes file not found: {notes_file}",
                hint="Run `relbook notes` first.",
            )
        )

    console.header(f"Draft release {tag}")
    console.print(f"repository: {config.github.release_repo}", Style.DIM)
    ok = _check_prerequisites(cwd=cwd, console=console, need_ocm=False)
    if isinstance(ok, Err):
        return ok
    ok = _refuse_existing(cwd=cwd, repo=config.github.release_repo, tag=tag)
    if isinstance(ok, Err):
        return ok
    return _publish(
        cwd=cwd, config=config, console=console, tag=tag, notes_file=notes_file, create=create
    )
