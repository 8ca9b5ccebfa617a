from __future__ import annotations

from pathlib import Path

from relbook.core.config import Config
from relbook.core.result import Err, Ok, Result
from relbook.output.console import ConsoleProtocol
from relbook.release.domain.models import ReleaseChangelog
from relbook.release.domain.snapshot import VersionsSnapshot
from relbook.release.errors import ReleaseError
from relbook.release.infra.versions_file import write_notes_file
from relbook.release.view.notes import render_release_notes


def write_release_notes(
    *,
    version: str,
    snapshot: VersionsSnapshot,
    changelog: ReleaseChangelog,
    config: Config,
    output: Path,
    console: ConsoleProtocol,
) -> Result[Path, ReleaseError]:
    markdown = render_release_notes(
        version=version,
        title=config.github.release_title,
        snapshot=snapshot,
        changelog=changelog,
        registry=config.registry,
    )
    written = write_notes_file(output, markdown)
    if isinstance(written, Err):
        return written
    console.success(f"Release notes written: {output} ({markdown.count(chr(10))} lines)")
    return Ok(written.value)
