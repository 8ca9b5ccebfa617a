"""JSON hand-off files between pipeline steps.

`generated/component-versions.json` (fetch -> changelog, notes) and
`generated/changelog.json` (changelog -> notes).
"""

from __future__ import annotations

import json
from pathlib import Path

from relbook.core.result import Err, Ok, Result
from relbook.core.structured import StrDict, as_str_dict, str_map
from relbook.platform.files import atomic_write_json, atomic_write_text
from relbook.release.domain.models import ReleaseChangelog
from relbook.release.domain.snapshot import VersionsSnapshot
from relbook.release.errors import ReleaseError

DEFAULT_VERSIONS_FILE = Path("generated/component-versions.json")
DEFAULT_CHANGELOG_FILE = Path("generated/changelog.json")
DEFAULT_NOTES_FILE = Path("dist/release-notes.md")


def _read_json_table(path: Path, *, what: str) -> Result[StrDict, ReleaseError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ReleaseError(kind="invalid_input", message=f"{what} not found: {path}"))
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to read {what}: {e}", hint=str(path)))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"invalid JSON in {what}: {e}", hint=str(path)))

    data = as_str_dict(obj)
    if data is None:
        return Err(ReleaseError(kind="invalid_input", message=f"{what} must be a JSON object", hint=str(path)))
    return Ok(data)


def _write(path: Path, payload: object, *, what: str) -> Result[Path, ReleaseError]:
    try:
        atomic_write_json(path, payload)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write {what}: {e}", hint=str(path)))
    return Ok(path)


def read_versions_file(path: Path) -> Result[VersionsSnapshot, ReleaseError]:
    data = _read_json_table(path, what="versions file")
    if isinstance(data, Err):
        return data
    return Ok(VersionsSnapshot.from_dict(data.value))


def write_versions_file(path: Path, snapshot: VersionsSnapshot) -> Result[Path, ReleaseError]:
    return _write(path, snapshot.to_dict(), what="versions file")


def read_component_map(path: Path) -> Result[dict[str, str], ReleaseError]:
    """A flat `{"name": "version"}` JSON file (recorded / observed dependency pins)."""
    data = _read_json_table(path, what="component map")
    if isinstance(data, Err):
        return data
    return Ok(str_map(data.value))


def read_changelog_file(path: Path) -> Result[ReleaseChangelog, ReleaseError]:
    data = _read_json_table(path, what="changelog file")
    if isinstance(data, Err):
        return data
    return Ok(ReleaseChangelog.from_dict(data.value))


def write_changelog_file(path: Path, changelog: ReleaseChangelog) -> Result[Path, ReleaseError]:
    return _write(path, changelog.to_dict(), what="changelog file")


def write_notes_file(path: Path, markdown: str) -> Result[Path, ReleaseError]:
    try:
        atomic_write_text(path, markdown)
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to write release notes: {e}", hint=str(path)))
    return Ok(path)
