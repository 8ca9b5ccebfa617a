from __future__ import annotations

from collections.abc import Iterable

from relbook.release.domain.models import PublishedRelease
from relbook.release.domain.version import Base, Version, parse_version, try_parse_version

INITIAL_RELEASE = Base(0, 1, 0)
NO_RELEASE = "0.0.0"


def find_previous_release(target: str, releases: Iterable[PublishedRelease]) -> str | None:
    """Tag of the newest stable release below `target`'s base version.

    Returns None for the initial release or when there is nothing older.
    The tag is returned as published (with or without a `v` prefix).

    Raises:
        InvalidVersionError: if `target` is malformed.
    """
    base = parse_version(target).base
    if base == INITIAL_RELEASE:
        return None

    best: tuple[Version, str] | None = None
    for r in releases:
        if r.prerelease:
            continue
        v = try_parse_version(r.tag)
        if v is None or not v.is_full or v.base >= base:
            continue
        if best is None or best[0] < v:
            best = (v, r.tag)

    return best[1] if best is not None else None


def is_initial_release(from_version: str) -> bool:
    return from_version in ("", NO_RELEASE, f"v{NO_RELEASE}")
