from __future__ import annotations

from collections.abc import Mapping

from relbook.release.domain.policy import VersionDirective, next_version
from relbook.release.domain.version import Version


def changed_keys(recorded: Mapping[str, str], observed: Mapping[str, str]) -> list[str]:
    """Names whose value differs, including names present on one side only."""
    keys = set(recorded) | set(observed)
    return sorted(k for k in keys if recorded.get(k) != observed.get(k))


def has_changed(recorded: Mapping[str, str], observed: Mapping[str, str]) -> bool:
    return bool(changed_keys(recorded, observed))


def derive_next_version(
    current: Version,
    directive: VersionDirective,
    *,
    recorded: Mapping[str, str],
    observed: Mapping[str, str],
) -> Version | None:
    """Next version, or None when the automatic path has nothing to release.

    Manual and forced directives always produce a version.
    """
    if directive.is_automatic and not has_changed(recorded, observed):
        return None
    return next_version(current, directive)
