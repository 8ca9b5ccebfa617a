"""Pure release logic: no I/O, no printing."""

from __future__ import annotations

from relbook.release.domain.aggregate import (
    aggregate_changes,
    collect_contributors,
    order_changes,
    order_third_party,
)
from relbook.release.domain.detect import changed_keys, derive_next_version, has_changed
from relbook.release.domain.diff import diff_components, diff_third_party
from relbook.release.domain.policy import VersionDirective, next_version
from relbook.release.domain.version import InvalidVersionError, Version, parse_version

__all__ = [
    "InvalidVersionError",
    "Version",
    "VersionDirective",
    "aggregate_changes",
    "changed_keys",
    "collect_contributors",
    "derive_next_version",
    "diff_components",
    "diff_third_party",
    "has_changed",
    "next_version",
    "order_changes",
    "order_third_party",
    "parse_version",
]
