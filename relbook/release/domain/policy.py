"""Next-version derivation.

The state is (base, lane, counter); directives are the only transitions.
`full` ends a cycle; the next directive starts over from a bumped base.
"""

from __future__ import annotations

from dataclasses import dataclass

from relbook.release.domain.version import (
    Increment,
    PreRelease,
    ReleaseType,
    Version,
)


@dataclass(frozen=True, slots=True)
class VersionDirective:
    """Operator or automation intent for one invocation."""

    force_upgrade: bool = False
    increment: Increment = "none"
    release_type: ReleaseType = "build"

    @property
    def is_automatic(self) -> bool:
        """The scheduled snapshot path: only advance a build counter."""
        return (not self.force_upgrade) and self.increment == "none" and self.release_type == "build"


def next_version(current: Version, directive: VersionDirective) -> Version:
    base = current.base.bump(directive.increment)

    if directive.release_type == "full":
        return Version(base)

    kind = directive.release_type
    number = 1
    if base == current.base and current.pre is not None and current.pre.kind == kind:
        number = current.pre.number + 1

    return Version(base, PreRelease(kind, number))
