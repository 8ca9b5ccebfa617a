"""Release version model.

A release version is `MAJOR.MINOR.PATCH` optionally followed by a single
pre-release lane tag, `-build.N` or `-rc.N` with N >= 1. At the same base a
full release sorts after every rc, and every rc after every build.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

PreReleaseKind = Literal["build", "rc"]
Increment = Literal["none", "patch", "minor", "major"]
ReleaseType = Literal["build", "rc", "full"]

INCREMENTS: tuple[Increment, ...] = ("none", "patch", "minor", "major")
RELEASE_TYPES: tuple[ReleaseType, ...] = ("build", "rc", "full")

_VERSION_RE = re.compile(
    r"^v?(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)(?:-(build|rc)\.([1-9]\d*))?$"
)
_MAJOR_RE = re.compile(r"^v?(\d+)\.")

_KIND_RANK: dict[PreReleaseKind | None, int] = {"build": 0, "rc": 1, None: 2}


class InvalidVersionError(ValueError):
    """Raised when a string is not `major.minor.patch[-{build|rc}.N]`."""

    def __init__(self, raw: str) -> None:
        super().__init__(f"invalid version: {raw!r} (expected MAJOR.MINOR.PATCH[-build.N|-rc.N])")
        self.raw = raw


@dataclass(frozen=True, slots=True, order=True)
class Base:
    major: int
    minor: int
    patch: int

    def bump(self, increment: Increment) -> Base:
        match increment:
            case "none":
                return self
            case "major":
                return Base(self.major + 1, 0, 0)
            case "minor":
                return Base(self.major, self.minor + 1, 0)
            case "patch":
                return Base(self.major, self.minor, self.patch + 1)
            case _:
                raise AssertionError(f"unexpected increment: {increment}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"


@dataclass(frozen=True, slots=True)
class PreRelease:
    kind: PreReleaseKind
    number: int

    def __post_init__(self) -> None:
        if self.number < 1:
            raise ValueError(f"pre-release counter must be >= 1, got {self.number}")

    def __str__(self) -> str:
        return f"{self.kind}.{self.number}"


@dataclass(frozen=True, slots=True)
class Version:
    base: Base
    pre: PreRelease | None = None

    @property
    def is_full(self) -> bool:
        return self.pre is None

    def sort_key(self) -> tuple[int, int, int, int, int]:
        kind = self.pre.kind if self.pre is not None else None
        number = self.pre.number if self.pre is not None else 0
        return (self.base.major, self.base.minor, self.base.patch, _KIND_RANK[kind], number)

    def __lt__(self, other: Version) -> bool:
        return self.sort_key() < other.sort_key()

    def __le__(self, other: Version) -> bool:
        return self.sort_key() <= other.sort_key()

    def __str__(self) -> str:
        if self.pre is None:
            return str(self.base)
        return f"{self.base}-{self.pre}"


def parse_version(raw: str) -> Version:
    """Parse a release version, accepting an optional leading `v`.

    Raises:
        InvalidVersionError: if `raw` does not match the grammar.
    """
    m = _VERSION_RE.match(raw.strip())
    if m is None:
        raise InvalidVersionError(raw)
    base = Base(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    kind = m.group(4)
    if kind is None:
        return Version(base)
    number = int(m.group(5))
    if kind == "build":
        return Version(base, PreRelease("build", number))
    return Version(base, PreRelease("rc", number))


def try_parse_version(raw: str) -> Version | None:
    try:
        return parse_version(raw)
    except InvalidVersionError:
        return None


def major_of(raw: str) -> int | None:
    """Leading major number of any semver-ish component version.

    Component versions are not restricted to the release grammar
    (`v1.4.0-alpha+meta` is fine here); only the first field matters.
    """
    m = _MAJOR_RE.match(raw.strip())
    if m is None:
        return None
    return int(m.group(1))
