"""Error payload shared by the release layers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

ReleaseErrorKind = Literal[
    "gh_missing",
    "gh_auth_required",
    "ocm_missing",
    "invalid_input",
    "invalid_version",
    "not_found",
    "release_exists",
    "registry_failed",
    "github_failed",
    "io_failed",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    """Canonical release error.

    Infra adapters produce it, flows pass it up unchanged, and the CLI turns
    `kind` into an exit code.
    """

    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
