from __future__ import annotations

from pathlib import Path
from typing import cast

from relbook.core.result import Err, Ok, Result
from relbook.output.console import ConsoleProtocol, Style
from relbook.release.domain.detect import changed_keys, derive_next_version
from relbook.release.domain.policy import VersionDirective
from relbook.release.domain.version import (
    INCREMENTS,
    RELEASE_TYPES,
    Increment,
    InvalidVersionError,
    ReleaseType,
    Version,
    parse_version,
)
from relbook.release.errors import ReleaseError
from relbook.release.infra.versions_file import read_component_map


def parse_directive(
    *, force_upgrade: bool, increment: str, release_type: str
) -> Result[VersionDirective, ReleaseError]:
    inc = increment.strip().lower()
    kind = release_type.strip().lower()
    for value, allowed, flag in (
        (inc, INCREMENTS, "--increment"),
        (kind, RELEASE_TYPES, "--release-type"),
    ):
        if value not in allowed:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message=f"invalid {flag}: {value!r}",
                    hint=f"Expected one of: {', '.join(allowed)}",
                )
            )
    return Ok(
        VersionDirective(
            force_upgrade=force_upgrade,
            increment=cast(Increment, inc),
            release_type=cast(ReleaseType, kind),
        )
    )


def bump_version(
    *,
    current: str,
    directive: VersionDirective,
    recorded_file: Path | None,
    observed_file: Path | None,
    console: ConsoleProtocol,
) -> Result[Version | None, ReleaseError]:
    """Next version for `current`, or None when the automatic path has nothing to do.

    The automatic path compares two flat `{"dependency": "version"}` files;
    every other directive ignores them.
    """
    try:
        version = parse_version(current)
    except InvalidVersionError as e:
        return Err(ReleaseError(kind="invalid_version", message=str(e)))

    recorded: dict[str, str] = {}
    observed: dict[str, str] = {}
    if directive.is_automatic:
        if recorded_file is None or observed_file is None:
            return Err(
                ReleaseError(
                    kind="invalid_input",
                    message="automatic bump needs both dependency snapshots",
                    hint="Pass --recorded and --observed, or choose an increment or release type.",
                )
            )
        rec = read_component_map(recorded_file)
        if isinstance(rec, Err):
            return rec
        obs = read_component_map(observed_file)
        if isinstance(obs, Err):
            return obs
        recorded, observed = rec.value, obs.value

        changed = changed_keys(recorded, observed)
        if changed:
            console.info(f"{len(changed)} dependency change(s)")
            for key in changed:
                console.print(
                    f"  {key}: {recorded.get(key, '(none)')} -> {observed.get(key, '(none)')}",
                    Style.DIM,
                )

    nxt = derive_next_version(version, directive, recorded=recorded, observed=observed)
    if nxt is None:
        console.info("No dependency changes; skipping version bump")
        return Ok(None)

    console.success(f"{version} -> {nxt}")
    return Ok(nxt)
