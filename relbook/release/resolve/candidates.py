from __future__ import annotations

import re
from collections.abc import Iterable

from relbook.release.domain.version import try_parse_version

_RC_SUFFIX_RE = re.compile(r"-rc\.\d+$")


def release_base(tag: str) -> str:
    """`0.2.0-rc.3` -> `0.2.0`; other tags unchanged."""
    return _RC_SUFFIX_RE.sub("", tag)


def select_candidates(target: str, versions: Iterable[str]) -> list[str]:
    """Release candidates of `target`, oldest first.

    Only `target-rc.N` versions count; they are ordered by counter, not
    lexically (`rc.10` comes after `rc.9`).
    """
    base = release_base(target).removeprefix("v")
    picked: dict[str, int] = {}
    for raw in versions:
        v = try_parse_version(raw)
        if v is None or v.pre is None or v.pre.kind != "rc":
            continue
        if str(v.base) != base:
            continue
        picked[raw] = v.pre.number
    return sorted(picked, key=lambda raw: picked[raw])
