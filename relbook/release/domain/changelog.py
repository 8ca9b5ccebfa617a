"""Changelog fragments embedded in pull request descriptions.

Authors list user-facing changes as bullets under a `Change Log` heading:

    ## Change Log
    - Added tenant quotas
    - Fixed webhook retries

    ## Testing
    ...

Matching is deliberately literal. A heading spelled differently
(`Changelog`, `Change-Log`) is not recognised.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

_SECTION_HEADING_RE = re.compile(r"^#{1,3}\s*change log\s*$", re.IGNORECASE)
_ANY_HEADING_RE = re.compile(r"^#{1,6}")
_BULLET_RE = re.compile(r"^[-*+]\s+\S")

_BREAKING_RE = re.compile(r"breaking|major", re.IGNORECASE)


def extract_changelog_fragments(body: str) -> list[str]:
    """Bullet lines of every `Change Log` section of a PR description."""
    fragments: list[str] = []
    in_section = False
    for raw in body.splitlines():
        line = raw.strip()
        if _SECTION_HEADING_RE.match(line):
            in_section = True
            continue
        if _ANY_HEADING_RE.match(line):
            in_section = False
            continue
        if in_section and _BULLET_RE.match(line):
            fragments.append(line)
    return fragments


def merge_unique(groups: Iterable[Iterable[str]]) -> list[str]:
    """Concatenate, keeping the first occurrence of each fragment."""
    seen: set[str] = set()
    out: list[str] = []
    for group in groups:
        for item in group:
            if item in seen:
                continue
            seen.add(item)
            out.append(item)
    return out


def mentions_breaking_change(text: str) -> bool:
    return _BREAKING_RE.search(text) is not None
