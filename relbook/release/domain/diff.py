from __future__ import annotations

from relbook.release.domain.models import (
    ChangeRecord,
    ComponentVersionMap,
    ThirdPartyChangeRecord,
)
from relbook.release.domain.version import major_of


def is_major_bump(old_version: str, new_version: str) -> bool:
    """True iff both versions have a major number and the new one is higher.

    A new component (empty old version) is never a major bump.
    """
    old_major = major_of(old_version)
    new_major = major_of(new_version)
    if old_major is None or new_major is None:
        return False
    return new_major > old_major


def diff_components(
    baseline: ComponentVersionMap, target: ComponentVersionMap
) -> list[ChangeRecord]:
    """Components added or re-versioned in `target`.

    Components only present in `baseline` are dropped: release notes describe
    what ships, not what was removed. Output order follows `target`.
    """
    out: list[ChangeRecord] = []
    for component, new_version in target.items():
        old_version = baseline.get(component, "")
        if old_version == new_version:
            continue
        out.append(
            ChangeRecord(
                component=component,
                old_version=old_version,
                new_version=new_version,
                is_breaking=is_major_bump(old_version, new_version),
            )
        )
    return out


def diff_third_party(
    baseline: ComponentVersionMap, target: ComponentVersionMap
) -> list[ThirdPartyChangeRecord]:
    out: list[ThirdPartyChangeRecord] = []
    for name, new_version in target.items():
        if not new_version:
            continue
        old_version = baseline.get(name, "")
        if old_version == new_version:
            continue
        out.append(ThirdPartyChangeRecord(name=name, old_version=old_version, new_version=new_version))
    return out
