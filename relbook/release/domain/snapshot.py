from __future__ import annotations

from dataclasses import dataclass, field

from relbook.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_str_map
from relbook.release.domain.models import ReleaseCandidate


@dataclass(frozen=True, slots=True)
class VersionsSnapshot:
    """Component versions of the previous release, the target, and every candidate between."""

    from_version: str
    to_version: str
    timestamp: str
    current_release_components: dict[str, str] = field(default_factory=dict)
    previous_release_components: dict[str, str] = field(default_factory=dict)
    third_party: dict[str, str] = field(default_factory=dict)
    previous_third_party: dict[str, str] = field(default_factory=dict)
    release_candidates: tuple[ReleaseCandidate, ...] = ()

    def manifest(self) -> dict[str, str]:
        """Final component set: the target's pins, else the last candidate's."""
        if self.current_release_components or not self.release_candidates:
            return dict(self.current_release_components)
        return dict(self.release_candidates[-1].components)

    def candidate_chain(self) -> list[dict[str, str]]:
        return [dict(rc.components) for rc in self.release_candidates]

    def to_dict(self) -> dict[str, object]:
        return {
            "from_version": self.from_version,
            "to_version": self.to_version,
            "timestamp": self.timestamp,
            "current_release_components": dict(sorted(self.current_release_components.items())),
            "previous_release_components": dict(sorted(self.previous_release_components.items())),
            "third_party": dict(sorted(self.third_party.items())),
            "previous_third_party": dict(sorted(self.previous_third_party.items())),
            "release_candidates": [rc.to_dict() for rc in self.release_candidates],
        }

    @classmethod
    def from_dict(cls, data: StrDict) -> VersionsSnapshot:
        candidates: list[ReleaseCandidate] = []
        for item in as_obj_list(data.get("release_candidates")) or []:
            d = as_str_dict(item)
            version = get_str(d, "version") if d is not None else None
            if d is None or version is None:
                continue
            candidates.append(ReleaseCandidate(version=version, components=get_str_map(d, "components")))

        return cls(
            from_version=get_str(data, "from_version") or "",
            to_version=get_str(data, "to_version") or "",
            timestamp=get_str(data, "timestamp") or "",
            current_release_components=get_str_map(data, "current_release_components"),
            previous_release_components=get_str_map(data, "previous_release_components"),
            third_party=get_str_map(data, "third_party"),
            previous_third_party=get_str_map(data, "previous_third_party"),
            release_candidates=tuple(candidates),
        )
