"""Changelog data model.

Every type here is frozen. `to_dict()` gives the JSON shape handed to the
renderer (`generated/changelog.json`); `from_dict()` reads it back.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

from relbook.core.structured import as_obj_list, as_str_dict, get_bool, get_int, get_str

ComponentVersionMap = Mapping[str, str]


@dataclass(frozen=True, slots=True)
class ReleaseMetadata:
    """A component's GitHub release for the target version."""

    title: str = ""
    body: str = ""
    url: str = ""
    tag: str = ""
    is_prerelease: bool = False
    published_at: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "title": self.title,
            "body": self.body,
            "url": self.url,
            "tag": self.tag,
            "is_prerelease": self.is_prerelease,
            "published_at": self.published_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseMetadata:
        return cls(
            title=get_str(data, "title") or "",
            body=_raw_str(data, "body"),
            url=get_str(data, "url") or "",
            tag=get_str(data, "tag") or "",
            is_prerelease=get_bool(data, "is_prerelease") or False,
            published_at=get_str(data, "published_at") or "",
        )


@dataclass(frozen=True, slots=True)
class ArtifactResource:
    """One deployable resource of a component descriptor (chart, image)."""

    name: str
    type: str
    version: str
    reference: str = ""

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "type": self.type,
            "version": self.version,
            "reference": self.reference,
        }


@dataclass(frozen=True, slots=True)
class ArtifactDetails:
    """What a component version is built from.

    `artifact_version` is the source release the component packages; two
    component versions wrapping the same source release have no PR range.
    """

    artifact_version: str
    source_repo_url: str = ""
    resources: tuple[ArtifactResource, ...] = ()
    raw_descriptor: str = ""

    def resource(self, type_: str) -> ArtifactResource | None:
        for r in self.resources:
            if r.type == type_:
                return r
        return None

    def to_dict(self) -> dict[str, object]:
        return {
            "artifact_version": self.artifact_version,
            "source_repo_url": self.source_repo_url,
            "resources": [r.to_dict() for r in self.resources],
            "raw_descriptor": self.raw_descriptor,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ArtifactDetails:
        resources: list[ArtifactResource] = []
        for item in as_obj_list(data.get("resources")) or []:
            d = as_str_dict(item)
            if d is None:
                continue
            resources.append(
                ArtifactResource(
                    name=get_str(d, "name") or "",
                    type=get_str(d, "type") or "",
                    version=get_str(d, "version") or "",
                    reference=get_str(d, "reference") or "",
                )
            )
        return cls(
            artifact_version=get_str(data, "artifact_version") or "",
            source_repo_url=get_str(data, "source_repo_url") or "",
            resources=tuple(resources),
            raw_descriptor=_raw_str(data, "raw_descriptor"),
        )


@dataclass(frozen=True, slots=True)
class PullRequestDetail:
    title: str
    url: str
    author: str
    author_url: str
    avatar_url: str
    body: str


@dataclass(frozen=True, slots=True)
class PRRef:
    number: int
    title: str
    url: str
    author: str
    author_profile_url: str
    avatar_url: str

    def to_dict(self) -> dict[str, object]:
        return {
            "number": self.number,
            "title": self.title,
            "url": self.url,
            "author": self.author,
            "author_url": self.author_profile_url,
            "avatar_url": self.avatar_url,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> PRRef | None:
        number = get_int(data, "number")
        if number is None:
            return None
        return cls(
            number=number,
            title=get_str(data, "title") or "",
            url=get_str(data, "url") or "",
            author=get_str(data, "author") or "",
            author_profile_url=get_str(data, "author_url") or "",
            avatar_url=get_str(data, "avatar_url") or "",
        )


@dataclass(frozen=True, slots=True, order=True)
class Contributor:
    login: str
    profile_url: str = ""
    avatar_url: str = ""

    def to_dict(self) -> dict[str, object]:
        return {"author": self.login, "author_url": self.profile_url, "avatar_url": self.avatar_url}


@dataclass(frozen=True, slots=True)
class ChangeRecord:
    """One first-party component whose version moved between two snapshots.

    The diff engine fills `component`, `old_version`, `new_version` and the
    `is_breaking` seed; aggregation fills the rest and never touches the
    version fields. `issues` lists data-source failures hit while enriching.
    """

    component: str
    old_version: str
    new_version: str
    is_breaking: bool = False
    release: ReleaseMetadata = field(default_factory=ReleaseMetadata)
    artifact: ArtifactDetails | None = None
    pull_requests: tuple[PRRef, ...] = ()
    changelog_fragments: tuple[str, ...] = ()
    contributors: tuple[Contributor, ...] = ()
    issues: tuple[str, ...] = ()

    @property
    def is_new(self) -> bool:
        return self.old_version == ""

    def to_dict(self) -> dict[str, object]:
        return {
            "component": self.component,
            "old_version": self.old_version,
            "new_version": self.new_version,
            "is_breaking": self.is_breaking,
            "release_notes": self.release.to_dict(),
            "artifact": self.artifact.to_dict() if self.artifact is not None else None,
            "pr_details": [pr.to_dict() for pr in self.pull_requests],
            "pr_changelogs": list(self.changelog_fragments),
            "contributors": [c.to_dict() for c in self.contributors],
            "issues": list(self.issues),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ChangeRecord | None:
        component = get_str(data, "component")
        new_version = get_str(data, "new_version")
        if component is None or new_version is None:
            return None

        release = as_str_dict(data.get("release_notes"))
        artifact = as_str_dict(data.get("artifact"))

        prs: list[PRRef] = []
        for item in as_obj_list(data.get("pr_details")) or []:
            d = as_str_dict(item)
            pr = PRRef.from_dict(d) if d is not None else None
            if pr is not None:
                prs.append(pr)

        contributors: list[Contributor] = []
        for item in as_obj_list(data.get("contributors")) or []:
            d = as_str_dict(item)
            login = get_str(d, "author") if d is not None else None
            if d is None or login is None:
                continue
            contributors.append(
                Contributor(
                    login=login,
                    profile_url=get_str(d, "author_url") or "",
                    avatar_url=get_str(d, "avatar_url") or "",
                )
            )

        return cls(
            component=component,
            old_version=get_str(data, "old_version") or "",
            new_version=new_version,
            is_breaking=get_bool(data, "is_breaking") or False,
            release=ReleaseMetadata.from_dict(release) if release is not None else ReleaseMetadata(),
            artifact=ArtifactDetails.from_dict(artifact) if artifact is not None else None,
            pull_requests=tuple(prs),
            changelog_fragments=_str_tuple(data.get("pr_changelogs")),
            contributors=tuple(contributors),
            issues=_str_tuple(data.get("issues")),
        )


@dataclass(frozen=True, slots=True)
class ThirdPartyChangeRecord:
    name: str
    old_version: str
    new_version: str

    def to_dict(self) -> dict[str, object]:
        return {
            "component": self.name,
            "old_version": self.old_version,
            "new_version": self.new_version,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ThirdPartyChangeRecord | None:
        name = get_str(data, "component")
        new_version = get_str(data, "new_version")
        if name is None or new_version is None:
            return None
        return cls(name=name, old_version=get_str(data, "old_version") or "", new_version=new_version)


@dataclass(frozen=True, slots=True)
class ReleaseCandidate:
    """A product pre-release and the component versions it pinned."""

    version: str
    components: dict[str, str]

    def to_dict(self) -> dict[str, object]:
        return {"version": self.version, "components": dict(sorted(self.components.items()))}


@dataclass(frozen=True, slots=True)
class ReleaseChangelog:
    """Aggregated output of one changelog run."""

    from_version: str
    to_version: str
    changes: tuple[ChangeRecord, ...]
    third_party_changes: tuple[ThirdPartyChangeRecord, ...]

    @property
    def breaking_count(self) -> int:
        return sum(1 for c in self.changes if c.is_breaking)

    def to_dict(self) -> dict[str, object]:
        return {
            "from_version": self.from_version,
            "to_version": self.to_version,
            "changes": [c.to_dict() for c in self.changes],
            "third_party_changes": [c.to_dict() for c in self.third_party_changes],
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ReleaseChangelog:
        changes: list[ChangeRecord] = []
        for item in as_obj_list(data.get("changes")) or []:
            d = as_str_dict(item)
            rec = ChangeRecord.from_dict(d) if d is not None else None
            if rec is not None:
                changes.append(rec)

        third_party: list[ThirdPartyChangeRecord] = []
        for item in as_obj_list(data.get("third_party_changes")) or []:
            d = as_str_dict(item)
            tp = ThirdPartyChangeRecord.from_dict(d) if d is not None else None
            if tp is not None:
                third_party.append(tp)

        return cls(
            from_version=get_str(data, "from_version") or "",
            to_version=get_str(data, "to_version") or "",
            changes=tuple(changes),
            third_party_changes=tuple(third_party),
        )


def _raw_str(data: Mapping[str, object], key: str) -> str:
    # Release bodies and raw descriptors keep their whitespace; get_str would strip it.
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _str_tuple(obj: object) -> tuple[str, ...]:
    return tuple(x for x in as_obj_list(obj) or [] if isinstance(x, str))


@dataclass(frozen=True, slots=True)
class PublishedRelease:
    """A GitHub release of the product repository."""

    tag: str
    prerelease: bool
