from __future__ import annotations

from relbook.release.domain.models import (
    ArtifactDetails,
    ArtifactResource,
    ChangeRecord,
    Contributor,
    PRRef,
    ReleaseCandidate,
    ReleaseChangelog,
    ReleaseMetadata,
    ThirdPartyChangeRecord,
)
from relbook.release.domain.snapshot import VersionsSnapshot


def _record() -> ChangeRecord:
    return ChangeRecord(
        component="portal",
        old_version="0.9.0",
        new_version="1.0.0",
        is_breaking=True,
        release=ReleaseMetadata(title="v1.0.0", body="  Breaking: new API\n", url="https://x/r"),
        artifact=ArtifactDetails(
            artifact_version="v1.0.0",
            source_repo_url="https://github.com/platform-mesh/portal",
            resources=(ArtifactResource("image", "ociImage", "1.0.0", "ghcr.io/pm/portal:1.0.0"),),
        ),
        pull_requests=(PRRef(12, "Add API", "https://x/pull/12", "ann", "https://github.com/ann", "a.png"),),
        changelog_fragments=("- Added API",),
        contributors=(Contributor("ann", "https://github.com/ann", "a.png"),),
        issues=("pull request lookup timed out",),
    )


def test_change_record_json_keys() -> None:
    data = _record().to_dict()
    assert list(data) == [
        "component",
        "old_version",
        "new_version",
        "is_breaking",
        "release_notes",
        "artifact",
        "pr_details",
        "pr_changelogs",
        "contributors",
        "issues",
    ]
    assert data["pr_details"] == [
        {
            "number": 12,
            "title": "Add API",
            "url": "https://x/pull/12",
            "author": "ann",
            "author_url": "https://github.com/ann",
            "avatar_url": "a.png",
        }
    ]
    assert data["contributors"] == [
        {"author": "ann", "author_url": "https://github.com/ann", "avatar_url": "a.png"}
    ]


def test_change_record_reads_back_what_it_wrote() -> None:
    rec = _record()
    assert ChangeRecord.from_dict(rec.to_dict()) == rec


def test_release_body_whitespace_is_preserved() -> None:
    meta = ReleaseMetadata.from_dict({"body": "  Breaking: new API\n"})
    assert meta.body == "  Breaking: new API\n"


def test_change_record_from_dict_tolerates_missing_sections() -> None:
    rec = ChangeRecord.from_dict({"component": "new", "new_version": "0.1.0", "pr_details": "bogus"})
    assert rec is not None
    assert rec.is_new
    assert rec.artifact is None
    assert rec.pull_requests == ()


def test_change_record_from_dict_requires_component_and_new_version() -> None:
    assert ChangeRecord.from_dict({"component": "x"}) is None
    assert ChangeRecord.from_dict({"new_version": "1.0.0"}) is None


def test_artifact_resource_lookup() -> None:
    details = _record().artifact
    assert details is not None
    assert details.resource("ociImage") is not None
    assert details.resource("helmChart") is None


def test_artifact_raw_descriptor_is_kept_verbatim() -> None:
    details = ArtifactDetails(artifact_version="v1.0.0", raw_descriptor="component:\n  name: portal\n")
    data = details.to_dict()
    assert data["raw_descriptor"] == "component:\n  name: portal\n"
    assert ArtifactDetails.from_dict(data) == details


def test_changelog_breaking_count_and_third_party_key() -> None:
    changelog = ReleaseChangelog(
        from_version="0.1.0",
        to_version="0.2.0",
        changes=(_record(), ChangeRecord("b", "1.0.0", "1.0.1")),
        third_party_changes=(ThirdPartyChangeRecord("TRAEFIK_VERSION", "35.0.0", "36.3.0"),),
    )
    assert changelog.breaking_count == 1
    data = changelog.to_dict()
    assert data["third_party_changes"] == [
        {"component": "TRAEFIK_VERSION", "old_version": "35.0.0", "new_version": "36.3.0"}
    ]
    assert ReleaseChangelog.from_dict(data) == changelog


def test_snapshot_manifest_prefers_target_components() -> None:
    rc = ReleaseCandidate("0.2.0-rc.1", {"a": "1.0.0-rc"})
    snap = VersionsSnapshot(
        "0.1.0", "0.2.0", "t", current_release_components={"a": "1.0.0"}, release_candidates=(rc,)
    )
    assert snap.manifest() == {"a": "1.0.0"}

    only_rc = VersionsSnapshot("0.1.0", "0.2.0", "t", release_candidates=(rc,))
    assert only_rc.manifest() == {"a": "1.0.0-rc"}
    assert only_rc.candidate_chain() == [{"a": "1.0.0-rc"}]


def test_snapshot_from_dict_skips_malformed_candidates() -> None:
    snap = VersionsSnapshot.from_dict(
        {
            "from_version": "0.1.0",
            "to_version": "0.2.0",
            "timestamp": "2026-01-01T00:00:00Z",
            "current_release_components": {"a": "1.0.0", "flag": True},
            "release_candidates": [
                {"version": "0.2.0-rc.1", "components": {"a": "0.9.0"}},
                {"components": {"a": "0.9.1"}},
                "junk",
            ],
        }
    )
    assert snap.current_release_components == {"a": "1.0.0"}
    assert [rc.version for rc in snap.release_candidates] == ["0.2.0-rc.1"]
    assert snap.third_party == {}
