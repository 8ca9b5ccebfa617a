from __future__ import annotations

from relbook.core.config import RegistryConfig
from relbook.release.domain.models import (
    ArtifactDetails,
    ArtifactResource,
    ChangeRecord,
    PRRef,
    ReleaseCandidate,
    ReleaseChangelog,
    ReleaseMetadata,
    ThirdPartyChangeRecord,
)
from relbook.release.domain.snapshot import VersionsSnapshot
from relbook.release.view.notes import render_release_notes

TITLE = "Platform Mesh OCM Component"


def _pr(number: int, author: str) -> PRRef:
    return PRRef(
        number=number,
        title=f"Change {number}",
        url=f"https://github.com/platform-mesh/api/pull/{number}",
        author=author,
        author_profile_url=f"https://github.com/{author}",
        avatar_url=f"https://avatars.example/{author}",
    )


API = ChangeRecord(
    component="api",
    old_version="1.0.0",
    new_version="2.0.0",
    is_breaking=True,
    release=ReleaseMetadata(url="https://github.com/platform-mesh/api/releases/tag/v2.0.0"),
    artifact=ArtifactDetails(
        artifact_version="v2.0.0",
        source_repo_url="https://github.com/platform-mesh/api",
        resources=(
            ArtifactResource("chart", "helmChart", "2.0.0", "ghcr.io/platform-mesh/charts/api:2.0.0"),
            ArtifactResource("image", "ociImage", "v2.0.0", "ghcr.io/platform-mesh/api:v2.0.0"),
        ),
    ),
    pull_requests=(_pr(11, "zoe"), _pr(12, "adam")),
    changelog_fragments=("- Removed v1 endpoints", "Renamed flags"),
)

PORTAL = ChangeRecord(component="portal", old_version="", new_version="0.3.0")

SNAPSHOT = VersionsSnapshot(
    from_version="0.1.0",
    to_version="0.2.0",
    timestamp="2026-10-19T08:30:00Z",
    current_release_components={"portal": "0.3.0", "api": "2.0.0"},
    third_party={"TRAEFIK_VERSION": "36.3.0", "CERT_MANAGER_VERSION": "1.18.2"},
    release_candidates=(
        ReleaseCandidate("0.2.0-rc.1", {"api": "1.5.0"}),
        ReleaseCandidate("0.2.0-rc.2", {"api": "2.0.0", "portal": "0.3.0"}),
    ),
)

CHANGELOG = ReleaseChangelog(
    from_version="0.1.0",
    to_version="0.2.0",
    changes=(API, PORTAL),
    third_party_changes=(ThirdPartyChangeRecord("TRAEFIK_VERSION", "35.0.0", "36.3.0"),),
)


def _render(snapshot: VersionsSnapshot = SNAPSHOT, changelog: ReleaseChangelog = CHANGELOG) -> str:
    return render_release_notes(
        version="0.2.0",
        title=TITLE,
        snapshot=snapshot,
        changelog=changelog,
        registry=RegistryConfig(),
    )


def test_header_intro_and_summary() -> None:
    text = _render()
    assert text.startswith(f"# {TITLE} 0.2.0\n")
    assert "aggregates changes from 2 release candidate(s): 0.2.0-rc.1 0.2.0-rc.2." in text
    assert "This release includes 2 component update(s), including 1 with breaking changes 🔥." in text
    assert "## Component Changes Across Release Candidates" in text


def test_component_sections() -> None:
    text = _render()
    assert "#### api: 1.0.0 → 2.0.0 🔥" in text
    assert "#### portal: (new) → 0.3.0\n" in text
    assert "| 📦 Helm Chart | `2.0.0` | [Package](https://ghcr.io/platform-mesh/charts/api:2.0.0) |" in text
    assert (
        "[Release](https://github.com/platform-mesh/api/releases/tag/v2.0.0)" in text
    )
    assert "- Removed v1 endpoints\n- Renamed flags\n" in text
    assert "<summary>All Pull Requests (2)</summary>" in text
    assert (
        "- [#11](https://github.com/platform-mesh/api/pull/11): Change 11 "
        "by [@zoe](https://github.com/zoe)" in text
    )
    assert text.index("#### api") < text.index("#### portal")


def test_private_chart_repo_is_not_linked() -> None:
    private = ArtifactDetails(
        artifact_version="v1.0.0",
        source_repo_url="https://github.com/platform-mesh/helm-charts-priv",
        resources=(ArtifactResource("image", "ociImage", "v1.0.0", "ghcr.io/platform-mesh/x:v1.0.0"),),
    )
    change = ChangeRecord("x", "0.9.0", "1.0.0", artifact=private)
    changelog = ReleaseChangelog("0.1.0", "0.2.0", (change,), ())
    text = _render(changelog=changelog)
    assert "| 🐳 Container Image | `v1.0.0` | [Package](https://ghcr.io/platform-mesh/x:v1.0.0) |" in text
    assert "[Release]" not in text


def test_descriptor_is_embedded_as_yaml() -> None:
    raw = "component:\n  name: github.com/platform-mesh/x\n  version: 1.0.0\n"
    change = ChangeRecord(
        "x", "0.9.0", "1.0.0", artifact=ArtifactDetails(artifact_version="v1.0.0", raw_descriptor=raw)
    )
    text = _render(changelog=ReleaseChangelog("0.1.0", "0.2.0", (change,), ()))
    assert (
        "<summary>OCM Component Descriptor (click to expand)</summary>\n\n"
        "```yaml\n"
        "component:\n  name: github.com/platform-mesh/x\n  version: 1.0.0\n"
        "```\n\n</details>\n"
    ) in text


def test_descriptor_block_needs_a_descriptor() -> None:
    assert "OCM Component Descriptor" not in _render()


def test_contributors() -> None:
    text = _render()
    assert "_2 contributor(s)_" in text
    assert text.index('alt="adam"') < text.index('alt="zoe"')

    empty = _render(changelog=ReleaseChangelog("0.1.0", "0.2.0", (PORTAL,), ()))
    assert "_No contributors found_" in empty


def test_third_party_section() -> None:
    text = _render()
    assert (
        "- **Cert Manager** 1.18.2 - [Release Notes]"
        "(https://github.com/cert-manager/cert-manager/releases/tag/1.18.2)\n" in text
    )
    assert (
        "- **Traefik** 36.3.0 - [Release Notes]"
        "(https://github.com/traefik/traefik-helm-chart/releases/tag/v36.3.0) (updated from 35.0.0)"
        in text
    )
    assert text.index("Cert Manager") < text.index("Traefik")


def test_manifest_and_installation() -> None:
    text = _render()
    assert "| api | 2.0.0 |\n| portal | 0.3.0 |" in text
    assert (
        "ocm get component github.com/platform-mesh/platform-mesh:0.2.0 --repo ghcr.io/platform-mesh"
        in text
    )
    assert text.endswith("```\n")


def test_manifest_falls_back_to_last_candidate() -> None:
    snapshot = VersionsSnapshot(
        from_version="0.1.0",
        to_version="0.2.0",
        timestamp="",
        release_candidates=(ReleaseCandidate("0.2.0-rc.1", {"ui": "4.0.0"}),),
    )
    text = _render(snapshot=snapshot, changelog=ReleaseChangelog("0.1.0", "0.2.0", (), ()))
    assert "| ui | 4.0.0 |" in text
    assert "## Summary" not in text
    assert "## Component Changes" not in text
