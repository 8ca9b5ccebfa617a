"""Markdown release notes for the product release."""

from __future__ import annotations

from relbook.core.config import RegistryConfig
from relbook.release.config import (
    GETTING_STARTED_URL,
    PRIVATE_CHART_REPO_MARKER,
    THIRD_PARTY_LINKS,
)
from relbook.release.domain.aggregate import collect_contributors
from relbook.release.domain.models import (
    ChangeRecord,
    Contributor,
    ReleaseChangelog,
    ThirdPartyChangeRecord,
)
from relbook.release.domain.snapshot import VersionsSnapshot

BREAKING_MARKER = "🔥"
_AVATAR_STYLE = "border-radius: 50%; margin: 5px;"


def _intro(*, product_title: str, snapshot: VersionsSnapshot) -> list[str]:
    rcs = [rc.version for rc in snapshot.release_candidates]
    if rcs:
        return [
            f"This release of the {product_title} aggregates changes from "
            f"{len(rcs)} release candidate(s): {' '.join(rcs)}.",
            "",
        ]
    return [f"This release of the {product_title} includes updates to multiple components.", ""]


def _summary(changelog: ReleaseChangelog) -> list[str]:
    if not changelog.changes:
        return []
    line = f"This release includes {len(changelog.changes)} component update(s)"
    if changelog.breaking_count:
        line += f", including {changelog.breaking_count} with breaking changes {BREAKING_MARKER}"
    return ["## Summary", "", line + ".", ""]


def _avatar(c: Contributor) -> str:
    return (
        f'<a href="{c.profile_url}"><img src="{c.avatar_url}" width="50" height="50" '
        f'alt="{c.login}" title="{c.login}" style="{_AVATAR_STYLE}"></a>'
    )


def _contributors(changelog: ReleaseChangelog) -> list[str]:
    lines = [
        "## Contributors",
        "",
        "Thank you to all the contributors who made this release possible:",
        "",
    ]
    contributors = collect_contributors(changelog.changes)
    if not contributors:
        return [*lines, "_No contributors found_", ""]

    # Contributors without a profile or avatar are counted but not pictured.
    lines.append("<div>")
    lines.append("")
    lines.extend(_avatar(c) for c in contributors if c.profile_url and c.avatar_url)
    lines.append("")
    lines.append("</div>")
    lines.append("")
    lines.append(f"_{len(contributors)} contributor(s)_")
    lines.append("")
    return lines


def _resource_rows(change: ChangeRecord) -> list[str]:
    artifact = change.artifact
    if artifact is None:
        return []

    rows: list[str] = []
    chart = artifact.resource("helmChart")
    if chart is not None and chart.reference:
        rows.append(f"| 📦 Helm Chart | `{chart.version}` | [Package](https://{chart.reference}) |")

    image = artifact.resource("ociImage")
    if image is not None and image.reference:
        links = f"[Package](https://{image.reference})"
        repo = artifact.source_repo_url
        if (
            repo.startswith("https://github.com/")
            and artifact.artifact_version
            and PRIVATE_CHART_REPO_MARKER not in repo
        ):
            links += f" • [Release]({repo}/releases/tag/{artifact.artifact_version})"
        rows.append(f"| 🐳 Container Image | `{image.version}` | {links} |")

    if not rows:
        return []
    return ["| Resource | Version | Links |", "|----------|---------|-------|", *rows, ""]


def _pull_request_line(number: int, title: str, url: str, author: str, author_url: str) -> str:
    line = f"- [#{number}]({url}): {title}"
    if author and author_url:
        line += f" by [@{author}]({author_url})"
    return line


def _change_section(change: ChangeRecord) -> list[str]:
    old = change.old_version or "(new)"
    heading = f"#### {change.component}: {old} → {change.new_version}"
    if change.is_breaking:
        heading += f" {BREAKING_MARKER}"

    lines = [heading, ""]
    lines.extend(_resource_rows(change))

    if change.changelog_fragments:
        lines.append("**Key Changes:**")
        lines.append("")
        for item in change.changelog_fragments:
            lines.append(item if item.startswith(("-", "*", "+")) else f"- {item}")
        lines.append("")

    if change.pull_requests:
        lines.append("<details>")
        lines.append(f"<summary>All Pull Requests ({len(change.pull_requests)})</summary>")
        lines.append("")
        for pr in change.pull_requests:
            lines.append(
                _pull_request_line(pr.number, pr.title, pr.url, pr.author, pr.author_profile_url)
            )
        lines.append("")
        lines.append("</details>")
        lines.append("")

    if change.release.url:
        lines.append(f"[Release notes]({change.release.url})")
        lines.append("")

    lines.extend(_descriptor_block(change))
    return lines


def _descriptor_block(change: ChangeRecord) -> list[str]:
    raw = change.artifact.raw_descriptor.strip() if change.artifact is not None else ""
    if not raw:
        return []
    return [
        "<details>",
        "<summary>OCM Component Descriptor (click to expand)</summary>",
        "",
        "```yaml",
        raw,
        "```",
        "",
        "</details>",
        "",
    ]


def _components(*, changelog: ReleaseChangelog, snapshot: VersionsSnapshot) -> list[str]:
    if not changelog.changes:
        return []
    heading = "## Component Changes"
    if snapshot.release_candidates:
        heading += " Across Release Candidates"

    lines = [heading, "", "### Components", ""]
    for change in changelog.changes:
        lines.extend(_change_section(change))
    return lines


def _third_party(
    *, third_party: dict[str, str], changes: tuple[ThirdPartyChangeRecord, ...]
) -> list[str]:
    previous = {c.name: c.old_version for c in changes}
    entries: list[str] = []
    for link in sorted(THIRD_PARTY_LINKS, key=lambda tp: tp.display_name.lower()):
        version = third_party.get(link.env_var, "")
        if not version:
            continue
        entry = f"- **{link.display_name}** {version} - [Release Notes]({link.release_url(version)})"
        old = previous.get(link.env_var)
        if old:
            entry += f" (updated from {old})"
        entries.append(entry)

    if not entries:
        return []
    return [
        "### Third-Party Components",
        "",
        "The following third-party components are included in this release:",
        "",
        *entries,
        "",
    ]


def _manifest(snapshot: VersionsSnapshot) -> list[str]:
    lines = [
        "## All Component Versions",
        "",
        "<details>",
        "<summary>Complete version manifest (click to expand)</summary>",
        "",
        "| Component | Version |",
        "|-----------|---------|",
    ]
    for name, version in sorted(snapshot.manifest().items()):
        lines.append(f"| {name} | {version} |")
    lines.append("")
    lines.append("</details>")
    lines.append("")
    return lines


def _installation(*, version: str, registry: RegistryConfig) -> list[str]:
    return [
        "## Installation",
        "",
        f"For installation instructions, see the [Getting Started Guide]({GETTING_STARTED_URL}).",
        "",
        "To fetch the component using OCM CLI:",
        "",
        "```bash",
        f"ocm get component {registry.component_name(registry.product)}:{version} "
        f"--repo {registry.repository}",
        "```",
    ]


def render_release_notes(
    *,
    version: str,
    title: str,
    snapshot: VersionsSnapshot,
    changelog: ReleaseChangelog,
    registry: RegistryConfig,
) -> str:
    """Release notes for `version` from the fetched snapshot and the aggregated changelog."""
    lines: list[str] = [f"# {title} {version}", ""]
    lines.extend(_intro(product_title=title, snapshot=snapshot))
    lines.extend(_summary(changelog))
    lines.extend(_contributors(changelog))
    lines.extend(_components(changelog=changelog, snapshot=snapshot))
    lines.extend(
        _third_party(third_party=snapshot.third_party, changes=changelog.third_party_changes)
    )
    lines.extend(_manifest(snapshot))
    lines.extend(_installation(version=version, registry=registry))
    return "\n".join(lines).rstrip() + "\n"
