"""Changelog aggregation across a chain of release candidates.

A component may move several times between two stable releases
(`1.2.0 -> 1.3.0` in rc.1, `-> 1.3.1` in rc.2, `-> 1.4.0` in rc.3). Each
hop is a window of merged pull requests in the component's source repo.
Windows can overlap when a candidate is re-cut, so PRs are folded into one
ordered set keyed by PR number.

Each component is enriched independently; data-source failures are recorded
on that component (`ChangeRecord.issues`) and never abort the others.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Collection, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from typing import TypeVar

from relbook.release.domain.changelog import (
    extract_changelog_fragments,
    mentions_breaking_change,
    merge_unique,
)
from relbook.release.domain.models import (
    ArtifactDetails,
    ChangeRecord,
    ComponentVersionMap,
    Contributor,
    PRRef,
    ReleaseMetadata,
    ThirdPartyChangeRecord,
)
from relbook.release.domain.source import ChangelogDataSource

T = TypeVar("T")

_REPO_URL_RE = re.compile(
    r"^(?:https?://)?(?:www\.)?(?:github\.com|ghcr\.io)/([^/\s]+)/([^/\s]+?)(?:\.git)?/?$"
)


@dataclass(frozen=True, slots=True, order=True)
class SourceRepo:
    org: str
    repo: str


def parse_source_repo(url: str) -> SourceRepo | None:
    """`https://github.com/org/repo`, `github.com/org/repo` or `ghcr.io/org/repo`."""
    m = _REPO_URL_RE.match(url.strip())
    if m is None:
        return None
    return SourceRepo(org=m.group(1), repo=m.group(2))


def version_chain(
    component: str,
    old_version: str,
    new_version: str,
    candidate_chain: Sequence[ComponentVersionMap],
) -> list[str]:
    """Successive distinct versions of `component` from old, through each candidate, to new.

    Candidates that do not pin the component are skipped.
    """
    steps = [old_version, *(snapshot.get(component, "") for snapshot in candidate_chain), new_version]
    out: list[str] = []
    for v in steps:
        if not v or (out and out[-1] == v):
            continue
        out.append(v)
    return out


@dataclass(slots=True)
class _PullRequestFold:
    """Ordered set of PR numbers, first-seen wins."""

    numbers: list[int] = field(default_factory=list)
    repos: dict[int, SourceRepo] = field(default_factory=dict)

    def add(self, repo: SourceRepo, numbers: Iterable[int]) -> None:
        for n in numbers:
            if n in self.repos:
                continue
            self.repos[n] = repo
            self.numbers.append(n)


@dataclass(slots=True)
class _Enrichment:
    """Per-component scratch state: caches and recorded failures."""

    record: ChangeRecord
    source: ChangelogDataSource
    issues: list[str] = field(default_factory=list)
    artifacts: dict[str, ArtifactDetails | None] = field(default_factory=dict)

    def guarded(self, what: str, call: Callable[[], T], default: T) -> T:
        try:
            return call()
        except Exception as e:  # noqa: BLE001 - any source failure degrades to the default
            self.issues.append(f"{what}: {e}")
            return default

    def artifact(self, version: str) -> ArtifactDetails | None:
        if version not in self.artifacts:
            self.artifacts[version] = self.guarded(
                f"artifact details {self.record.component}@{version}",
                lambda: self.source.artifact_details(self.record.component, version),
                None,
            )
        return self.artifacts[version]


def _walk_candidate_chain(
    e: _Enrichment, candidate_chain: Sequence[ComponentVersionMap]
) -> _PullRequestFold:
    rec = e.record
    fold = _PullRequestFold()
    chain = version_chain(rec.component, rec.old_version, rec.new_version, candidate_chain)

    for older, newer in zip(chain, chain[1:]):
        old_art = e.artifact(older)
        new_art = e.artifact(newer)
        if old_art is None or new_art is None:
            continue
        if not old_art.artifact_version or not new_art.artifact_version:
            continue
        if old_art.artifact_version == new_art.artifact_version:
            continue

        repo = parse_source_repo(new_art.source_repo_url) or parse_source_repo(old_art.source_repo_url)
        if repo is None:
            continue

        numbers = e.guarded(
            f"pull requests {repo.org}/{repo.repo} "
            f"{old_art.artifact_version}...{new_art.artifact_version}",
            lambda: e.source.pull_requests_between(
                repo.org, repo.repo, old_art.artifact_version, new_art.artifact_version
            ),
            [],
        )
        fold.add(repo, numbers)

    return fold


def _resolve_pull_requests(
    e: _Enrichment, fold: _PullRequestFold
) -> tuple[list[PRRef], list[list[str]]]:
    prs: list[PRRef] = []
    fragments: list[list[str]] = []
    for number in fold.numbers:
        repo = fold.repos[number]
        detail = e.guarded(
            f"pull request {repo.org}/{repo.repo}#{number}",
            lambda: e.source.pull_request_detail(repo.org, repo.repo, number),
            None,
        )
        if detail is None:
            prs.append(
                PRRef(
                    number=number,
                    title="",
                    url=f"https://github.com/{repo.org}/{repo.repo}/pull/{number}",
                    author="",
                    author_profile_url="",
                    avatar_url="",
                )
            )
            continue

        prs.append(
            PRRef(
                number=number,
                title=detail.title,
                url=detail.url,
                author=detail.author,
                author_profile_url=detail.author_url,
                avatar_url=detail.avatar_url,
            )
        )
        fragments.append(extract_changelog_fragments(detail.body))
    return prs, fragments


def contributors_of(prs: Iterable[PRRef]) -> list[Contributor]:
    """Unique PR authors sorted by login; the first PR seen supplies the URLs."""
    by_login: dict[str, Contributor] = {}
    for pr in prs:
        if not pr.author or pr.author in by_login:
            continue
        by_login[pr.author] = Contributor(
            login=pr.author, profile_url=pr.author_profile_url, avatar_url=pr.avatar_url
        )
    return [by_login[login] for login in sorted(by_login)]


def collect_contributors(records: Iterable[ChangeRecord]) -> list[Contributor]:
    """Contributors across a whole release."""
    return contributors_of(pr for rec in records for pr in rec.pull_requests)


def enrich_change(
    record: ChangeRecord,
    *,
    candidate_chain: Sequence[ComponentVersionMap],
    source: ChangelogDataSource,
) -> ChangeRecord:
    """Attach release metadata, PRs, fragments and contributors to one change."""
    e = _Enrichment(record=record, source=source)

    release = e.guarded(
        f"release notes {record.component}@{record.new_version}",
        lambda: source.release_notes(record.component, record.new_version),
        None,
    ) or ReleaseMetadata()

    new_art = e.artifact(record.new_version)
    old_art = e.artifact(record.old_version) if record.old_version else None

    unchanged = (
        old_art is not None
        and new_art is not None
        and old_art.artifact_version == new_art.artifact_version
    )
    fold = _PullRequestFold() if unchanged else _walk_candidate_chain(e, candidate_chain)
    prs, fragment_groups = _resolve_pull_requests(e, fold)

    return replace(
        record,
        is_breaking=record.is_breaking or mentions_breaking_change(release.body),
        release=release,
        artifact=new_art,
        pull_requests=tuple(prs),
        changelog_fragments=tuple(merge_unique(fragment_groups)),
        contributors=tuple(contributors_of(prs)),
        issues=tuple(e.issues),
    )


def order_changes(records: Iterable[ChangeRecord]) -> list[ChangeRecord]:
    """Breaking changes first, then by component name."""
    return sorted(records, key=lambda r: (0 if r.is_breaking else 1, r.component))


def order_third_party(records: Iterable[ThirdPartyChangeRecord]) -> list[ThirdPartyChangeRecord]:
    return sorted(records, key=lambda r: r.name)


def aggregate_changes(
    *,
    changes: Iterable[ChangeRecord],
    candidate_chain: Sequence[ComponentVersionMap],
    source: ChangelogDataSource,
    third_party: Collection[str] = frozenset(),
    max_workers: int = 1,
) -> list[ChangeRecord]:
    """Enrich every first-party change and return them in release-note order.

    Args:
        changes: Output of `diff_components`.
        candidate_chain: Component maps of the release candidates between
            the baseline and the target, oldest first.
        source: Remote data, see `ChangelogDataSource`.
        third_party: Component names excluded from enrichment and output.
        max_workers: Components enriched concurrently; 1 runs inline.
    """
    todo = [
        c for c in changes if c.old_version != c.new_version and c.component not in third_party
    ]

    def enrich(record: ChangeRecord) -> ChangeRecord:
        return enrich_change(record, candidate_chain=candidate_chain, source=source)

    if max_workers > 1 and len(todo) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            enriched = list(pool.map(enrich, todo))
    else:
        enriched = [enrich(c) for c in todo]

    return order_changes(enriched)
