from __future__ import annotations

import json

from relbook.release.domain.aggregate import (
    SourceRepo,
    aggregate_changes,
    collect_contributors,
    order_third_party,
    parse_source_repo,
    version_chain,
)
from relbook.release.domain.diff import diff_components
from relbook.release.domain.models import ChangeRecord, ReleaseMetadata, ThirdPartyChangeRecord
from relbook.test.release._fakes import ORG, FakeDataSource, pr_detail


def _chain_source() -> FakeDataSource:
    """`api` moves 1.0.0 -> 1.1.0 (rc.1) -> 1.2.0 (rc.2); both windows include #42."""
    src = FakeDataSource()
    src.add_component("api", "1.0.0", "1.1.0", "1.2.0")
    src.add_window("api", "1.0.0", "1.1.0", [40, 42])
    src.add_window("api", "1.1.0", "1.2.0", [42, 43])
    src.prs[(ORG, "api", 40)] = pr_detail(40, "zoe", "## Change Log\n- Added quotas\n")
    src.prs[(ORG, "api", 42)] = pr_detail(42, "adam", "## Change Log\n- Fixed retries\n- Added quotas\n")
    src.prs[(ORG, "api", 43)] = pr_detail(43, "zoe")
    return src


CHAIN = [{"api": "1.1.0"}, {"api": "1.2.0"}]


def test_parse_source_repo() -> None:
    expected = SourceRepo("platform-mesh", "portal")
    assert parse_source_repo("https://github.com/platform-mesh/portal") == expected
    assert parse_source_repo("github.com/platform-mesh/portal.git") == expected
    assert parse_source_repo("ghcr.io/platform-mesh/portal") == expected
    assert parse_source_repo("https://gitlab.com/platform-mesh/portal") is None
    assert parse_source_repo("") is None


def test_version_chain_skips_gaps_and_repeats() -> None:
    chain = [{"api": "1.1.0"}, {"other": "9"}, {"api": "1.1.0"}, {"api": "1.2.0"}]
    assert version_chain("api", "1.0.0", "1.2.0", chain) == ["1.0.0", "1.1.0", "1.2.0"]
    assert version_chain("api", "", "1.2.0", chain) == ["1.1.0", "1.2.0"]


def test_pull_requests_are_deduplicated_across_the_chain() -> None:
    [rec] = aggregate_changes(
        changes=[ChangeRecord("api", "1.0.0", "1.2.0")], candidate_chain=CHAIN, source=_chain_source()
    )
    assert [pr.number for pr in rec.pull_requests] == [40, 42, 43]
    assert rec.changelog_fragments == ("- Added quotas", "- Fixed retries")
    assert [c.login for c in rec.contributors] == ["adam", "zoe"]
    assert rec.issues == ()


def test_no_chain_walk_when_artifact_version_is_unchanged() -> None:
    src = FakeDataSource()
    src.add_component("api", "1.0.0")
    src.artifacts[("api", "1.0.1")] = src.artifacts[("api", "1.0.0")]
    [rec] = aggregate_changes(
        changes=[ChangeRecord("api", "1.0.0", "1.0.1")], candidate_chain=[], source=src
    )
    assert rec.pull_requests == ()
    assert not any(call[0] == "pull_requests_between" for call in src.calls)


def test_missing_pull_request_detail_falls_back_to_a_link() -> None:
    src = FakeDataSource()
    src.add_component("api", "1.0.0", "1.1.0")
    src.add_window("api", "1.0.0", "1.1.0", [7])
    [rec] = aggregate_changes(
        changes=[ChangeRecord("api", "1.0.0", "1.1.0")], candidate_chain=[], source=src
    )
    [pr] = rec.pull_requests
    assert pr.number == 7
    assert pr.url == f"https://github.com/{ORG}/api/pull/7"
    assert pr.author == ""
    assert rec.contributors == ()


def test_ordering_puts_breaking_changes_first() -> None:
    src = FakeDataSource()
    src.releases[("b", "1.1.0")] = ReleaseMetadata(body="Contains a breaking change")
    changes = [
        ChangeRecord("c", "1.0.0", "1.1.0"),
        ChangeRecord("a", "1.0.0", "1.1.0"),
        ChangeRecord("b", "1.0.0", "1.1.0"),
    ]
    out = aggregate_changes(changes=changes, candidate_chain=[], source=src)
    assert [(r.component, r.is_breaking) for r in out] == [("b", True), ("a", False), ("c", False)]


def test_major_bump_seed_survives_enrichment() -> None:
    [rec] = aggregate_changes(
        changes=diff_components({"a": "1.0.0"}, {"a": "2.0.0"}),
        candidate_chain=[],
        source=FakeDataSource(),
    )
    assert rec.is_breaking


def test_new_component_is_not_breaking_without_keyword() -> None:
    [rec] = aggregate_changes(
        changes=diff_components({}, {"fresh": "3.0.0"}), candidate_chain=[], source=FakeDataSource()
    )
    assert rec.old_version == ""
    assert rec.is_breaking is False


def test_third_party_and_unchanged_components_are_skipped() -> None:
    src = FakeDataSource()
    out = aggregate_changes(
        changes=[
            ChangeRecord("traefik", "35.0.0", "36.0.0"),
            ChangeRecord("same", "1.0.0", "1.0.0"),
            ChangeRecord("api", "1.0.0", "1.1.0"),
        ],
        candidate_chain=[],
        source=src,
        third_party={"traefik"},
    )
    assert [r.component for r in out] == ["api"]
    assert all(call[1] == "api" for call in src.calls)


def test_one_failing_component_does_not_abort_the_others() -> None:
    src = _chain_source()
    src.failing.add("broken")
    out = aggregate_changes(
        changes=[ChangeRecord("broken", "0.1.0", "0.2.0"), ChangeRecord("api", "1.0.0", "1.2.0")],
        candidate_chain=CHAIN,
        source=src,
    )
    by_name = {r.component: r for r in out}
    broken = by_name["broken"]
    assert broken.old_version == "0.1.0"
    assert broken.new_version == "0.2.0"
    assert broken.pull_requests == ()
    assert broken.issues
    assert "registry unavailable" in broken.issues[0]
    assert [pr.number for pr in by_name["api"].pull_requests] == [40, 42, 43]


def test_aggregation_is_idempotent() -> None:
    changes = [ChangeRecord("api", "1.0.0", "1.2.0"), ChangeRecord("new", "", "0.1.0")]

    def run() -> str:
        out = aggregate_changes(changes=changes, candidate_chain=CHAIN, source=_chain_source())
        return json.dumps([r.to_dict() for r in out], sort_keys=True)

    assert run() == run()


def test_parallel_enrichment_matches_sequential() -> None:
    changes = [ChangeRecord(f"c{i}", "1.0.0", "1.1.0") for i in range(8)]
    changes.append(ChangeRecord("api", "1.0.0", "1.2.0"))

    sequential = aggregate_changes(changes=changes, candidate_chain=CHAIN, source=_chain_source())
    parallel = aggregate_changes(
        changes=changes, candidate_chain=CHAIN, source=_chain_source(), max_workers=4
    )
    assert parallel == sequential


def test_collect_contributors_is_unique_and_sorted() -> None:
    out = aggregate_changes(
        changes=[ChangeRecord("api", "1.0.0", "1.2.0")], candidate_chain=CHAIN, source=_chain_source()
    )
    assert [c.login for c in collect_contributors(out)] == ["adam", "zoe"]


def test_order_third_party_by_name() -> None:
    records = [ThirdPartyChangeRecord("b", "1", "2"), ThirdPartyChangeRecord("a", "", "1")]
    assert [r.name for r in order_third_party(records)] == ["a", "b"]
