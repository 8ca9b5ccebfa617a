from __future__ import annotations

from relbook.core.config import ChangelogConfig
from relbook.output.console import ConsoleProtocol, Style
from relbook.release.domain.aggregate import aggregate_changes, order_third_party
from relbook.release.domain.diff import diff_components, diff_third_party
from relbook.release.domain.models import ReleaseChangelog
from relbook.release.domain.snapshot import VersionsSnapshot
from relbook.release.domain.source import ChangelogDataSource
from relbook.release.resolve.previous import is_initial_release


def generate_changelog(
    *,
    snapshot: VersionsSnapshot,
    source: ChangelogDataSource,
    settings: ChangelogConfig,
    console: ConsoleProtocol,
) -> ReleaseChangelog:
    """Diff the snapshot and enrich every first-party change.

    Remote failures never abort: they are reported as warnings and kept in
    each record's `issues`.
    """
    initial = is_initial_release(snapshot.from_version)
    baseline = {} if initial else snapshot.previous_release_components
    if initial:
        console.info("Initial release: every component is new")

    changes = diff_components(baseline, snapshot.current_release_components)
    first_party = [c for c in changes if c.component not in settings.third_party]
    console.info(f"{len(first_party)} component change(s)")
    for c in first_party:
        console.print(f"  {c.component}: {c.old_version or '(new)'} -> {c.new_version}", Style.DIM)

    records = aggregate_changes(
        changes=first_party,
        candidate_chain=snapshot.candidate_chain(),
        source=source,
        third_party=settings.third_party,
        max_workers=settings.workers,
    )
    for rec in records:
        for issue in rec.issues:
            console.warning(f"{rec.component}: {issue}")

    previous_third_party = {} if initial else snapshot.previous_third_party
    third_party = order_third_party(diff_third_party(previous_third_party, snapshot.third_party))

    changelog = ReleaseChangelog(
        from_version=snapshot.from_version,
        to_version=snapshot.to_version,
        changes=tuple(records),
        third_party_changes=tuple(third_party),
    )
    console.success(
        f"{len(changelog.changes)} change(s), {changelog.breaking_count} breaking, "
        f"{len(changelog.third_party_changes)} third-party update(s)"
    )
    return changelog
