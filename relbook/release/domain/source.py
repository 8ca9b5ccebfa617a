"""Data the aggregator needs from the outside world.

Implementations own networking, auth and retries. Absent data is `None` or
an empty list; raising is tolerated (the aggregator records the failure on
the affected component) but not expected.
"""

from __future__ import annotations

from typing import Protocol

from relbook.release.domain.models import ArtifactDetails, PullRequestDetail, ReleaseMetadata


class ChangelogDataSource(Protocol):
    def release_notes(self, component: str, version: str) -> ReleaseMetadata | None: ...

    def artifact_details(self, component: str, version: str) -> ArtifactDetails | None: ...

    def pull_requests_between(
        self, org: str, repo: str, old_artifact_version: str, new_artifact_version: str
    ) -> list[int]: ...

    def pull_request_detail(self, org: str, repo: str, number: int) -> PullRequestDetail | None: ...
