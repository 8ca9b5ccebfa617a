from __future__ import annotations

from pathlib import Path

from relbook.core.config import RegistryConfig
from relbook.core.result import Err
from relbook.release.domain.models import ArtifactDetails, PullRequestDetail, ReleaseMetadata
from relbook.release.errors import ReleaseError
from relbook.release.infra import gh, ocm


class SourceFetchError(RuntimeError):
    """A remote read failed (as opposed to the data simply not existing)."""

    def __init__(self, error: ReleaseError) -> None:
        super().__init__(error.pretty())
        self.error = error


class RegistryDataSource:
    """Changelog data from GitHub (`gh`) and the OCM registry (`ocm`).

    Missing data comes back as None / []; failed reads raise
    `SourceFetchError`, which the aggregator records on the component.
    """

    def __init__(self, *, cwd: Path, registry: RegistryConfig) -> None:
        self._cwd = cwd
        self._registry = registry

    def release_notes(self, component: str, version: str) -> ReleaseMetadata | None:
        r = gh.get_release(cwd=self._cwd, repo=f"{self._registry.org}/{component}", version=version)
        if isinstance(r, Err):
            raise SourceFetchError(r.error)
        return r.value

    def artifact_details(self, component: str, version: str) -> ArtifactDetails | None:
        r = ocm.get_descriptor(cwd=self._cwd, registry=self._registry, component=component, version=version)
        if isinstance(r, Err):
            raise SourceFetchError(r.error)
        if r.value is None:
            return None
        descriptor, raw = r.value
        return ocm.artifact_details(descriptor, raw=raw)

    def pull_requests_between(
        self, org: str, repo: str, old_artifact_version: str, new_artifact_version: str
    ) -> list[int]:
        r = gh.compare_pull_numbers(
            cwd=self._cwd,
            repo=f"{org}/{repo}",
            base=old_artifact_version,
            head=new_artifact_version,
        )
        if isinstance(r, Err):
            raise SourceFetchError(r.error)
        return r.value

    def pull_request_detail(self, org: str, repo: str, number: int) -> PullRequestDetail | None:
        r = gh.get_pull_request(cwd=self._cwd, repo=f"{org}/{repo}", number=number)
        if isinstance(r, Err):
            raise SourceFetchError(r.error)
        return r.value
