"""Snapshot the component versions a release is made of."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

from relbook.core.config import Config
from relbook.core.result import Err, Ok, Result
from relbook.output.console import ConsoleProtocol, Style
from relbook.release.domain.models import ReleaseCandidate
from relbook.release.domain.snapshot import VersionsSnapshot
from relbook.release.domain.version import InvalidVersionError, try_parse_version
from relbook.release.errors import ReleaseError
from relbook.release.infra import gh, ocm
from relbook.release.infra.workflow import read_workflow_env, read_workflow_env_at_tag
from relbook.release.resolve.candidates import select_candidates
from relbook.release.resolve.previous import NO_RELEASE, find_previous_release, is_initial_release


def _timestamp(now: datetime | None) -> str:
    return (now or datetime.now(UTC)).strftime("%Y-%m-%dT%H:%M:%SZ")


def _product_refs(
    *, cwd: Path, config: Config, version: str
) -> Result[dict[str, str] | None, ReleaseError]:
    """Component references of the product at `version`, also trying the `v` prefix."""
    tried = [version]
    if not version.startswith("v"):
        tried.append(f"v{version}")

    for v in tried:
        desc = ocm.get_descriptor(
            cwd=cwd, registry=config.registry, component=config.registry.product, version=v
        )
        if isinstance(desc, Err):
            return desc
        if desc.value is not None:
            descriptor, _raw = desc.value
            return Ok(ocm.component_references(descriptor))
    return Ok(None)


def _candidates_up_to(target: str, versions: list[str]) -> list[str]:
    picked = select_candidates(target, versions)
    t = try_parse_version(target)
    if t is None or t.pre is None or t.pre.kind != "rc":
        return picked
    limit = t.pre.number
    out: list[str] = []
    for raw in picked:
        v = try_parse_version(raw)
        if v is not None and v.pre is not None and v.pre.number <= limit:
            out.append(raw)
    return out


def _release_candidates(
    *, cwd: Path, config: Config, console: ConsoleProtocol, target: str
) -> Result[tuple[ReleaseCandidate, ...], ReleaseError]:
    versions = ocm.list_component_versions(
        cwd=cwd, registry=config.registry, component=config.registry.product
    )
    if isinstance(versions, Err):
        return versions

    out: list[ReleaseCandidate] = []
    for rc in _candidates_up_to(target, versions.value):
        refs = _product_refs(cwd=cwd, config=config, version=rc)
        if isinstance(refs, Err):
            return refs
        if refs.value is None:
            console.warning(f"{rc}: listed but descriptor not found; skipping")
            continue
        console.print(f"  {rc}: {len(refs.value)} component(s)", Style.DIM)
        out.append(ReleaseCandidate(version=rc, components=refs.value))
    return Ok(tuple(out))


def resolve_from_version(
    *, cwd: Path, config: Config, to_version: str
) -> Result[str, ReleaseError]:
    """Previous stable release of the product repo, or `0.0.0` for the first one."""
    releases = gh.list_releases(cwd=cwd, repo=config.github.release_repo)
    if isinstance(releases, Err):
        return releases
    try:
        previous = find_previous_release(to_version, releases.value)
    except InvalidVersionError as e:
        return Err(ReleaseError(kind="invalid_version", message=str(e)))
    return Ok(previous or NO_RELEASE)


def fetch_versions(
    *,
    cwd: Path,
    config: Config,
    console: ConsoleProtocol,
    from_version: str,
    to_version: str,
    now: datetime | None = None,
) -> Result[VersionsSnapshot, ReleaseError]:
    """Registry and workflow state for `from_version -> to_version`.

    When `to_version` itself is not in the registry (a final release that
    has not been published yet) the latest release candidate stands in.
    """
    ok = ocm.ensure_ocm_available()
    if isinstance(ok, Err):
        return ok

    console.info(f"Fetching versions: {from_version or NO_RELEASE} -> {to_version}")

    current = _product_refs(cwd=cwd, config=config, version=to_version)
    if isinstance(current, Err):
        return current

    candidates = _release_candidates(cwd=cwd, config=config, console=console, target=to_version)
    if isinstance(candidates, Err):
        return candidates

    current_components = current.value
    if current_components is None:
        if not candidates.value:
            return Err(
                ReleaseError(
                    kind="not_found",
                    message=f"{config.registry.product}:{to_version} not found in registry",
                    hint="Publish a release candidate first, or check the version.",
                )
            )
        latest = candidates.value[-1]
        console.warning(f"{to_version} not in registry; using latest release candidate {latest.version}")
        current_components = dict(latest.components)

    initial = is_initial_release(from_version)
    previous_components: dict[str, str] = {}
    if not initial:
        previous = _product_refs(cwd=cwd, config=config, version=from_version)
        if isinstance(previous, Err):
            return previous
        if previous.value is None:
            console.warning(f"{from_version} not found in registry; treating every component as new")
        else:
            previous_components = previous.value

    workflow_file = config.github.workflow_file
    third_party = read_workflow_env(cwd / workflow_file)
    if isinstance(third_party, Err):
        return third_party

    previous_third_party: dict[str, str] = {}
    if not initial:
        prev_tp = read_workflow_env_at_tag(cwd=cwd, workflow_file=workflow_file, version=from_version)
        if isinstance(prev_tp, Err):
            return prev_tp
        previous_third_party = prev_tp.value

    console.success(
        f"{len(current_components)} component(s), {len(candidates.value)} release candidate(s), "
        f"{len(third_party.value)} third-party pin(s)"
    )
    return Ok(
        VersionsSnapshot(
            from_version=from_version or NO_RELEASE,
            to_version=to_version,
            timestamp=_timestamp(now),
            current_release_components=current_components,
            previous_release_components=previous_components,
            third_party=third_party.value,
            previous_third_party=previous_third_party,
            release_candidates=candidates.value,
        )
    )
