"""OCM registry reads through the `ocm` CLI.

Component descriptors look like:

    component:
      name: github.com/platform-mesh/account-operator
      version: 0.4.2
      componentReferences:
        - name: account-operator
          version: 0.4.2
      resources:
        - name: chart
          type: helmChart
          version: 0.4.2
          access: {imageReference: ghcr.io/platform-mesh/helm-charts/account-operator:0.4.2}
      sources:
        - name: source
          version: v0.4.1
          access: {repoUrl: https://github.com/platform-mesh/account-operator, commit: ...}
"""

from __future__ import annotations

import json
from pathlib import Path

import yaml

from relbook.core.config import RegistryConfig
from relbook.core.result import Err, Ok, Result
from relbook.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_table
from relbook.platform.process import which
from relbook.release.domain.models import ArtifactDetails, ArtifactResource
from relbook.release.errors import ReleaseError
from relbook.release.infra.reads import is_not_found, run_read, to_release_error
from relbook.release.timeouts import OCM_TIMEOUT_SECONDS

_IMAGE_SOURCE = "source"
_CHART_SOURCE = "chart"


def ensure_ocm_available() -> Result[None, ReleaseError]:
    if not which("ocm"):
        return Err(
            ReleaseError(
                kind="ocm_missing",
                message="ocm: missing",
                hint="Install from: https://github.com/open-component-model/ocm/releases",
            )
        )
    return Ok(None)


def _descriptor_root(obj: object) -> StrDict | None:
    # `ocm get component -o yaml` prints either the descriptor or an item list.
    data = as_str_dict(obj)
    if data is None:
        return None
    items = as_obj_list(data.get("items"))
    if items:
        data = as_str_dict(items[0])
        if data is None:
            return None
    return get_table(data, "component")


def get_descriptor(
    *, cwd: Path, registry: RegistryConfig, component: str, version: str
) -> Result[tuple[StrDict, str] | None, ReleaseError]:
    """Parsed `component` table plus the raw YAML, or None if the version does not exist."""
    ref = f"{registry.component_name(component)}:{version}"
    result = run_read(
        cwd=cwd,
        cmd=["ocm", "get", "component", ref, "--repo", registry.repository, "-o", "yaml"],
        timeout=OCM_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        if is_not_found(result.error):
            return Ok(None)
        return Err(
            to_release_error(result.error, kind="registry_failed", message=f"ocm get component failed: {ref}")
        )

    raw = result.value
    if not raw.strip():
        return Ok(None)

    try:
        obj: object = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        return Err(ReleaseError(kind="registry_failed", message=f"invalid descriptor YAML: {e}", hint=ref))

    root = _descriptor_root(obj)
    if root is None:
        return Ok(None)
    return Ok((root, raw))


def component_references(descriptor: StrDict) -> dict[str, str]:
    out: dict[str, str] = {}
    for item in as_obj_list(descriptor.get("componentReferences")) or []:
        d = as_str_dict(item)
        if d is None:
            continue
        name = get_str(d, "name")
        version = get_str(d, "version")
        if name is not None and version is not None:
            out[name] = version
    return out


def _source_repo(access: StrDict) -> str:
    url = get_str(access, "repoUrl") or ""
    if url.startswith("ghcr.io/"):
        return "https://github.com/" + url.removeprefix("ghcr.io/")
    return url


def artifact_details(descriptor: StrDict, *, raw: str = "") -> ArtifactDetails | None:
    """Resources plus the source release a component version was built from.

    The image source (`sources[name=source]`) defines the artifact version;
    descriptors without one fall back to the container image version.
    `raw` is the descriptor YAML as printed by ocm, kept for the release notes.
    """
    resources: list[ArtifactResource] = []
    for item in as_obj_list(descriptor.get("resources")) or []:
        d = as_str_dict(item)
        if d is None:
            continue
        access = get_table(d, "access") or {}
        resources.append(
            ArtifactResource(
                name=get_str(d, "name") or "",
                type=get_str(d, "type") or "",
                version=get_str(d, "version") or "",
                reference=get_str(access, "imageReference") or "",
            )
        )

    sources: dict[str, StrDict] = {}
    for item in as_obj_list(descriptor.get("sources")) or []:
        d = as_str_dict(item)
        name = get_str(d, "name") if d is not None else None
        if d is not None and name is not None:
            sources[name] = d

    artifact_version = ""
    source_repo_url = ""
    image_source = sources.get(_IMAGE_SOURCE)
    if image_source is not None:
        artifact_version = get_str(image_source, "version") or ""
        source_repo_url = _source_repo(get_table(image_source, "access") or {})
    if not artifact_version:
        image = next((r for r in resources if r.type == "ociImage"), None)
        artifact_version = image.version if image is not None else ""
    if not source_repo_url and _CHART_SOURCE in sources:
        source_repo_url = _source_repo(get_table(sources[_CHART_SOURCE], "access") or {})

    if not artifact_version and not resources:
        return None
    return ArtifactDetails(
        artifact_version=artifact_version,
        source_repo_url=source_repo_url,
        resources=tuple(resources),
        raw_descriptor=raw,
    )


def list_component_versions(
    *, cwd: Path, registry: RegistryConfig, component: str
) -> Result[list[str], ReleaseError]:
    name = registry.component_name(component)
    result = run_read(
        cwd=cwd,
        cmd=["ocm", "get", "componentversions", name, "--repo", registry.repository, "-o", "json"],
        timeout=OCM_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        if is_not_found(result.error):
            return Ok([])
        return Err(
            to_release_error(
                result.error, kind="registry_failed", message=f"ocm get componentversions failed: {name}"
            )
        )

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(ReleaseError(kind="registry_failed", message=f"invalid JSON from ocm: {e}", hint=name))

    data = as_str_dict(obj) or {}
    out: list[str] = []
    for item in as_obj_list(data.get("items")) or []:
        d = as_str_dict(item)
        comp = get_table(d, "component") if d is not None else None
        version = get_str(comp, "version") if comp is not None else None
        if version is not None:
            out.append(version)
    return Ok(out)
