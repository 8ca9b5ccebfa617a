"""Third-party versions pinned in the OCM build workflow.

The workflow's `jobs.ocm.env` table holds one variable per third-party
component (`TRAEFIK_VERSION: 36.3.0`, ...). The previous release's values
are read from the same file at the release tag.
"""

from __future__ import annotations

from pathlib import Path
from typing import cast

import yaml

from relbook.core.result import Err, Ok, Result
from relbook.core.structured import as_str_dict, get_table, str_map
from relbook.platform.process import run as run_process
from relbook.release.errors import ReleaseError
from relbook.release.timeouts import GIT_TIMEOUT_SECONDS


def parse_workflow_env(text: str, *, source: str) -> Result[dict[str, str], ReleaseError]:
    try:
        obj: object = yaml.safe_load(text)
    except yaml.YAMLError as e:
        return Err(ReleaseError(kind="invalid_input", message=f"invalid workflow YAML: {e}", hint=source))

    # YAML 1.1 reads the workflow trigger key `on` as True, so the root
    # mapping is not a str-keyed table.
    jobs_obj: object = cast(dict[object, object], obj).get("jobs") if isinstance(obj, dict) else None
    jobs = as_str_dict(jobs_obj) or {}
    ocm_job = get_table(jobs, "ocm") or {}
    env = get_table(ocm_job, "env")
    if env is None:
        return Ok({})
    return Ok(str_map(env))


def read_workflow_env(path: Path) -> Result[dict[str, str], ReleaseError]:
    """Current pins; a missing workflow file means no third-party components."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Ok({})
    except OSError as e:
        return Err(ReleaseError(kind="io_failed", message=f"failed to read workflow: {e}", hint=str(path)))
    return parse_workflow_env(text, source=str(path))


def resolve_tag(*, cwd: Path, version: str) -> str | None:
    """Local git tag for `version`, trying the bare and `v`-prefixed forms."""
    bare = version.removeprefix("v")
    for tag in (version, bare, f"v{bare}"):
        r = run_process(
            ["git", "rev-parse", "--verify", "--quiet", f"refs/tags/{tag}"],
            cwd=cwd,
            timeout=GIT_TIMEOUT_SECONDS,
        )
        if isinstance(r, Ok):
            return tag
    return None


def read_workflow_env_at_tag(
    *, cwd: Path, workflow_file: str, version: str
) -> Result[dict[str, str], ReleaseError]:
    """Pins at a release tag; no tag or no file at that tag yields `{}`."""
    tag = resolve_tag(cwd=cwd, version=version)
    if tag is None:
        return Ok({})

    shown = run_process(["git", "show", f"{tag}:{workflow_file}"], cwd=cwd, timeout=GIT_TIMEOUT_SECONDS)
    if isinstance(shown, Err):
        return Ok({})
    return parse_workflow_env(shown.value, source=f"{tag}:{workflow_file}")
