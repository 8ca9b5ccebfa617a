from __future__ import annotations

import json
import re
from pathlib import Path

from relbook.core.result import Err, Ok, Result
from relbook.core.structured import StrDict, as_obj_list, as_str_dict, get_str, get_table
from relbook.platform.process import run as run_process
from relbook.platform.process import which
from relbook.release.domain.models import PublishedRelease, PullRequestDetail, ReleaseMetadata
from relbook.release.errors import ReleaseError
from relbook.release.infra.reads import is_not_found, run_read, to_release_error
from relbook.release.timeouts import GH_TIMEOUT_SECONDS

# Squash merges end with "(#123)"; merge commits start with "Merge pull request #123".
_SQUASH_PR_RE = re.compile(r"\(#(\d+)\)\s*$")
_MERGE_PR_RE = re.compile(r"^Merge pull request #(\d+)")


def ensure_gh_available() -> Result[None, ReleaseError]:
    if not which("gh"):
        return Err(
            ReleaseError(
                kind="gh_missing",
                message="gh: missing",
                hint="Install GitHub CLI: https://cli.github.com/",
            )
        )
    return Ok(None)


def ensure_gh_auth(*, cwd: Path) -> Result[None, ReleaseError]:
    result = run_process(["gh", "auth", "status"], cwd=cwd, timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        return Err(
            ReleaseError(
                kind="gh_auth_required",
                message="gh auth required",
                hint="Run: gh auth login",
            )
        )
    return Ok(None)


def gh_api_json(*, cwd: Path, endpoint: str) -> Result[object | None, ReleaseError]:
    """GET an API endpoint. A 404 is `Ok(None)`, not an error."""
    result = run_read(cwd=cwd, cmd=["gh", "api", endpoint], timeout=GH_TIMEOUT_SECONDS)
    if isinstance(result, Err):
        if is_not_found(result.error):
            return Ok(None)
        return Err(
            to_release_error(
                result.error, kind="github_failed", message=f"gh api failed: {endpoint}"
            )
        )

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            ReleaseError(
                kind="github_failed",
                message=f"gh api returned invalid JSON: {e}",
                hint=endpoint,
            )
        )
    return Ok(obj)


def _release_metadata(data: StrDict) -> ReleaseMetadata:
    body = data.get("body")
    prerelease = data.get("prerelease")
    return ReleaseMetadata(
        title=get_str(data, "name") or "",
        body=body if isinstance(body, str) else "",
        url=get_str(data, "html_url") or "",
        tag=get_str(data, "tag_name") or "",
        is_prerelease=prerelease if isinstance(prerelease, bool) else False,
        published_at=get_str(data, "published_at") or "",
    )


def get_release(*, cwd: Path, repo: str, version: str) -> Result[ReleaseMetadata | None, ReleaseError]:
    """Release tagged `version` or `v{version}`, whichever exists."""
    bare = version.removeprefix("v")
    for tag in dict.fromkeys((version, bare, f"v{bare}")):
        obj = gh_api_json(cwd=cwd, endpoint=f"repos/{repo}/releases/tags/{tag}")
        if isinstance(obj, Err):
            return obj
        if obj.value is None:
            continue
        data = as_str_dict(obj.value)
        if data is None:
            return Err(
                ReleaseError(kind="github_failed", message=f"unexpected release payload: {repo}@{tag}")
            )
        return Ok(_release_metadata(data))
    return Ok(None)


def list_releases(*, cwd: Path, repo: str, limit: int = 100) -> Result[list[PublishedRelease], ReleaseError]:
    obj = gh_api_json(cwd=cwd, endpoint=f"repos/{repo}/releases?per_page={limit}")
    if isinstance(obj, Err):
        return obj

    raw = as_obj_list(obj.value)
    if raw is None:
        if obj.value is None:
            return Ok([])
        return Err(ReleaseError(kind="github_failed", message=f"unexpected releases payload: {repo}"))

    out: list[PublishedRelease] = []
    for item in raw:
        d = as_str_dict(item)
        if d is None:
            continue
        tag = get_str(d, "tag_name")
        prerelease = d.get("prerelease")
        if tag is None or not isinstance(prerelease, bool):
            continue
        out.append(PublishedRelease(tag=tag, prerelease=prerelease))
    return Ok(out)


def pull_numbers_from_messages(messages: list[str]) -> list[int]:
    """PR numbers referenced by merge commit messages, in commit order."""
    out: list[int] = []
    for msg in messages:
        lines = msg.strip().splitlines()
        if not lines:
            continue
        first = lines[0].strip()
        m = _MERGE_PR_RE.match(first) or _SQUASH_PR_RE.search(first)
        if m is None:
            continue
        n = int(m.group(1))
        if n not in out:
            out.append(n)
    return out


def compare_pull_numbers(
    *, cwd: Path, repo: str, base: str, head: str
) -> Result[list[int], ReleaseError]:
    """Pull requests merged between two refs of `repo`."""
    obj = gh_api_json(cwd=cwd, endpoint=f"repos/{repo}/compare/{base}...{head}")
    if isinstance(obj, Err):
        return obj
    if obj.value is None:
        return Ok([])

    data = as_str_dict(obj.value)
    commits = as_obj_list(data.get("commits")) if data is not None else None
    if commits is None:
        return Err(ReleaseError(kind="github_failed", message=f"unexpected compare payload: {repo}"))

    messages: list[str] = []
    for item in commits:
        d = as_str_dict(item)
        commit_tbl = get_table(d, "commit") if d is not None else None
        if commit_tbl is None:
            continue
        msg = commit_tbl.get("message")
        if isinstance(msg, str):
            messages.append(msg)
    return Ok(pull_numbers_from_messages(messages))


def get_pull_request(
    *, cwd: Path, repo: str, number: int
) -> Result[PullRequestDetail | None, ReleaseError]:
    obj = gh_api_json(cwd=cwd, endpoint=f"repos/{repo}/pulls/{number}")
    if isinstance(obj, Err):
        return obj
    if obj.value is None:
        return Ok(None)

    data = as_str_dict(obj.value)
    if data is None:
        return Err(ReleaseError(kind="github_failed", message=f"unexpected pull payload: {repo}#{number}"))

    user = get_table(data, "user") or {}
    body = data.get("body")
    return Ok(
        PullRequestDetail(
            title=get_str(data, "title") or "",
            url=get_str(data, "html_url") or "",
            author=get_str(user, "login") or "",
            author_url=get_str(user, "html_url") or "",
            avatar_url=get_str(user, "avatar_url") or "",
            body=body if isinstance(body, str) else "",
        )
    )


def release_exists(*, cwd: Path, repo: str, tag: str) -> Result[bool, ReleaseError]:
    obj = gh_api_json(cwd=cwd, endpoint=f"repos/{repo}/releases/tags/{tag}")
    if isinstance(obj, Err):
        return obj
    return Ok(obj.value is not None)


def create_draft_release(
    *, cwd: Path, repo: str, tag: str, title: str, notes_file: Path
) -> Result[str, ReleaseError]:
    """Create a draft release; returns its URL. Not retried: it is not idempotent."""
    result = run_process(
        [
            "gh",
            "release",
            "create",
            tag,
            "--repo",
            repo,
            "--draft",
            "--title",
            title,
            "--notes-file",
            str(notes_file),
        ],
        cwd=cwd,
        timeout=GH_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            to_release_error(
                result.error, kind="github_failed", message=f"failed to create release {tag}"
            )
        )
    url = result.value.strip()
    return Ok(url or f"https://github.com/{repo}/releases/tag/{tag}")
