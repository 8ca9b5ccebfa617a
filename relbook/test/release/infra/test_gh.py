from __future__ import annotations

import json
from pathlib import Path

import pytest

from relbook.core.result import Err, Ok, Result
from relbook.platform.process import ProcessError
from relbook.release.infra import gh as gh_mod
from relbook.release.infra import reads


def _err(stderr: str) -> Err[ProcessError]:
    return Err(ProcessError(command=("gh",), returncode=1, stdout="", stderr=stderr))


def _no_sleep(seconds: float) -> None:
    del seconds


class FakeGh:
    """Routes `gh api <endpoint>` to canned payloads; unknown endpoints are 404s."""

    def __init__(self, payloads: dict[str, object]) -> None:
        self.payloads = payloads
        self.calls: list[list[str]] = []

    def __call__(self, cmd: list[str], *, cwd: Path, timeout: float | None = None) -> Result[str, ProcessError]:
        del cwd, timeout
        self.calls.append(cmd)
        if cmd[:2] == ["gh", "api"]:
            endpoint = cmd[2]
            if endpoint not in self.payloads:
                return _err("gh: Not Found (HTTP 404)")
            return Ok(json.dumps(self.payloads[endpoint]))
        if cmd[:3] == ["gh", "release", "create"]:
            return Ok("https://github.com/platform-mesh/ocm/releases/tag/untagged-1\n")
        return Ok("")


@pytest.fixture
def fake_gh(monkeypatch: pytest.MonkeyPatch) -> FakeGh:
    fake = FakeGh({})
    monkeypatch.setattr(reads, "run_process", fake)
    monkeypatch.setattr(reads, "sleep", _no_sleep)
    monkeypatch.setattr(gh_mod, "run_process", fake)
    return fake


def test_gh_api_json_404_is_none(fake_gh: FakeGh, tmp_path: Path) -> None:
    result = gh_mod.gh_api_json(cwd=tmp_path, endpoint="repos/x/y")
    assert isinstance(result, Ok)
    assert result.value is None


def test_gh_api_json_invalid_payload(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(reads, "run_process", lambda cmd, *, cwd, timeout=None: Ok("<html>"))
    result = gh_mod.gh_api_json(cwd=tmp_path, endpoint="repos/x/y")
    assert isinstance(result, Err)
    assert result.error.kind == "github_failed"


def test_get_release_falls_back_to_v_prefixed_tag(fake_gh: FakeGh, tmp_path: Path) -> None:
    fake_gh.payloads["repos/platform-mesh/portal/releases/tags/v1.2.0"] = {
        "name": "v1.2.0",
        "body": "BREAKING: dropped v1 API",
        "html_url": "https://github.com/platform-mesh/portal/releases/tag/v1.2.0",
        "tag_name": "v1.2.0",
        "prerelease": False,
        "published_at": "2026-03-01T10:00:00Z",
    }
    result = gh_mod.get_release(cwd=tmp_path, repo="platform-mesh/portal", version="1.2.0")
    assert isinstance(result, Ok)
    assert result.value is not None
    assert result.value.tag == "v1.2.0"
    assert result.value.body.startswith("BREAKING")
    endpoints = [c[2] for c in fake_gh.calls]
    assert endpoints == [
        "repos/platform-mesh/portal/releases/tags/1.2.0",
        "repos/platform-mesh/portal/releases/tags/v1.2.0",
    ]


def test_get_release_absent(fake_gh: FakeGh, tmp_path: Path) -> None:
    result = gh_mod.get_release(cwd=tmp_path, repo="platform-mesh/portal", version="9.9.9")
    assert isinstance(result, Ok)
    assert result.value is None


def test_list_releases_skips_malformed_entries(fake_gh: FakeGh, tmp_path: Path) -> None:
    fake_gh.payloads["repos/platform-mesh/ocm/releases?per_page=100"] = [
        {"tag_name": "0.2.0", "prerelease": False},
        {"tag_name": "0.3.0-rc.1", "prerelease": True},
        {"tag_name": "broken"},
        "junk",
    ]
    result = gh_mod.list_releases(cwd=tmp_path, repo="platform-mesh/ocm")
    assert isinstance(result, Ok)
    assert [(r.tag, r.prerelease) for r in result.value] == [("0.2.0", False), ("0.3.0-rc.1", True)]


def test_pull_numbers_from_messages() -> None:
    messages = [
        "feat: add quotas (#42)\n\nlong body",
        "Merge pull request #7 from org/branch\n\nfix",
        "chore: no reference",
        "fix: again (#42)",
        "",
    ]
    assert gh_mod.pull_numbers_from_messages(messages) == [42, 7]


def test_compare_pull_numbers(fake_gh: FakeGh, tmp_path: Path) -> None:
    fake_gh.payloads["repos/platform-mesh/portal/compare/v1.0.0...v1.1.0"] = {
        "commits": [
            {"commit": {"message": "feat: one (#10)"}},
            {"commit": {"message": "Merge pull request #11 from a/b"}},
            {"sha": "no commit table"},
        ]
    }
    result = gh_mod.compare_pull_numbers(
        cwd=tmp_path, repo="platform-mesh/portal", base="v1.0.0", head="v1.1.0"
    )
    assert isinstance(result, Ok)
    assert result.value == [10, 11]


def test_compare_unknown_refs_is_empty(fake_gh: FakeGh, tmp_path: Path) -> None:
    result = gh_mod.compare_pull_numbers(cwd=tmp_path, repo="x/y", base="a", head="b")
    assert isinstance(result, Ok)
    assert result.value == []


def test_get_pull_request(fake_gh: FakeGh, tmp_path: Path) -> None:
    fake_gh.payloads["repos/platform-mesh/portal/pulls/10"] = {
        "title": "Add quotas",
        "html_url": "https://github.com/platform-mesh/portal/pull/10",
        "body": "## Change Log\n- Added quotas\n",
        "user": {"login": "ann", "html_url": "https://github.com/ann", "avatar_url": "https://a/ann"},
    }
    result = gh_mod.get_pull_request(cwd=tmp_path, repo="platform-mesh/portal", number=10)
    assert isinstance(result, Ok)
    detail = result.value
    assert detail is not None
    assert detail.author == "ann"
    assert detail.body == "## Change Log\n- Added quotas\n"


def test_release_exists(fake_gh: FakeGh, tmp_path: Path) -> None:
    fake_gh.payloads["repos/platform-mesh/ocm/releases/tags/0.2.0"] = {"tag_name": "0.2.0"}
    exists = gh_mod.release_exists(cwd=tmp_path, repo="platform-mesh/ocm", tag="0.2.0")
    missing = gh_mod.release_exists(cwd=tmp_path, repo="platform-mesh/ocm", tag="0.3.0")
    assert isinstance(exists, Ok) and exists.value is True
    assert isinstance(missing, Ok) and missing.value is False


def test_create_draft_release_is_a_draft(fake_gh: FakeGh, tmp_path: Path) -> None:
    notes = tmp_path / "notes.md"
    result = gh_mod.create_draft_release(
        cwd=tmp_path, repo="platform-mesh/ocm", tag="0.2.0", title="Platform Mesh 0.2.0", notes_file=notes
    )
    assert isinstance(result, Ok)
    assert result.value.endswith("untagged-1")
    [cmd] = fake_gh.calls
    assert cmd[:4] == ["gh", "release", "create", "0.2.0"]
    assert "--draft" in cmd
    assert cmd[cmd.index("--notes-file") + 1] == str(notes)


def test_create_draft_release_is_not_retried(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    calls: list[list[str]] = []

    def failing(cmd: list[str], *, cwd: Path, timeout: float | None = None) -> Result[str, ProcessError]:
        del cwd, timeout
        calls.append(cmd)
        return _err("HTTP 503")

    monkeypatch.setattr(gh_mod, "run_process", failing)
    result = gh_mod.create_draft_release(
        cwd=tmp_path, repo="r/r", tag="0.2.0", title="t", notes_file=tmp_path / "n.md"
    )
    assert isinstance(result, Err)
    assert result.error.kind == "github_failed"
    assert len(calls) == 1


def test_ensure_gh_auth_maps_failure(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(gh_mod, "run_process", lambda cmd, *, cwd, timeout=None: _err("not logged in"))
    result = gh_mod.ensure_gh_auth(cwd=tmp_path)
    assert isinstance(result, Err)
    assert result.error.kind == "gh_auth_required"


def test_ensure_gh_available(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(gh_mod, "which", lambda name: False)
    result = gh_mod.ensure_gh_available()
    assert isinstance(result, Err)
    assert result.error.kind == "gh_missing"
