import base64
import hashlib
import json

import httpx
import pytest
import respx

from releaser.brew import Brew, build_brew, push_formula, release_formula
from releaser.config import BrewConfig, CommitterConfig, PullRequestConfig, ReleaseConfig
from releaser.formula import MultiTarget, Package, Repository, SingleTarget
from releaser.tag import Tag

ARCHIVE_URL = "https://github.com/owner/repo/archive/refs/tags/v1.2.3.tar.gz"
TAP = "https://api.github.com/repos/tapowner/homebrew-tap"


def _brew(**changes):
    values = dict(
        name="Tool",
        description="A tool",
        homepage="https://example.com",
        license="MIT",
        head="main",
        test="",
        caveats="",
        commit_message="update formula {{version}}",
        commit_author=None,
        install_info='bin.install "tool"',
        repository=Repository(owner="tapowner", name="homebrew-tap"),
        tag=Tag("1.2.3"),
        pull_request=None,
        targets=[],
        path=None,
        url=ARCHIVE_URL,
        hash="abc",
    )
    values.update(changes)
    return Brew(**values)


def test_build_brew_single_target():
    config = BrewConfig(
        name="tool",
        install='bin.install "tool"',
        repository=Repository(owner="tapowner", name="homebrew-tap"),
    )
    release = ReleaseConfig(owner="owner", repo="repo", target_branch="main")
    packages = [Package("tool_1.2.3.tar.gz", None, None, "https://example.com/t", "deadbeef")]
    with respx.mock() as router:
        router.get(ARCHIVE_URL).mock(return_value=httpx.Response(200, content=b"archive"))
        brew = build_brew(config, release, Tag("1.2.3"), packages)

    assert brew.name == "Tool"
    assert brew.url == ARCHIVE_URL
    assert brew.hash == hashlib.sha256(b"archive").hexdigest()
    assert brew.targets == [SingleTarget(url="https://example.com/t", hash="deadbeef")]
    assert brew.head == config.head
    assert brew.commit_message == config.commit_message
    assert brew.install_info == config.install


def test_build_brew_multi_target():
    config = BrewConfig(
        name="tool", install="", repository=Repository(owner="o", name="n")
    )
    release = ReleaseConfig(owner="owner", repo="repo", target_branch="main")
    packages = [
        Package("a", "linux", "x86_64", None, "h1"),
        Package("b", "linux", "aarch64", None, "h2"),
    ]
    with respx.mock() as router:
        router.get(ARCHIVE_URL).mock(return_value=httpx.Response(200, content=b""))
        brew = build_brew(config, release, Tag("1.2.3"), packages)
    assert len(brew.targets) == 1
    assert isinstance(brew.targets[0], MultiTarget)
    assert [arch.hash for arch in brew.targets[0].archs] == ["h1", "h2"]


def test_release_formula_dry_run_writes_file(tmp_path):
    brew = _brew()
    with respx.mock():
        result = release_formula(brew, "class Tool < Formula\nend\n", True, tmp_path)
    assert result == "class Tool < Formula\nend\n"
    assert (tmp_path / "Tool.rb").read_text() == result


def test_release_formula_commits_to_head(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    brew = _brew(path="Formula", head="master")
    url = f"{TAP}/contents/Formula/Tool.rb"
    with respx.mock() as router:
        router.get(url).mock(return_value=httpx.Response(404, json={"message": "Not Found"}))
        put = router.put(url).mock(return_value=httpx.Response(201, json={}))
        release_formula(brew, "formula", False, tmp_path)

    body = json.loads(put.calls[0].request.content)
    assert body["message"] == "update formula 1.2.3"
    assert body["branch"] == "master"
    assert "sha" not in body
    assert base64.b64decode(body["content"]) == b"formula"
    assert (tmp_path / "Tool.rb").read_text() == "formula"


def test_release_formula_upload_error(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    brew = _brew()
    with respx.mock() as router:
        router.get(f"{TAP}/contents/Tool.rb").mock(side_effect=httpx.ConnectError("down"))
        with pytest.raises(RuntimeError, match="main branch"):
            release_formula(brew, "formula", False, tmp_path)


def test_push_formula(tmp_path, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    monkeypatch.chdir(tmp_path)
    (tmp_path / "Tool.rb").write_text("new formula")
    brew = _brew(
        commit_author=CommitterConfig(email="bot@example.com", name="Bot"),
        pull_request=PullRequestConfig(title="Bump", labels=["release"]),
    )
    with respx.mock() as router:
        router.get(f"{TAP}/commits/main").mock(return_value=httpx.Response(200, text="abc123"))
        refs = router.post(f"{TAP}/git/refs").mock(return_value=httpx.Response(201, json={}))
        router.get(f"{TAP}/contents/Tool.rb").mock(
            return_value=httpx.Response(200, json={"sha": "oldsha"})
        )
        put = router.put(f"{TAP}/contents/Tool.rb").mock(
            return_value=httpx.Response(200, json={})
        )
        pulls = router.post(f"{TAP}/pulls").mock(
            return_value=httpx.Response(201, json={"number": 5})
        )
        labels = router.post(f"{TAP}/issues/5/labels").mock(
            return_value=httpx.Response(200, json=[])
        )
        result = push_formula(brew)

    assert result is None
    assert refs.call_count == 1
    assert json.loads(refs.calls[0].request.content) == {
        "ref": "refs/heads/bumps-formula-version",
        "sha": "abc123",
    }
    put_body = json.loads(put.calls[0].request.content)
    assert put_body["sha"] == "oldsha"
    assert put_body["branch"] == "bumps-formula-version"
    assert put_body["committer"] == {"name": "Bot", "email": "bot@example.com"}
    assert base64.b64decode(put_body["content"]) == b"new formula"
    pr_body = json.loads(pulls.calls[0].request.content)
    assert (pr_body["title"], pr_body["head"], pr_body["base"]) == (
        "Bump", "bumps-formula-version", "main"
    )
    assert json.loads(labels.calls[0].request.content) == {"labels": ["release"]}


def test_push_formula_without_pull_request():
    with pytest.raises(ValueError):
        push_formula(_brew())