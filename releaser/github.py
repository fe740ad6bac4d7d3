"""GitHub releases, branches, files and pull requests."""

from __future__ import annotations

import base64
import json
import logging
import mimetypes
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

import httpx

from releaser import httpclient
from releaser.asset import Asset, UploadedAsset, generate_checksum_asset
from releaser.formula import Package
from releaser.payloads import (
    AssigneesRequest,
    CommitterRequest,
    CreateReleaseRequest,
    LabelsRequest,
    PullRequest,
    PullRequestRequest,
    Sha,
    UpsertFileRequest,
    branch_ref,
    parse_pull_request,
    parse_release,
    parse_sha,
)
from releaser.tag import Tag

log = logging.getLogger(__name__)

API_URL = "https://api.github.com"
UPLOADS_URL = "https://uploads.github.com"
DOWNLOAD_URL = "https://github.com"


def _json(data: dict[str, Any]) -> str:
    return json.dumps(data, separators=(",", ":"))


def _post_binary(url: str, content: bytes, content_type: str) -> str:
    headers = dict(httpclient.default_headers(httpclient.github_token()))
    headers["Content-Length"] = str(len(content))
    headers["Content-Type"] = content_type
    try:
        response = httpx.post(url, content=content, headers=headers)
    except httpx.HTTPError as error:
        raise httpclient.internal_server_error(str(error) or None) from error
    log.debug("Response status: %s", response.status_code)
    if not response.is_success:
        log.warning("Response message: %s", response.text)
    return response.text


@dataclass
class Release:
    """A release on GitHub to which assets can be uploaded."""

    id: int
    owner: str
    repo: str
    packages: list[Package] = field(default_factory=list)

    def upload_assets(
        self,
        assets: list[Asset],
        tag: Tag,
        output_path: str | PathLike[str],
    ) -> list[UploadedAsset]:
        """Upload each asset followed by its ``.sha256`` file."""
        client = instance()
        uploaded = []
        for asset in assets:
            uploaded_asset = client.upload_asset(asset, self.owner, tag, self.repo, self.id)
            log.debug("Uploaded asset: %r", uploaded_asset)
            uploaded.append(uploaded_asset)

            checksum_asset = generate_checksum_asset(asset, output_path)
            checksum_upload = client.upload_asset(
                checksum_asset, self.owner, tag, self.repo, self.id
            )
            log.debug("Uploaded checksum asset: %r", checksum_upload)
        return uploaded


class GithubClient:
    """Calls to the GitHub REST API."""

    def repo(self, owner: str, name: str) -> RepositoryHandler:
        """Return a handler for the repository ``owner/name``."""
        return RepositoryHandler(owner, name)

    def upload_asset(
        self,
        asset: Asset,
        owner: str,
        tag: Tag,
        repo: str,
        release_id: int,
    ) -> UploadedAsset:
        """Upload an asset to a release and return where it can be downloaded."""
        path = Path(asset.path)
        content = path.read_bytes()
        content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
        url = (
            f"{UPLOADS_URL}/repos/{owner}/{repo}/releases/{release_id}/assets"
            f"?name={asset.name}"
        )
        response = _post_binary(url, content, content_type)
        log.debug("upload asset response: %s", response)

        asset_url = (
            f"{DOWNLOAD_URL}/{owner}/{repo}/releases/download/"
            f"{tag.strip_v_prefix()}/{asset.name}"
        )
        return self.create_uploaded_asset(asset, asset_url)

    def create_uploaded_asset(self, asset: Asset, url: str) -> UploadedAsset:
        """Describe an uploaded asset; a missing checksum becomes empty."""
        return UploadedAsset(name=asset.name, url=url, checksum=asset.checksum or "")

    def get_commit_sha(self, owner: str, repo: str, base: str) -> Sha:
        """Return the SHA of the last commit on ``base``."""
        response = httpclient.get(f"{API_URL}/repos/{owner}/{repo}/commits/{base}")
        return Sha(response)

    def create_branch(self, owner: str, repo: str, branch: str, sha: str) -> None:
        """Create ``branch`` pointing at commit ``sha``."""
        body = _json(branch_ref(branch, sha).to_dict())
        httpclient.post(f"{API_URL}/repos/{owner}/{repo}/git/refs", body)

    def upsert_file(
        self,
        owner: str,
        repo: str,
        path: str,
        content: str,
        commit_message: str,
        committer: CommitterRequest,
        head: str,
    ) -> None:
        """Create the file at ``path`` on ``head``, or update it if it exists."""
        encoded = base64.b64encode(content.encode("utf-8")).decode("ascii")
        uri = f"{API_URL}/repos/{owner}/{repo}/contents/{path}"

        existing = parse_sha(httpclient.get(uri))
        if existing.sha:
            log.debug("updating file")
            sha = existing.sha
        else:
            log.debug("creating new file")
            sha = None

        request = UpsertFileRequest(
            message=commit_message,
            content=encoded,
            committer=committer,
            branch=head,
            sha=sha,
        )
        httpclient.put(uri, _json(request.to_dict()))

    def create_pull_request(
        self,
        owner: str,
        repo: str,
        title: str,
        head: str,
        base: str,
        body: str,
        assignees: list[str],
        labels: list[str],
    ) -> PullRequest:
        """Open a pull request, then assign users and labels if any are given."""
        request = PullRequestRequest(title=title, head=head, base=base, body=body)
        response = httpclient.post(
            f"{API_URL}/repos/{owner}/{repo}/pulls", _json(request.to_dict())
        )
        pull_request = parse_pull_request(response)

        if assignees:
            self._set_pr_assignees(owner, repo, pull_request.number, assignees)
        if labels:
            self._set_pr_labels(owner, repo, pull_request.number, labels)
        return pull_request

    def create_release(
        self,
        owner: str,
        repo: str,
        tag: Tag,
        target_branch: str,
        release_name: str,
        draft: bool,
        prerelease: bool,
        body: str,
    ) -> Release:
        """Create a release for ``tag``; raise ValueError if the response has no id."""
        request = CreateReleaseRequest(
            tag_name=tag.value(),
            target_commitish=target_branch,
            name=release_name,
            body=body,
            draft=draft,
            prerelease=prerelease,
        )
        response = httpclient.post(
            f"{API_URL}/repos/{owner}/{repo}/releases", _json(request.to_dict())
        )
        release = parse_release(response)
        return Release(release.id, owner, repo)

    def get_release_by_tag(self, owner: str, repo: str, tag: Tag) -> Release:
        """Find the existing release of ``tag``; raise ValueError if there is none."""
        response = httpclient.get(f"{API_URL}/repos/{owner}/{repo}/releases/tags/{tag.value()}")
        release = parse_release(response)
        log.debug("release: %r", release)
        return Release(release.id, owner, repo)

    def _set_pr_assignees(
        self, owner: str, repo: str, number: int, assignees: list[str]
    ) -> None:
        body = _json(AssigneesRequest(list(assignees)).to_dict())
        httpclient.post(f"{API_URL}/repos/{owner}/{repo}/issues/{number}/assignees", body)

    def _set_pr_labels(self, owner: str, repo: str, number: int, labels: list[str]) -> None:
        body = _json(LabelsRequest(list(labels)).to_dict())
        httpclient.post(f"{API_URL}/repos/{owner}/{repo}/issues/{number}/labels", body)


_CLIENT = GithubClient()


def instance() -> GithubClient:
    """Return the shared client."""
    return _CLIENT


@dataclass(frozen=True)
class ReleaseHandler:
    """Releases of one repository."""

    owner: str
    repo: str

    def create(
        self,
        tag: Tag,
        target_branch: str,
        name: str,
        draft: bool,
        prerelease: bool,
        body: str | None = None,
    ) -> Release:
        """Create a release of ``tag``."""
        return instance().create_release(
            self.owner, self.repo, tag, target_branch, name, draft, prerelease, body or ""
        )

    def get_by_tag(self, tag: Tag) -> Release:
        """Return the release of ``tag``."""
        return instance().get_release_by_tag(self.owner, self.repo, tag)


@dataclass(frozen=True)
class BranchesHandler:
    """Branch creation in one repository."""

    owner: str
    repo: str

    def create(self, branch: str, sha: str) -> None:
        """Create ``branch`` at commit ``sha``."""
        instance().create_branch(self.owner, self.repo, branch, sha)


@dataclass(frozen=True)
class BranchHandler:
    """One branch of a repository."""

    owner: str
    repo: str
    base: str

    def upsert_file(
        self,
        path: str,
        content: str,
        message: str,
        committer: CommitterRequest | None = None,
    ) -> None:
        """Create or update the file at ``path`` on this branch."""
        if committer is None:
            committer = CommitterRequest(name="", email="")
        instance().upsert_file(
            self.owner, self.repo, path, content, message, committer, self.base
        )

    def get_commit_sha(self) -> Sha:
        """Return the SHA of this branch's last commit."""
        return instance().get_commit_sha(self.owner, self.repo, self.base)


@dataclass(frozen=True)
class PullRequestHandler:
    """Pull requests of one repository."""

    owner: str
    repo: str

    def create(
        self,
        title: str,
        head: str,
        base: str,
        body: str | None = None,
        assignees: list[str] | None = None,
        labels: list[str] | None = None,
    ) -> PullRequest:
        """Open a pull request from ``head`` into ``base``."""
        return instance().create_pull_request(
            self.owner,
            self.repo,
            title,
            head,
            base,
            body or "",
            list(assignees or []),
            list(labels or []),
        )


@dataclass(frozen=True)
class RepositoryHandler:
    """Entry point to the operations on one repository."""

    owner: str
    repo: str

    def releases(self) -> ReleaseHandler:
        return ReleaseHandler(self.owner, self.repo)

    def branches(self) -> BranchesHandler:
        return BranchesHandler(self.owner, self.repo)

    def branch(self, branch: str) -> BranchHandler:
        return BranchHandler(self.owner, self.repo, branch)

    def pull_request(self) -> PullRequestHandler:
        return PullRequestHandler(self.owner, self.repo)