"""Request bodies sent to and responses read from the GitHub API."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class BranchRefRequest:
    """Body for creating a git reference."""

    ref: str
    sha: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def branch_ref(branch: str, sha: str) -> BranchRefRequest:
    """Return a request creating branch ``branch`` at commit ``sha``."""
    return BranchRefRequest(ref=f"refs/heads/{branch}", sha=sha)


@dataclass(frozen=True)
class CommitterRequest:
    """Committer identity attached to a file change."""

    name: str
    email: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CreateReleaseRequest:
    """Body for creating a release."""

    tag_name: str
    target_commitish: str
    name: str
    body: str
    draft: bool
    prerelease: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PullRequestRequest:
    """Body for opening a pull request."""

    title: str
    head: str
    base: str
    body: str

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class UpsertFileRequest:
    """Body for creating or updating a file; ``sha`` is set only for updates."""

    message: str
    content: str
    committer: CommitterRequest
    branch: str | None = None
    sha: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"message": self.message, "content": self.content}
        if self.branch is not None:
            data["branch"] = self.branch
        if self.sha is not None:
            data["sha"] = self.sha
        data["committer"] = self.committer.to_dict()
        return data


@dataclass(frozen=True)
class AssigneesRequest:
    """Body for assigning users to an issue or pull request."""

    assignees: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"assignees": list(self.assignees)}


@dataclass(frozen=True)
class LabelsRequest:
    """Body for labelling an issue or pull request."""

    labels: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"labels": list(self.labels)}


@dataclass(frozen=True)
class PullRequest:
    """The part of a pull request response that is used."""

    number: int


@dataclass(frozen=True)
class ReleaseResponse:
    """The part of a release response that is used."""

    id: int


@dataclass(frozen=True)
class Sha:
    """A commit or blob SHA; empty when unknown."""

    sha: str = ""


def _field(text: str, name: str, kind: type) -> Any:
    data = json.loads(text)
    if not isinstance(data, dict) or name not in data:
        raise ValueError(f"missing field `{name}`")
    value = data[name]
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ValueError(f"invalid type for field `{name}`")
    if kind is int and value < 0:
        raise ValueError(f"invalid value for field `{name}`")
    return value


def parse_sha(text: str) -> Sha:
    """Read the ``sha`` field of a response, or an empty Sha if there is none."""
    try:
        return Sha(_field(text, "sha", str))
    except ValueError:
        return Sha()


def parse_pull_request(text: str) -> PullRequest:
    """Read a pull request response; raise ValueError if it has no number."""
    return PullRequest(_field(text, "number", int))


def parse_release(text: str) -> ReleaseResponse:
    """Read a release response; raise ValueError if it has no id."""
    return ReleaseResponse(_field(text, "id", int))