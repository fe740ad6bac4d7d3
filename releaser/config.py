"""Loading and validating the releaser configuration file."""

from __future__ import annotations

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

from releaser.formula import Repository
from releaser.payloads import CommitterRequest

MAIN_BRANCH_NAME = "main"
BREW_DEFAULT_COMMIT_MESSAGE = "update formula"
PR_DEFAULT_BASE_BRANCH_NAME = MAIN_BRANCH_NAME
PR_DEFAULT_HEAD_BRANCH_NAME = "bumps-formula-version"
ENV_PREFIX = "RELEASER_"

_MISSING = object()
_FORMAT_EXTENSIONS = (".toml", ".json")


@dataclass(frozen=True)
class CommitterConfig:
    """Identity used for commits made on the tap repository."""

    email: str
    name: str

    def to_request(self) -> CommitterRequest:
        """Return the committer as sent to the GitHub API."""
        return CommitterRequest(name=self.name, email=self.email)


@dataclass(frozen=True)
class PullRequestConfig:
    """How the pull request updating a formula is opened."""

    title: str | None = None
    body: str | None = None
    labels: list[str] | None = None
    assignees: list[str] | None = None
    draft: bool = False
    base: str = PR_DEFAULT_BASE_BRANCH_NAME
    head: str = PR_DEFAULT_HEAD_BRANCH_NAME


@dataclass(frozen=True)
class ReleaseConfig:
    """The GitHub repository and options of the release."""

    owner: str
    repo: str
    target_branch: str
    prerelease: bool = False
    draft: bool = False
    body: str | None = None


@dataclass(frozen=True)
class BrewConfig:
    """The Homebrew formula to publish."""

    name: str
    install: str
    repository: Repository
    description: str = ""
    homepage: str = ""
    license: str = ""
    head: str = MAIN_BRANCH_NAME
    test: str = ""
    caveats: str = ""
    commit_message: str = BREW_DEFAULT_COMMIT_MESSAGE
    commit_author: CommitterConfig | None = None
    pull_request: PullRequestConfig | None = None
    path: str | None = None


@dataclass(frozen=True)
class CratesIoConfig:
    """The packages to publish to a crate registry."""

    packages: list[str]
    registry: str | None = None
    index: str | None = None
    allow_dirty: bool | None = None
    no_verify: bool | None = None


@dataclass(frozen=True)
class ReleaserConfig:
    """The whole configuration; ``build`` is kept as the raw table."""

    build: dict[str, Any]
    release: ReleaseConfig
    brew: BrewConfig | None = None
    crates_io: CratesIoConfig | None = None
    extra: dict[str, Any] = field(default_factory=dict, repr=False)


def _coerce(value: Any, kind: type, where: str) -> Any:
    if kind is bool:
        if isinstance(value, bool):
            return value
        if isinstance(value, str) and value.lower() in ("true", "false"):
            return value.lower() == "true"
        raise ValueError(f"invalid type for `{where}`: expected a boolean")
    if kind is str:
        if isinstance(value, str):
            return value
        raise ValueError(f"invalid type for `{where}`: expected a string")
    if kind is list:
        if isinstance(value, list) and all(isinstance(item, str) for item in value):
            return list(value)
        raise ValueError(f"invalid type for `{where}`: expected a list of strings")
    if kind is dict:
        if isinstance(value, Mapping):
            return dict(value)
        raise ValueError(f"invalid type for `{where}`: expected a table")
    raise TypeError(f"unsupported kind {kind!r}")


def _get(data: Mapping[str, Any], key: str, kind: type, where: str, default: Any = _MISSING) -> Any:
    value = data.get(key)
    if value is None:
        if default is _MISSING:
            raise ValueError(f"missing field `{key}` in {where}")
        return default
    return _coerce(value, kind, f"{where}.{key}")


def _committer(data: Mapping[str, Any]) -> CommitterConfig:
    where = "commit_author"
    return CommitterConfig(
        email=_get(data, "email", str, where),
        name=_get(data, "name", str, where),
    )


def _pull_request(data: Mapping[str, Any]) -> PullRequestConfig:
    where = "pull_request"
    return PullRequestConfig(
        title=_get(data, "title", str, where, None),
        body=_get(data, "body", str, where, None),
        labels=_get(data, "labels", list, where, None),
        assignees=_get(data, "assignees", list, where, None),
        draft=_get(data, "draft", bool, where, False),
        base=_get(data, "base", str, where, PR_DEFAULT_BASE_BRANCH_NAME),
        head=_get(data, "head", str, where, PR_DEFAULT_HEAD_BRANCH_NAME),
    )


def _release(data: Mapping[str, Any]) -> ReleaseConfig:
    where = "release"
    return ReleaseConfig(
        owner=_get(data, "owner", str, where),
        repo=_get(data, "repo", str, where),
        target_branch=_get(data, "target_branch", str, where),
        prerelease=_get(data, "prerelease", bool, where, False),
        draft=_get(data, "draft", bool, where, False),
        body=_get(data, "body", str, where, None),
    )


def _brew(data: Mapping[str, Any]) -> BrewConfig:
    where = "brew"
    repository = _get(data, "repository", dict, where)
    author = _get(data, "commit_author", dict, where, None)
    pull_request = _get(data, "pull_request", dict, where, None)
    return BrewConfig(
        name=_get(data, "name", str, where),
        install=_get(data, "install", str, where),
        repository=Repository(
            owner=_get(repository, "owner", str, "repository"),
            name=_get(repository, "name", str, "repository"),
        ),
        description=_get(data, "description", str, where, ""),
        homepage=_get(data, "homepage", str, where, ""),
        license=_get(data, "license", str, where, ""),
        head=_get(data, "head", str, where, MAIN_BRANCH_NAME),
        test=_get(data, "test", str, where, ""),
        caveats=_get(data, "caveats", str, where, ""),
        commit_message=_get(data, "commit_message", str, where, BREW_DEFAULT_COMMIT_MESSAGE),
        commit_author=None if author is None else _committer(author),
        pull_request=None if pull_request is None else _pull_request(pull_request),
        path=_get(data, "path", str, where, None),
    )


def _crates_io(data: Mapping[str, Any]) -> CratesIoConfig:
    where = "crates_io"
    return CratesIoConfig(
        packages=_get(data, "packages", list, where),
        registry=_get(data, "registry", str, where, None),
        index=_get(data, "index", str, where, None),
        allow_dirty=_get(data, "allow_dirty", bool, where, None),
        no_verify=_get(data, "no_verify", bool, where, None),
    )


def parse_config(data: Mapping[str, Any]) -> ReleaserConfig:
    """Validate a configuration mapping; raise ValueError on missing or wrong fields."""
    where = "configuration"
    brew = _get(data, "brew", dict, where, None)
    crates_io = _get(data, "crates_io", dict, where, None)
    known = {"build", "release", "brew", "crates_io"}
    return ReleaserConfig(
        build=_get(data, "build", dict, where),
        release=_release(_get(data, "release", dict, where)),
        brew=None if brew is None else _brew(brew),
        crates_io=None if crates_io is None else _crates_io(crates_io),
        extra={key: value for key, value in data.items() if key not in known},
    )


def _locate(path: Path) -> Path:
    if path.is_file():
        return path
    for extension in _FORMAT_EXTENSIONS:
        candidate = path.with_name(path.name + extension)
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f"configuration file {path} not found")


def _read(path: Path) -> dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    match path.suffix.lower():
        case ".toml":
            data = tomllib.loads(text)
        case ".json":
            data = json.loads(text)
        case _:
            raise ValueError(f"unsupported configuration format: {path}")
    if not isinstance(data, dict):
        raise ValueError(f"configuration in {path} is not a table")
    return data


def load_config(
    path: str | PathLike[str],
    environ: Mapping[str, str] | None = None,
) -> ReleaserConfig:
    """Read the configuration file, let ``RELEASER_*`` variables override keys, and validate it."""
    data = _read(_locate(Path(path)))
    env = os.environ if environ is None else environ
    for name, value in env.items():
        if name.upper().startswith(ENV_PREFIX) and len(name) > len(ENV_PREFIX):
            data[name[len(ENV_PREFIX):].lower()] = value
    return parse_config(data)