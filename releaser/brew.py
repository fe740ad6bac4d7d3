"""Publishing the Homebrew formula of a release."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

import httpx

from releaser.config import BrewConfig, CommitterConfig, PullRequestConfig, ReleaseConfig
from releaser.formula import (
    MultiTarget,
    Package,
    Repository,
    SingleTarget,
    capitalize,
    targets_from_packages,
)
from releaser.github import instance
from releaser.payloads import CommitterRequest
from releaser.tag import Tag

log = logging.getLogger(__name__)

VERSION_PLACEHOLDER = "{{version}}"


@dataclass
class Brew:
    """Everything needed to write and publish a formula."""

    name: str
    description: str
    homepage: str
    license: str
    head: str
    test: str
    caveats: str
    commit_message: str
    commit_author: CommitterConfig | None
    install_info: str
    repository: Repository
    tag: Tag
    pull_request: PullRequestConfig | None
    targets: list[SingleTarget | MultiTarget]
    path: str | None
    url: str
    hash: str

    def _message(self) -> str:
        return self.commit_message.replace(VERSION_PLACEHOLDER, self.tag.name)


def build_brew(
    brew_config: BrewConfig,
    release_config: ReleaseConfig,
    version: Tag,
    packages: Sequence[Package],
) -> Brew:
    """Describe the formula, hashing the source archive of the release tag."""
    url = (
        f"https://github.com/{release_config.owner}/{release_config.repo}"
        f"/archive/refs/tags/v{version.name}.tar.gz"
    )
    response = httpx.get(url, follow_redirects=True, timeout=None)
    digest = hashlib.sha256(response.content).hexdigest()
    return Brew(
        name=capitalize(brew_config.name),
        description=brew_config.description,
        homepage=brew_config.homepage,
        license=brew_config.license,
        head=brew_config.head,
        test=brew_config.test,
        caveats=brew_config.caveats,
        commit_message=brew_config.commit_message,
        commit_author=brew_config.commit_author,
        install_info=brew_config.install,
        repository=brew_config.repository,
        tag=version,
        pull_request=brew_config.pull_request,
        targets=targets_from_packages(list(packages)),
        path=brew_config.path,
        url=url,
        hash=digest,
    )


def release_formula(
    brew: Brew,
    data: str,
    dry_run: bool,
    output_path: str | PathLike[str],
) -> str:
    """Write the rendered formula and, unless dry run, publish it to the tap."""
    (Path(output_path) / f"{brew.name}.rb").write_text(data)

    if dry_run:
        log.debug("Dry run, not pushing to github or creating pull request")
        return data

    if brew.pull_request is not None:
        log.debug("Creating pull request")
        push_formula(brew)
    else:
        log.debug("Committing file to head branch")
        file_path = f"{brew.path}/{brew.name}.rb" if brew.path is not None else f"{brew.name}.rb"
        try:
            (
                instance()
                .repo(brew.repository.owner, brew.repository.name)
                .branch(brew.head)
                .upsert_file(file_path, data, brew._message())
            )
        except Exception as error:
            raise RuntimeError("error uploading file to main branch") from error
    return data


def push_formula(brew: Brew) -> None:
    """Open a pull request that updates the formula on a new branch."""
    pull_request = brew.pull_request
    if pull_request is None:
        raise ValueError("no pull request configured for the formula")

    if brew.commit_author is not None:
        committer = brew.commit_author.to_request()
    else:
        committer = CommitterRequest(name="", email="")

    repo = instance().repo(brew.repository.owner, brew.repository.name)

    log.debug("Creating branch")
    try:
        sha = repo.branch(pull_request.base).get_commit_sha()
    except Exception as error:
        raise RuntimeError("error getting the base branch commit sha") from error

    try:
        repo.branches().create(pull_request.head, sha.sha)
    except Exception as error:
        raise RuntimeError("error creating the branch") from error

    content = Path(f"{brew.name}.rb").read_text()

    log.debug("Updating formula")
    try:
        repo.branch(pull_request.head).upsert_file(
            f"{brew.name}.rb", content, brew._message(), committer
        )
    except Exception as error:
        raise RuntimeError("error uploading file to head branch") from error

    log.debug("Creating pull request")
    try:
        repo.pull_request().create(
            pull_request.title or "",
            pull_request.head,
            pull_request.base,
            pull_request.body or "",
            list(pull_request.assignees or []),
            list(pull_request.labels or []),
        )
    except Exception as error:
        raise RuntimeError("error creating pull request") from error