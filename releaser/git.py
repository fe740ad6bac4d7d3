"""Reading release versions from git tags."""

from __future__ import annotations

import logging
import subprocess
from os import PathLike

import semver

from releaser.tag import Tag

log = logging.getLogger(__name__)


def _tag_names(base: str | PathLike[str]) -> list[str]:
    try:
        result = subprocess.run(
            ["git", "-C", str(base), "tag", "--list"],
            capture_output=True,
            text=True,
            check=True,
        )
    except (OSError, subprocess.CalledProcessError) as error:
        detail = getattr(error, "stderr", None) or str(error)
        raise RuntimeError(f"cannot open git repository at {base}: {detail.strip()}") from error
    return [line.strip() for line in result.stdout.splitlines() if line.strip()]


def _versions(names: list[str]):
    for name in names:
        try:
            yield semver.Version.parse(name.lstrip("v"))
        except ValueError:
            continue


def get_current_tag(base: str | PathLike[str]) -> Tag:
    """Return the highest semantic version among the repository's tags, without ``v``."""
    versions = sorted(_versions(_tag_names(base)))
    if not versions:
        raise LookupError("No tags found")
    tag = versions[-1]
    log.debug("tag: %s", tag)
    return Tag(str(tag))