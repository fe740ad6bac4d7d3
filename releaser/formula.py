"""Data describing a Homebrew formula and its download targets."""

from __future__ import annotations

from dataclasses import dataclass
from itertools import groupby


@dataclass(frozen=True)
class Repository:
    """A GitHub repository identified by owner and name."""

    owner: str
    name: str

    def url(self) -> str:
        return f"https://github.com/{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.url()


@dataclass(frozen=True)
class Package:
    """A released archive, with its platform when the build is multi-target."""

    name: str
    os: str | None
    arch: str | None
    url: str | None
    sha256: str


@dataclass(frozen=True)
class SingleTarget:
    """The one download of a single-target formula."""

    url: str
    hash: str


@dataclass(frozen=True)
class BrewArch:
    """The download for one architecture."""

    arch: str
    url: str
    hash: str


@dataclass(frozen=True)
class MultiTarget:
    """The downloads for one operating system."""

    os: str
    archs: list[BrewArch]


def targets_from_packages(packages: list[Package]) -> list[SingleTarget | MultiTarget]:
    """Turn packages into formula targets, grouping consecutive packages by OS."""
    if not packages:
        return []
    first = packages[0]
    if first.arch is None and first.os is None:
        return [SingleTarget(url=first.url or "", hash=first.sha256)]

    targets: list[SingleTarget | MultiTarget] = []
    for os_name, group in groupby(packages, key=lambda package: package.os):
        if os_name is None:
            raise ValueError("package without an operating system in a multi-target build")
        archs = []
        for package in group:
            if package.arch is None:
                raise ValueError(f"package {package.name} has no architecture")
            archs.append(BrewArch(arch=package.arch, url=package.url or "", hash=package.sha256))
        targets.append(MultiTarget(os=os_name, archs=archs))
    return targets


def capitalize(name: str) -> str:
    """Upper-case the first character and keep the rest as it is."""
    if not name:
        raise ValueError("cannot capitalize an empty name")
    return name[0].upper() + name[1:]