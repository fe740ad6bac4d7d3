"""Packaging release binaries and attaching them to a GitHub release."""

from __future__ import annotations

import logging
import tarfile
from collections.abc import Callable, Sequence
from os import PathLike
from pathlib import Path

from releaser import checksum, git
from releaser.asset import (
    Asset,
    UploadedAsset,
    create_asset,
    generate_checksum_asset,
    matrix_entry,
)
from releaser.config import ReleaseConfig
from releaser.formula import Package
from releaser.github import Release, instance
from releaser.tag import Tag

log = logging.getLogger(__name__)

SINGLE_TARGET_DIR = "target/release"

ReleaseGetter = Callable[[ReleaseConfig, Tag], Release]


def zip_file(
    binary_name: str,
    output_path: str | PathLike[str],
    binary_path: str | PathLike[str],
) -> None:
    """Write ``binary_path`` into a gzipped tar at ``output_path`` under ``binary_name``."""
    with Path(binary_path).open("rb") as source:
        with tarfile.open(output_path, "w:gz") as archive:
            info = archive.gettarinfo(fileobj=source, arcname=binary_name)
            archive.addfile(info, source)


def check_binary(name: str, target: str | None, base: str | PathLike[str]) -> None:
    """Raise FileNotFoundError unless the release build of ``name`` exists."""
    log.debug("checking binary: %s - %r", name, target)
    if target is not None:
        relative = f"target/{target}/release/{name}"
    else:
        relative = f"{SINGLE_TARGET_DIR}/{name}"
    binary_path = Path(base) / relative
    log.debug("binary path: %s", binary_path)
    if not binary_path.exists():
        raise FileNotFoundError("no release folder found, please run `cargo build --release`")


def generate_checksum(asset: Asset) -> str:
    """Return the SHA-256 checksum of the asset's file."""
    return checksum.create(asset.name, asset.path)


def package_asset(asset: UploadedAsset, os: str | None, arch: str | None) -> Package:
    """Describe an uploaded asset as a package for the formula."""
    return Package(
        name=asset.name,
        os=os,
        arch=arch,
        url=asset.url,
        sha256=asset.checksum,
    )


def _create_release(release_info: ReleaseConfig, tag: Tag) -> Release:
    return (
        instance()
        .repo(release_info.owner, release_info.repo)
        .releases()
        .create(
            tag,
            release_info.target_branch,
            f"v{tag.value()}",
            release_info.draft,
            release_info.prerelease,
            release_info.body or "",
        )
    )


def _release_by_tag(release_info: ReleaseConfig, tag: Tag) -> Release:
    return instance().repo(release_info.owner, release_info.repo).releases().get_by_tag(tag)


def get_release(
    release_info: ReleaseConfig,
    tag: Tag,
    create: ReleaseGetter = _create_release,
    fallback: ReleaseGetter = _release_by_tag,
) -> Release:
    """Create the release, or look it up with ``fallback`` if creating fails."""
    try:
        return create(release_info, tag)
    except Exception as error:
        log.warning("cannot create a release, trying to get the release by tag: %r", error)
        return fallback(release_info, tag)


def release_single(
    binary: str,
    extension: str,
    release_info: ReleaseConfig,
    base: str | PathLike[str],
    dry_run: bool,
    output_path: str | PathLike[str],
) -> list[Package]:
    """Package the single-target binary and, unless dry run, upload it."""
    base = Path(base)
    output_path = Path(output_path)
    check_binary(binary, None, base)

    tag = git.get_current_tag(base)
    binary_name = f"{binary}_{tag.value()}.{extension}"
    log.debug("binary name: %s", binary_name)

    archive = output_path / binary_name
    log.debug("zipping binary")
    zip_file(binary, archive, base / SINGLE_TARGET_DIR / binary)

    asset = create_asset(binary_name, archive)
    asset.add_checksum(generate_checksum(asset))

    if dry_run:
        return [Package(asset.name, None, None, None, asset.checksum or "")]

    release = get_release(release_info, tag)
    log.debug("uploading asset")
    try:
        uploaded = release.upload_assets([asset], tag, output_path)
    except Exception as error:
        log.error("Failed to upload asset %r", error)
        raise RuntimeError("Failed to upload asset") from error
    return [package_asset(item, None, None) for item in uploaded]


def release_multi(
    binary: str,
    extension: str,
    archs: Sequence[str],
    oses: Sequence[str],
    release_info: ReleaseConfig,
    base: str | PathLike[str],
    dry_run: bool,
    output_path: str | PathLike[str],
) -> list[Package]:
    """Package the binary of every arch/OS pair and, unless dry run, upload them."""
    base = Path(base)
    output_path = Path(output_path)
    tag = git.get_current_tag(base)

    matrix = []
    for arch in archs:
        for os_name in oses:
            target = f"{arch}-{os_name}"
            check_binary(binary, target, base)
            entry = matrix_entry(arch, os_name, binary, tag.value(), extension)

            log.debug("zipping binary for %s", target)
            archive = output_path / entry.name
            zip_file(binary, archive, base / "target" / target / "release" / binary)

            asset = create_asset(entry.name, archive)
            asset.add_checksum(generate_checksum(asset))
            entry.set_asset(asset)
            matrix.append(entry)

    assets = [entry.asset for entry in matrix if entry.asset is not None]

    if dry_run:
        packages = []
        for entry in matrix:
            asset = next((item for item in assets if item.name == entry.name), None)
            if asset is None:
                raise LookupError("asset not found")
            generate_checksum_asset(asset, output_path)
            packages.append(
                Package(asset.name, entry.os, entry.arch, None, asset.checksum or "")
            )
        return packages

    release = get_release(release_info, tag)
    uploaded = release.upload_assets(assets, tag, output_path)

    packages = []
    for entry in matrix:
        found = next((item for item in uploaded if item.name == entry.name), None)
        if found is None:
            raise LookupError("asset not found")
        packages.append(package_asset(found, entry.os, entry.arch))
    return packages