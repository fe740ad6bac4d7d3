"""Release assets and the arch/os build matrix."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass
class Asset:
    """A file to be attached to a release."""

    name: str
    path: Path
    checksum: str | None = None

    def add_checksum(self, checksum: str) -> None:
        """Record the SHA-256 checksum of the file."""
        self.checksum = checksum


@dataclass
class UploadedAsset:
    """An asset that has been uploaded and can be downloaded from ``url``."""

    name: str
    url: str
    checksum: str


@dataclass
class ArchOsMatrixEntry:
    """One architecture/OS combination of a multi-target build."""

    arch: str
    os: str
    name: str
    asset: Asset | None = None

    def set_asset(self, asset: Asset) -> None:
        """Attach the packaged asset for this combination."""
        self.asset = asset


def matrix_entry(arch: str, os: str, name: str, tag: str, extension: str) -> ArchOsMatrixEntry:
    """Create a matrix entry whose archive name encodes binary, tag, arch and OS."""
    return ArchOsMatrixEntry(
        arch=arch,
        os=os,
        name=f"{name}_{tag}_{arch}_{os}.{extension}",
    )


def create_asset(name: str, path: str | PathLike[str]) -> Asset:
    """Create an asset without a checksum."""
    return Asset(name=str(name), path=Path(path))


def generate_checksum_asset(asset: Asset, output_path: str | PathLike[str]) -> Asset:
    """Write a ``<name>.sha256`` file for ``asset`` and return it as a new asset."""
    if asset.checksum is None:
        raise ValueError(f"checksum is not available for asset {asset!r}")
    file_name = f"{asset.name}.sha256"
    path = Path(output_path) / file_name
    path.write_text(f"{asset.checksum}  {asset.name}")
    log.debug("wrote checksum file %s", path)
    return create_asset(file_name, path)