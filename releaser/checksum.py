"""SHA-256 checksums of release files."""

from __future__ import annotations

import hashlib
import logging
from os import PathLike
from pathlib import Path

log = logging.getLogger(__name__)


def create(binary_name: str, path: str | PathLike[str]) -> str:
    """Return the hex SHA-256 digest of the file at ``path``."""
    path = Path(path)
    log.info("creating checksum for: %s: %s", binary_name, path)
    with path.open("rb") as handle:
        digest = hashlib.file_digest(handle, "sha256")
    return digest.hexdigest()