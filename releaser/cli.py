"""Command-line options, logging setup and crate publishing."""

from __future__ import annotations

import argparse
import logging
import os
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from os import PathLike
from pathlib import Path

from releaser.config import CratesIoConfig

log = logging.getLogger(__name__)

LOG_LEVEL_VARIABLE = "LOG_LEVEL"

_LEVELS = {
    "trace": logging.DEBUG,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
    "off": logging.CRITICAL + 10,
}


@dataclass(frozen=True)
class Opts:
    """Options given on the command line."""

    path: Path = Path(".")
    config: str = "releaser.toml"
    dry_run: bool = False
    output: Path = Path(".")


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="releaser",
        description="Build, release and publish a project with its Homebrew formula.",
    )
    parser.add_argument("path", nargs="?", type=Path, default=Path("."), help="Path to the project")
    parser.add_argument("-c", "--config", default="releaser.toml", help="Path to the config file")
    parser.add_argument(
        "-d", "--dry-run", action="store_true", help="Dry run (do not upload anything)"
    )
    parser.add_argument(
        "-o", "--output", type=Path, default=Path("."), help="Output directory for temporary files"
    )
    return parser


def parse_args(argv: Sequence[str] | None = None) -> Opts:
    """Parse command-line arguments; argparse exits on invalid ones."""
    namespace = _parser().parse_args(argv)
    return Opts(
        path=namespace.path,
        config=namespace.config,
        dry_run=namespace.dry_run,
        output=namespace.output,
    )


def init_logging() -> int:
    """Configure logging from ``LOG_LEVEL`` (all messages if unset) and return the level."""
    name = os.environ.get(LOG_LEVEL_VARIABLE, "").strip().lower()
    if not name:
        level = logging.DEBUG
    else:
        try:
            level = _LEVELS[name]
        except KeyError:
            raise ValueError(f"invalid log level: {name}") from None
    logging.basicConfig(level=level)
    logging.getLogger().setLevel(level)
    return level


def publish_command(crates_io: CratesIoConfig, package: str) -> list[str]:
    """Return the cargo command publishing ``package`` with the configured options."""
    command = ["cargo", "publish"]
    if crates_io.allow_dirty:
        command.append("--allow-dirty")
    if crates_io.no_verify:
        command.append("--no-verify")
    if crates_io.registry is not None:
        command += ["--registry", crates_io.registry]
    if crates_io.index is not None:
        command += ["--index", crates_io.index]
    command += ["--package", package]
    return command


def publish_crates(crates_io: CratesIoConfig, path: str | PathLike[str]) -> list[int]:
    """Publish each configured package from ``path``; return the exit codes in order."""
    codes = []
    for package in crates_io.packages:
        log.info("Publishing %s to crates.io", package)
        result = subprocess.run(publish_command(crates_io, package), cwd=path, check=False)
        codes.append(result.returncode)
    return codes