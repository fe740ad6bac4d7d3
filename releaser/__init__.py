"""Package release binaries and publish them to GitHub, Homebrew taps and crates.io."""

__version__ = "0.1.0"