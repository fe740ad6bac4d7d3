"""Release tags as read from the repository."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Tag:
    """A version tag, such as ``1.2.3`` or ``v1.2.3``."""

    name: str = ""

    def value(self) -> str:
        """Return the tag name unchanged."""
        return self.name

    def strip_v_prefix(self) -> str:
        """Return the tag name without a single leading ``v``."""
        return self.name.removeprefix("v")