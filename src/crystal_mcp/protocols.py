"""Protocols for dependency injection in the crystal store."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentDetector(Protocol):
    """Source of crystal content when the caller supplies none."""

    def detect_latest_content(self) -> str | None:
        """Return the most recent crystal-worthy content, or None if there is none."""
        ...
