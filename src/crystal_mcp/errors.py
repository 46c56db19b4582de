"""Exceptions raised by the crystal store and path helpers."""


class CrystalError(Exception):
    """Base class for crystal-mcp errors."""


class PathEscapeError(CrystalError):
    """A resolved path falls outside the project root."""


class CrystalNotFoundError(CrystalError):
    """No crystal record exists for the requested id."""

    def __init__(self, crystal_id: str) -> None:
        super().__init__(f"Crystal not found: {crystal_id}")
        self.crystal_id = crystal_id


class MalformedCrystalError(CrystalError):
    """A crystal record exists but cannot be parsed."""

    def __init__(self, crystal_id: str, reason: str) -> None:
        super().__init__(f"Invalid crystal format for {crystal_id}: {reason}")
        self.crystal_id = crystal_id
        self.reason = reason


class NoContentAvailableError(CrystalError):
    """Neither explicit content nor auto-detection produced crystal content."""
