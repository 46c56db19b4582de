"""Domain models for stored crystals."""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class Crystal:
    """A persisted, immutable crystal record."""

    id: str
    title: str
    spec_version: str
    created_at: str
    auto_detected: bool
    content: str

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-serializable record, fields in on-disk order."""
        return asdict(self)


@dataclass(frozen=True)
class CrystalSummary:
    """A single entry of a crystal listing."""

    id: str
    title: str
    spec_version: str
    created_at: str
    size: int
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        if self.error is None:
            del data["error"]
        return data
