"""File-backed store for exported crystals."""

import json
import os
import tempfile
import uuid
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from loguru import logger

from crystal_mcp.config import CRYSTAL_EXTENSION, CRYSTALS_DIR, DEFAULT_SPEC_VERSION
from crystal_mcp.core.store.detect import NullContentDetector
from crystal_mcp.errors import CrystalNotFoundError, MalformedCrystalError, NoContentAvailableError
from crystal_mcp.models.crystal import Crystal, CrystalSummary
from crystal_mcp.paths import safe_path
from crystal_mcp.protocols import ContentDetector


def new_crystal_id() -> str:
    """Generate a random opaque crystal id."""
    return uuid.uuid4().hex


def _atomic_write_text(path: Path, content: str) -> None:
    """Write to a temp file next to ``path``, then move it into place."""
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(content)
        os.replace(tmp_path, str(path))
    except BaseException:
        Path(tmp_path).unlink(missing_ok=True)
        raise


class CrystalStore:
    """Create, read and enumerate crystals below ``<root>/public/crystals``.

    Records are JSON files named ``<id>.crystal``. They are written once and
    never modified: every export produces a new id.
    """

    def __init__(self, root: Path, *, detector: ContentDetector | None = None) -> None:
        self.root = root
        self.directory = safe_path(root, CRYSTALS_DIR)
        self.detector: ContentDetector = detector or NullContentDetector()

    def _record_path(self, crystal_id: str) -> Path:
        return safe_path(self.root, CRYSTALS_DIR, f"{crystal_id}{CRYSTAL_EXTENSION}")

    def _record_files(self) -> list[Path]:
        if not self.directory.is_dir():
            return []
        return sorted(
            p
            for p in self.directory.iterdir()
            if p.is_file() and p.name.endswith(CRYSTAL_EXTENSION)
        )

    def auto_detect_content(self) -> str | None:
        """Ask the injected detector for content to export."""
        return self.detector.detect_latest_content()

    def create(
        self,
        content: str | None = None,
        *,
        title: str | None = None,
        spec_version: str = DEFAULT_SPEC_VERSION,
    ) -> Crystal:
        """Persist a new crystal and return it.

        Args:
            content: Crystal content. When empty or None, the detector is asked.
            title: Optional title; a default based on the id is used otherwise.
            spec_version: Crystal specification version recorded with the content.

        Raises:
            NoContentAvailableError: No content was given and none was detected.
        """
        crystal_id = new_crystal_id()

        if content:
            auto_detected = False
            default_title = f"Manual_Crystal_{crystal_id[:8]}"
        else:
            content = self.auto_detect_content()
            if not content:
                msg = (
                    "No crystal artifact found in context window. Please provide "
                    "manual_content or ensure there's a crystal artifact in the conversation."
                )
                raise NoContentAvailableError(msg)
            auto_detected = True
            default_title = f"Auto_Crystal_{crystal_id[:8]}"

        crystal = Crystal(
            id=crystal_id,
            title=title or default_title,
            spec_version=spec_version,
            created_at=datetime.now(UTC).isoformat(),
            auto_detected=auto_detected,
            content=content,
        )

        self.directory.mkdir(parents=True, exist_ok=True)
        path = self._record_path(crystal_id)
        _atomic_write_text(path, json.dumps(crystal.to_record(), indent=2, ensure_ascii=False))
        logger.info("Exported crystal {} ({} chars) to {}", crystal_id, len(content), path)
        return crystal

    def get(self, crystal_id: str) -> Crystal:
        """Load a crystal by id.

        Raises:
            CrystalNotFoundError: No record exists for ``crystal_id``.
            MalformedCrystalError: The record is not UTF-8 JSON, is not an object,
                or has no string content.
            PathEscapeError: ``crystal_id`` resolves outside the project root.
        """
        path = self._record_path(crystal_id)
        try:
            text = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise CrystalNotFoundError(crystal_id) from None
        except UnicodeDecodeError as e:
            raise MalformedCrystalError(crystal_id, "not valid UTF-8") from e

        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedCrystalError(crystal_id, f"not valid JSON ({e})") from e
        if not isinstance(data, dict):
            raise MalformedCrystalError(crystal_id, "record is not a JSON object")
        content = data.get("content")
        if not isinstance(content, str) or not content:
            raise MalformedCrystalError(crystal_id, "missing content field")

        return Crystal(
            id=str(data.get("id") or crystal_id),
            title=str(data.get("title") or "Untitled"),
            spec_version=str(data.get("spec_version") or "Unknown"),
            created_at=str(data.get("created_at") or "Unknown"),
            auto_detected=bool(data.get("auto_detected", False)),
            content=content,
        )

    def list_crystals(self) -> list[CrystalSummary]:
        """Summarize every stored crystal, sorted by file name.

        Records that cannot be parsed are still listed, flagged with ``error``.
        """
        summaries: list[CrystalSummary] = []
        for path in self._record_files():
            file_id = path.name.removesuffix(CRYSTAL_EXTENSION)
            try:
                text = path.read_text(encoding="utf-8")
                data: Any = json.loads(text)
                if not isinstance(data, dict):
                    msg = "record is not a JSON object"
                    raise ValueError(msg)
            except (ValueError, UnicodeDecodeError):
                logger.warning("Failed to parse crystal file {}", path)
                summaries.append(
                    CrystalSummary(
                        id=file_id,
                        title="Parse Error",
                        spec_version="Unknown",
                        created_at="Unknown",
                        size=0,
                        error="Failed to parse crystal file",
                    )
                )
                continue

            summaries.append(
                CrystalSummary(
                    id=str(data.get("id") or file_id),
                    title=str(data.get("title") or "Untitled"),
                    spec_version=str(data.get("spec_version") or "Unknown"),
                    created_at=str(data.get("created_at") or "Unknown"),
                    size=len(text),
                )
            )
        return summaries

    def available_ids(self) -> list[str]:
        """Ids of all stored crystals, derived from file names."""
        return [path.name.removesuffix(CRYSTAL_EXTENSION) for path in self._record_files()]
