"""Directory access for reference documents (specifications and codices)."""

from pathlib import Path

from loguru import logger

from crystal_mcp.models.document import DocumentKind
from crystal_mcp.paths import safe_path


def list_documents(root: Path, kind: DocumentKind) -> list[str]:
    """List candidate filenames of ``kind``, sorted by name.

    The directory is read on every call; nothing is cached. A missing
    directory yields no candidates.
    """
    directory = safe_path(root, kind.directory)
    if not directory.is_dir():
        logger.debug("No {} directory at {}", kind.name, directory)
        return []
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(kind.extension)
    )


def read_document(root: Path, kind: DocumentKind, filename: str) -> str:
    """Read a reference document's text."""
    path = safe_path(root, kind.directory, filename)
    return path.read_text(encoding="utf-8")
