"""Path containment helpers."""

from pathlib import Path

from crystal_mcp.errors import PathEscapeError


def safe_path(root: Path, *parts: str) -> Path:
    """Resolve ``parts`` below ``root``, refusing anything outside it.

    The check compares path segments of the resolved paths, so a sibling
    such as ``/srv/root-evil`` is not mistaken for a child of ``/srv/root``.

    Raises:
        PathEscapeError: The resolved path is not ``root`` or below it.
    """
    base = root.resolve()
    resolved = base.joinpath(*parts).resolve()
    if not resolved.is_relative_to(base):
        msg = f"Path escapes project root: {resolved} is outside {base}"
        raise PathEscapeError(msg)
    return resolved
