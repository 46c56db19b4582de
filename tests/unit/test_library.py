"""Tests for reference document discovery and path containment."""

from pathlib import Path

import pytest

from crystal_mcp.core.matching.library import list_documents, read_document
from crystal_mcp.errors import PathEscapeError
from crystal_mcp.models.document import CODEX_KIND, SPEC_KIND
from crystal_mcp.paths import safe_path


def test_list_documents_filters_by_extension_and_sorts(project_root: Path) -> None:
    (project_root / "public" / "protocols" / "nested.cp").mkdir()

    names = list_documents(project_root, SPEC_KIND)

    assert names == ["CRYSTALLIZATION_BASIC_2.0.cp", "CRYSTALLIZATION_TEMPORAL_3.0.cp"]


def test_list_documents_sees_new_files_without_caching(project_root: Path) -> None:
    before = list_documents(project_root, CODEX_KIND)
    (project_root / "public" / "codex" / "NEW_PROTOCOL.cx").write_text("new")

    after = list_documents(project_root, CODEX_KIND)

    assert len(after) == len(before) + 1
    assert "NEW_PROTOCOL.cx" in after


def test_list_documents_returns_empty_for_missing_directory(tmp_path: Path) -> None:
    assert list_documents(tmp_path, SPEC_KIND) == []


def test_read_document_returns_text(project_root: Path) -> None:
    text = read_document(project_root, SPEC_KIND, "CRYSTALLIZATION_TEMPORAL_3.0.cp")

    assert text == "temporal crystallization protocol body"


def test_read_document_rejects_escaping_filename(project_root: Path) -> None:
    with pytest.raises(PathEscapeError):
        read_document(project_root, SPEC_KIND, "../../../outside.cp")


def test_safe_path_resolves_below_root(tmp_path: Path) -> None:
    assert safe_path(tmp_path, "a", "b.txt") == tmp_path.resolve() / "a" / "b.txt"


def test_safe_path_accepts_root_itself(tmp_path: Path) -> None:
    assert safe_path(tmp_path) == tmp_path.resolve()


def test_safe_path_rejects_parent_traversal(tmp_path: Path) -> None:
    with pytest.raises(PathEscapeError, match="outside"):
        safe_path(tmp_path / "root", "..", "elsewhere")


def test_safe_path_rejects_sibling_sharing_name_prefix(tmp_path: Path) -> None:
    root = tmp_path / "root"
    root.mkdir()
    (tmp_path / "root-evil").mkdir()

    with pytest.raises(PathEscapeError):
        safe_path(root, "../root-evil/secret")


def test_safe_path_rejects_absolute_part(tmp_path: Path) -> None:
    with pytest.raises(PathEscapeError):
        safe_path(tmp_path, "/etc/passwd")
