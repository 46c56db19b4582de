"""Shared test fixtures."""

from pathlib import Path

import pytest

from crystal_mcp.core.store.crystal_store import CrystalStore

PROTOCOL_FILES = {
    "CRYSTALLIZATION_TEMPORAL_3.0.cp": "temporal crystallization protocol body",
    "CRYSTALLIZATION_BASIC_2.0.cp": "basic crystallization protocol body",
}

CODEX_FILES = {
    "MECHANISM_AWARENESS_2.0.cx": "mechanism awareness codex body",
    "AGENT_TRANSMISSION_1.0.cx": "agent transmission codex body",
    "PROBABILITY_PATTERNS.cx": "probability patterns codex body",
}


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Return a project root with reference documents in place."""
    root = tmp_path / "project"
    protocols = root / "public" / "protocols"
    codex = root / "public" / "codex"
    protocols.mkdir(parents=True)
    codex.mkdir(parents=True)
    for name, text in PROTOCOL_FILES.items():
        (protocols / name).write_text(text)
    for name, text in CODEX_FILES.items():
        (codex / name).write_text(text)
    # Not a candidate: wrong extension.
    (protocols / "README.md").write_text("ignored")
    return root


@pytest.fixture
def store(project_root: Path) -> CrystalStore:
    """Return a crystal store rooted at the test project."""
    return CrystalStore(project_root)
