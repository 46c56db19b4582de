"""Configuration constants for crystal-mcp."""

import os
from pathlib import Path

# Environment variable overriding the project root. Falls back to the cwd.
ROOT_ENV_VAR: str = "CRYSTAL_MCP_ROOT"

# Directories below the project root.
PROTOCOLS_DIR: str = "public/protocols"
CODEX_DIR: str = "public/codex"
CRYSTALS_DIR: str = "public/crystals"

# File extensions per document kind.
PROTOCOL_EXTENSION: str = ".cp"
CODEX_EXTENSION: str = ".cx"
CRYSTAL_EXTENSION: str = ".crystal"

# Minimum normalized score for a definite match.
MATCH_THRESHOLD: float = 0.3

# Max number of suggestions returned alongside a match result.
MAX_SUGGESTIONS: int = 5

DEFAULT_SPEC_VERSION: str = "3.0"


def resolve_root(root: str | Path | None = None) -> Path:
    """Return the absolute project root.

    An explicit argument wins, then ``CRYSTAL_MCP_ROOT``, then the current
    working directory.
    """
    if root is None:
        root = os.environ.get(ROOT_ENV_VAR) or Path.cwd()
    return Path(root).expanduser().resolve()
