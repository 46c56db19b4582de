"""Crystal MCP server: crystal export/import and fuzzy reference document lookup."""

from crystal_mcp.core.matching.matcher import find_best_match
from crystal_mcp.core.store.crystal_store import CrystalStore
from crystal_mcp.core.store.detect import NullContentDetector, StaticContentDetector
from crystal_mcp.models.crystal import Crystal, CrystalSummary
from crystal_mcp.models.document import CODEX_KIND, SPEC_KIND, DocumentKind, MatchResult
from crystal_mcp.protocols import ContentDetector

__all__ = [
    "CODEX_KIND",
    "SPEC_KIND",
    "ContentDetector",
    "Crystal",
    "CrystalStore",
    "CrystalSummary",
    "DocumentKind",
    "MatchResult",
    "NullContentDetector",
    "StaticContentDetector",
    "find_best_match",
]
