"""Reference document kinds and match results."""

from dataclasses import dataclass

from crystal_mcp.config import CODEX_DIR, CODEX_EXTENSION, PROTOCOL_EXTENSION, PROTOCOLS_DIR


@dataclass(frozen=True)
class DocumentKind:
    """A class of static reference documents sharing one scoring vocabulary."""

    name: str
    directory: str
    extension: str
    bonus_terms: tuple[str, ...] = ()
    filler_term: str | None = None


@dataclass(frozen=True)
class MatchResult:
    """Outcome of matching a query against candidate filenames.

    ``ranking`` lists every candidate with its score, best first. It is kept
    for debug logging and tests; tool results expose only the other fields.
    """

    match: str | None
    score: float
    suggestions: tuple[str, ...]
    ranking: tuple[tuple[str, float], ...] = ()


SPEC_KIND = DocumentKind(
    name="spec",
    directory=PROTOCOLS_DIR,
    extension=PROTOCOL_EXTENSION,
    filler_term="crystallization",
)

CODEX_KIND = DocumentKind(
    name="codex",
    directory=CODEX_DIR,
    extension=CODEX_EXTENSION,
    bonus_terms=(
        "mechanism",
        "awareness",
        "agent",
        "transmission",
        "protocol",
        "probability",
        "pattern",
    ),
)
