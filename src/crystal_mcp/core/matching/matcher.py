"""Fuzzy filename matching for reference documents."""

import re
from collections.abc import Sequence

from loguru import logger

from crystal_mcp.config import MATCH_THRESHOLD, MAX_SUGGESTIONS
from crystal_mcp.models.document import DocumentKind, MatchResult

_SEPARATORS = re.compile(r"[_.-]")
_VERSION = re.compile(r"\d+\.?\d*")

EXACT_TOKEN_SCORE = 1.0
PARTIAL_TOKEN_SCORE = 0.7
VERSION_SCORE = 0.8
BONUS_TERM_SCORE = 0.5


def tokenize_query(query: str) -> list[str]:
    """Lower-case and split a query on whitespace."""
    return query.lower().strip().split()


def normalize_filename(filename: str) -> str:
    """Lower-case a filename and turn ``_``, ``.`` and ``-`` into spaces."""
    return _SEPARATORS.sub(" ", filename.lower())


def _extract_versions(tokens: Sequence[str]) -> list[str]:
    return [version for token in tokens for version in _VERSION.findall(token)]


def score_candidate(query_tokens: Sequence[str], filename: str, kind: DocumentKind) -> float:
    """Score one candidate filename against tokenized query words.

    Every (query token, filename token) pair contributes when either contains
    the other, so one query token may score against several filename tokens.
    The sum is divided by the number of query tokens.

    Args:
        query_tokens: Output of :func:`tokenize_query`.
        filename: Candidate filename, extension included.
        kind: Document kind providing the bonus vocabulary.
    """
    if not query_tokens:
        return 0.0

    normalized = normalize_filename(filename)
    name_tokens = normalized.split()

    score = 0.0
    for query_token in query_tokens:
        for name_token in name_tokens:
            if query_token == name_token:
                score += EXACT_TOKEN_SCORE
            elif query_token in name_token or name_token in query_token:
                score += PARTIAL_TOKEN_SCORE

    query_versions = _extract_versions(query_tokens)
    name_versions = _extract_versions(name_tokens)
    for query_version in query_versions:
        for name_version in name_versions:
            if query_version == name_version:
                score += VERSION_SCORE

    for term in kind.bonus_terms:
        if term in query_tokens and term in normalized:
            score += BONUS_TERM_SCORE

    return score / len(query_tokens)


def generate_suggestions(
    candidates: Sequence[str], kind: DocumentKind, *, limit: int = MAX_SUGGESTIONS
) -> list[str]:
    """Turn candidate filenames into example queries.

    Suggestions depend only on the candidates, never on the query.
    """
    suggestions: list[str] = []
    for filename in candidates[:limit]:
        stem = filename.removesuffix(kind.extension)
        parts = [part.lower() for part in _SEPARATORS.split(stem)]

        if kind.filler_term:
            # Drop the filler word and weave it back in between the remaining parts.
            kept = [part for part in parts if part != kind.filler_term]
            suggestion = f" {kind.filler_term} ".join(kept)
            suggestion = re.sub(rf"{re.escape(kind.filler_term)}\s*$", "", suggestion)
        else:
            suggestion = " ".join(parts)
        suggestion = suggestion.strip()

        suggestions.append(suggestion or _SEPARATORS.sub(" ", stem.lower()))
    return suggestions


def find_best_match(
    query: str,
    candidates: Sequence[str],
    kind: DocumentKind,
    *,
    threshold: float = MATCH_THRESHOLD,
) -> MatchResult:
    """Find the candidate that best matches a free-text query.

    Candidates are ranked by descending score; equal scores keep their input
    order. The top candidate is reported as ``match`` only when its score is
    at least ``threshold``, but ``score`` always carries the top value.

    Args:
        query: Free-text query, e.g. ``"temporal 3.0"``.
        candidates: Candidate filenames in directory order.
        kind: Document kind (scoring vocabulary and suggestion rules).
        threshold: Minimum score for a definite match.
    """
    tokens = tokenize_query(query)
    scored = [(filename, score_candidate(tokens, filename, kind)) for filename in candidates]
    ranking = sorted(scored, key=lambda item: item[1], reverse=True)

    best_name, best_score = ranking[0] if ranking else (None, 0.0)
    logger.debug("Best {} match for {!r}: {} ({:.2f})", kind.name, query, best_name, best_score)

    return MatchResult(
        match=best_name if best_name is not None and best_score >= threshold else None,
        score=best_score,
        suggestions=tuple(generate_suggestions(candidates, kind)),
        ranking=tuple(ranking),
    )
