"""MCP server exposing crystal import/export and reference document tools."""

import sys
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger
from mcp.server.fastmcp import Context, FastMCP

from crystal_mcp.config import CRYSTAL_EXTENSION, CRYSTALS_DIR, DEFAULT_SPEC_VERSION, resolve_root
from crystal_mcp.core.matching.library import list_documents, read_document
from crystal_mcp.core.matching.matcher import find_best_match
from crystal_mcp.core.store.crystal_store import CrystalStore
from crystal_mcp.errors import CrystalNotFoundError, MalformedCrystalError, NoContentAvailableError
from crystal_mcp.models.document import CODEX_KIND, SPEC_KIND, DocumentKind

# --- Core functions (testable without MCP context) ---


def _import_document(root: Path, kind: DocumentKind, query: str) -> dict[str, Any]:
    candidates = list_documents(root, kind)
    if not candidates:
        return {
            "error": (
                f"No {kind.name} files ({kind.extension}) found in {kind.directory}/ directory"
            ),
            "query": query,
        }

    result = find_best_match(query, candidates, kind)
    if result.match is None:
        return {
            "error": f"No matching {kind.name} found for query: {query!r}",
            "query": query,
            "score": round(result.score, 2),
            "available": candidates,
            "suggestions": list(result.suggestions),
        }

    content = read_document(root, kind, result.match)
    logger.info(
        "Imported {} {} for {!r} (score {:.2f})", kind.name, result.match, query, result.score
    )
    return {
        "file": result.match,
        "query": query,
        "score": round(result.score, 2),
        "content": content,
    }


def import_crystal_spec(root: Path, *, spec_query: str) -> dict[str, Any]:
    """Find the crystal specification best matching a free-text query.

    Args:
        root: Project root holding ``public/protocols``.
        spec_query: Query such as "temporal crystallization 3.0".
    """
    return _import_document(root, SPEC_KIND, spec_query)


def import_codex(root: Path, *, spec_query: str) -> dict[str, Any]:
    """Find the codex best matching a free-text query.

    Codex-specific terms (mechanism, agent, protocol, ...) boost the score.

    Args:
        root: Project root holding ``public/codex``.
        spec_query: Query such as "mechanism awareness 2.0".
    """
    return _import_document(root, CODEX_KIND, spec_query)


def export_crystal(
    store: CrystalStore,
    *,
    title: str | None = None,
    spec_version: str = DEFAULT_SPEC_VERSION,
    manual_content: str | None = None,
) -> dict[str, Any]:
    """Store a new crystal and return its id.

    Args:
        store: Crystal store.
        title: Optional title override.
        spec_version: Crystal specification version.
        manual_content: Content to export. Auto-detected from context if omitted.
    """
    try:
        crystal = store.create(manual_content, title=title, spec_version=spec_version)
    except NoContentAvailableError as e:
        return {"error": str(e), "auto_detect_attempted": True}

    return {
        "id": crystal.id,
        "file": f"{CRYSTALS_DIR}/{crystal.id}{CRYSTAL_EXTENSION}",
        "title": crystal.title,
        "spec_version": crystal.spec_version,
        "created_at": crystal.created_at,
        "auto_detected": crystal.auto_detected,
    }


def import_crystal(
    store: CrystalStore,
    *,
    crystal_id: str,
    spec_version: str = DEFAULT_SPEC_VERSION,
) -> dict[str, Any]:
    """Load a stored crystal by id.

    On a miss, the ids of all stored crystals are returned instead.

    Args:
        store: Crystal store.
        crystal_id: Id returned by export_crystal.
        spec_version: Spec version to reconstruct with (informational).
    """
    try:
        crystal = store.get(crystal_id)
    except CrystalNotFoundError as e:
        return {"error": str(e), "crystal_id": crystal_id, "available": store.available_ids()}
    except MalformedCrystalError as e:
        return {"error": str(e), "crystal_id": crystal_id}

    return {**crystal.to_record(), "import_spec_version": spec_version}


def list_crystals(store: CrystalStore) -> dict[str, Any]:
    """List all stored crystals with metadata."""
    summaries = store.list_crystals()
    return {"crystals": [s.to_dict() for s in summaries], "count": len(summaries)}


# --- MCP Server Setup ---


@dataclass
class ServerContext:
    """Shared resources for the MCP server lifetime."""

    root: Path
    store: CrystalStore


@asynccontextmanager
async def server_lifespan(_server: FastMCP) -> AsyncIterator[ServerContext]:
    """Resolve the project root and open the crystal store."""
    root = resolve_root()
    logger.info("Crystal MCP server serving from {}", root)
    try:
        yield ServerContext(root=root, store=CrystalStore(root))
    finally:
        logger.info("Shutting down crystal MCP server")


mcp_server = FastMCP(
    "crystal-mcp-server",
    instructions="""\
Crystals are immutable content records stored under a generated id.

- Use export_crystal to store content; keep the returned id.
- Use import_crystal with that id to load it again. A miss lists known ids.
- Use list_crystals to see what is stored.
- Use import_crystal_spec / import_codex with a loose query such as
  "temporal 3.0" to load a reference document. A miss returns suggestions.
""",
    lifespan=server_lifespan,
)


def _ctx(mcp_ctx: Context) -> ServerContext:
    return mcp_ctx.request_context.lifespan_context  # type: ignore[return-value]


# --- MCP Tool Wrappers ---


@mcp_server.tool(name="import_crystal_spec")
async def import_crystal_spec_tool(ctx: Context, spec_query: str) -> dict[str, Any]:
    """Import a crystal specification by loose query.

    Args:
        spec_query: Crystal specification query (e.g. 'temporal crystallization 3.0',
            'basic 2.0', 'advanced crystallization 4.0').
    """
    return import_crystal_spec(_ctx(ctx).root, spec_query=spec_query)


@mcp_server.tool(name="import_codex")
async def import_codex_tool(ctx: Context, spec_query: str) -> dict[str, Any]:
    """Import a codex by loose query.

    Args:
        spec_query: Codex query (e.g. 'mechanism awareness 2.0',
            'agent transmission 1.0', 'probability patterns').
    """
    return import_codex(_ctx(ctx).root, spec_query=spec_query)


@mcp_server.tool(name="export_crystal")
async def export_crystal_tool(
    ctx: Context,
    title: str | None = None,
    spec_version: str = DEFAULT_SPEC_VERSION,
    manual_content: str | None = None,
) -> dict[str, Any]:
    """Export a crystal and get back its id.

    Args:
        title: Optional title override for the crystal.
        spec_version: Crystal specification version.
        manual_content: Crystal content to export (optional - uses latest crystal
            artifact from context if not provided).
    """
    return export_crystal(
        _ctx(ctx).store,
        title=title,
        spec_version=spec_version,
        manual_content=manual_content,
    )


@mcp_server.tool(name="import_crystal")
async def import_crystal_tool(
    ctx: Context,
    crystal_id: str,
    spec_version: str = DEFAULT_SPEC_VERSION,
) -> dict[str, Any]:
    """Import a stored crystal by id.

    Args:
        crystal_id: Id of the crystal to import.
        spec_version: Crystal specification version to use for reconstruction.
    """
    return import_crystal(_ctx(ctx).store, crystal_id=crystal_id, spec_version=spec_version)


@mcp_server.tool(name="list_crystals")
async def list_crystals_tool(ctx: Context) -> dict[str, Any]:
    """List all exported crystals with metadata."""
    return list_crystals(_ctx(ctx).store)


def run_mcp_server(*, verbose: bool = False) -> None:
    """Run the MCP server with stdio transport."""
    from crystal_mcp.logging_config import configure_logging

    configure_logging(verbose=verbose)
    logger.info("Crystal MCP server starting")
    try:
        mcp_server.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("Crystal MCP server failed")
        sys.exit(1)
