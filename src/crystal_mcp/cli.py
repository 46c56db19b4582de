"""CLI for crystal-mcp (reference document lookup, crystal store, MCP server)."""

import asyncio
import json
import os
from pathlib import Path
from typing import Annotated, Any

import typer
from loguru import logger

from crystal_mcp.config import DEFAULT_SPEC_VERSION, ROOT_ENV_VAR, resolve_root
from crystal_mcp.core.store.crystal_store import CrystalStore
from crystal_mcp.core.store.detect import StaticContentDetector
from crystal_mcp.logging_config import configure_logging
from crystal_mcp.mcp.server import (
    export_crystal,
    import_codex,
    import_crystal,
    import_crystal_spec,
    list_crystals,
    mcp_server,
    run_mcp_server,
)

app = typer.Typer(help="Crystal MCP: export and import crystals, look up specs and codices.")

RootOption = Annotated[
    Path | None,
    typer.Option("--root", "-r", help=f"Project root (default: ${ROOT_ENV_VAR} or cwd)"),
]


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = {"verbose": verbose}


def _echo_json(data: dict[str, Any]) -> None:
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _echo_import(result: dict[str, Any], output_json: bool) -> None:
    if output_json:
        _echo_json(result)
    elif "error" in result:
        typer.echo(result["error"])
        if result.get("available"):
            typer.echo("\nAvailable files:")
            for name in result["available"]:
                typer.echo(f"  - {name}")
        if result.get("suggestions"):
            typer.echo("\nSuggestions:")
            for suggestion in result["suggestions"]:
                typer.echo(f"  - {suggestion}")
    else:
        typer.echo(f"File: {result['file']}  (score {result['score']:.2f})\n")
        typer.echo(result["content"])

    if "error" in result:
        raise typer.Exit(1)


@app.command()
def spec(
    query: str = typer.Argument(..., help="Specification query, e.g. 'temporal 3.0'"),
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Look up a crystal specification by loose query."""
    _echo_import(import_crystal_spec(resolve_root(root), spec_query=query), output_json)


@app.command()
def codex(
    query: str = typer.Argument(..., help="Codex query, e.g. 'mechanism awareness 2.0'"),
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Look up a codex by loose query."""
    _echo_import(import_codex(resolve_root(root), spec_query=query), output_json)


@app.command()
def export(
    title: Annotated[str | None, typer.Option("--title", "-t", help="Crystal title")] = None,
    spec_version: str = typer.Option(DEFAULT_SPEC_VERSION, "--spec-version", "-s"),
    content: Annotated[
        str | None, typer.Option("--content", "-c", help="Crystal content")
    ] = None,
    content_file: Annotated[
        Path | None, typer.Option("--file", "-f", help="Read crystal content from a file")
    ] = None,
    detect_from: Annotated[
        Path | None,
        typer.Option("--detect-from", help="Feed this file to auto-detection"),
    ] = None,
    root: RootOption = None,
) -> None:
    """Export a new crystal and print its id."""
    if content is not None and content_file is not None:
        typer.echo("Use either --content or --file, not both.")
        raise typer.Exit(2)
    if content_file is not None:
        content = content_file.read_text(encoding="utf-8")

    detector = None
    if detect_from is not None:
        detector = StaticContentDetector(detect_from.read_text(encoding="utf-8"))

    store = CrystalStore(resolve_root(root), detector=detector)
    result = export_crystal(store, title=title, spec_version=spec_version, manual_content=content)
    if "error" in result:
        typer.echo(result["error"])
        raise typer.Exit(1)

    typer.echo(f"Crystal exported: {result['id']}")
    typer.echo(f"  file: {result['file']}")
    typer.echo(f"  title: {result['title']}  spec: {result['spec_version']}")
    typer.echo(f"  auto-detected: {result['auto_detected']}")


@app.command()
def show(
    crystal_id: str = typer.Argument(..., help="Crystal id"),
    spec_version: str = typer.Option(DEFAULT_SPEC_VERSION, "--spec-version", "-s"),
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print a stored crystal."""
    result = import_crystal(
        CrystalStore(resolve_root(root)), crystal_id=crystal_id, spec_version=spec_version
    )
    if output_json:
        _echo_json(result)
    elif "error" in result:
        typer.echo(result["error"])
        if "available" in result:
            typer.echo("\nAvailable crystals:")
            for available_id in result["available"] or ["No crystals found"]:
                typer.echo(f"  {available_id}")
    else:
        typer.echo(f"Title: {result['title']}")
        typer.echo(f"Original spec version: {result['spec_version']}")
        typer.echo(f"Created: {result['created_at']}\n")
        typer.echo(result["content"])

    if "error" in result:
        raise typer.Exit(1)


@app.command(name="list")
def list_cmd(
    root: RootOption = None,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List stored crystals."""
    result = list_crystals(CrystalStore(resolve_root(root)))
    if output_json:
        _echo_json(result)
        return

    typer.echo(f"{result['count']} crystals:\n")
    for c in result["crystals"]:
        marker = f"  [{c['error']}]" if "error" in c else ""
        typer.echo(f"  {c['id']}  {c['title']}{marker}")
        typer.echo(f"    spec {c['spec_version']}, {c['size']} chars")
        typer.echo(f"    created {c['created_at']}")


@app.command()
def tools() -> None:
    """List the tools registered on the MCP server."""
    registered = asyncio.run(mcp_server.list_tools())
    for tool in registered:
        typer.echo(tool.name)
    logger.debug("{} tools registered", len(registered))


@app.command()
def serve(ctx: typer.Context, root: RootOption = None) -> None:
    """Start the MCP server (stdio transport)."""
    if root is not None:
        os.environ[ROOT_ENV_VAR] = str(resolve_root(root))
    run_mcp_server(verbose=bool(ctx.obj and ctx.obj.get("verbose")))
