"""
Embedding Storage CLI - Main Entry Point

Usage:
    embedding-storage serve                            # MCP server over stdio
    embedding-storage serve --transport sse --port 8110
    embedding-storage store "Some notes" --path /notes/1
    embedding-storage search "vector databases" --max-matches 3
    embedding-storage check                            # store + search smoke test
"""

import asyncio
import json
import sys
from dataclasses import replace
from pathlib import Path
from typing import Optional

import click
from loguru import logger

from embedding_storage.core.config import SUPPORTED_TRANSPORTS, AppConfig, get_config, load_config
from embedding_storage.core.exceptions import EmbeddingStorageError
from embedding_storage.core.logging_config import configure_logging
from embedding_storage.mcp.adapters.api_adapter import EmbeddingAPIAdapter
from embedding_storage.mcp.handlers import EmbeddingToolHandlers
from embedding_storage.mcp.schemas import SearchRequest, StoreRequest
from embedding_storage.mcp.server import run_server

SAMPLE_CONTENT = (
    "This is some test content about artificial intelligence. AI is transforming "
    "many industries through machine learning and neural networks."
)
SAMPLE_PATH = "/test/ai-content"
SAMPLE_QUERY = "Tell me about machine learning"


def _config(ctx: click.Context) -> AppConfig:
    return ctx.obj["config"]


def _client(cfg: AppConfig) -> EmbeddingAPIAdapter:
    return EmbeddingAPIAdapter(
        base_url=cfg.mcp.api_base_url,
        timeout_seconds=cfg.mcp.timeout_seconds,
    )


@click.group()
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True),
    help="Path to config.yaml file",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose output",
)
@click.pass_context
def cli(ctx, config: Optional[str], verbose: bool):
    """
    Embedding Storage - MCP server for a remote knowledge memory.
    """
    ctx.ensure_object(dict)

    try:
        cfg = load_config(Path(config)) if config else get_config()
    except EmbeddingStorageError as exc:
        raise click.ClickException(str(exc)) from exc

    ctx.obj["config"] = cfg
    configure_logging("DEBUG" if verbose else cfg.observability.log_level)


@cli.command()
@click.option(
    "--transport",
    "-t",
    type=click.Choice(SUPPORTED_TRANSPORTS),
    default=None,
    help="MCP transport (defaults to the configured one)",
)
@click.option("--host", default=None, help="SSE bind host")
@click.option("--port", type=int, default=None, help="SSE bind port")
@click.pass_context
def serve(ctx, transport: Optional[str], host: Optional[str], port: Optional[int]):
    """
    Run the MCP server.
    """
    cfg = _config(ctx)
    if host or port:
        cfg = replace(
            cfg,
            mcp=replace(cfg.mcp, host=host or cfg.mcp.host, port=port or cfg.mcp.port),
        )
    try:
        run_server(cfg, transport=transport)
    except KeyboardInterrupt:
        logger.info("Stopping server...")
    except EmbeddingStorageError as exc:
        click.echo(json.dumps(exc.to_dict()), err=True)
        sys.exit(1)
    except Exception as exc:
        logger.error("Error starting server: {}", exc)
        sys.exit(1)


@cli.command()
@click.argument("content", required=True)
@click.option("--path", "-p", required=True, help="Unique identifier path for the content")
@click.option("--type", "content_type", default=None, help="Content type (default: markdown)")
@click.option("--source", default=None, help="Source of the content (default: api)")
@click.option("--parent-path", default=None, help="Path of the parent content")
@click.option("--meta", "-m", default=None, help="JSON metadata as string")
@click.pass_context
def store(
    ctx,
    content: str,
    path: str,
    content_type: Optional[str],
    source: Optional[str],
    parent_path: Optional[str],
    meta: Optional[str],
):
    """
    Store content in the embedding service.

    Example:
        embedding-storage store "Notes on HNSW" --path /notes/hnsw
    """
    metadata = None
    if meta:
        try:
            metadata = json.loads(meta)
        except json.JSONDecodeError:
            raise click.BadParameter(f"Invalid JSON metadata: {meta}", param_hint="--meta")
        if not isinstance(metadata, dict):
            raise click.BadParameter("Metadata must be a JSON object", param_hint="--meta")

    handlers = EmbeddingToolHandlers(_client(_config(ctx)))
    reply = asyncio.run(
        handlers.store_content(
            content=content,
            path=path,
            type=content_type,
            source=source,
            parent_path=parent_path,
            meta=metadata,
        )
    )

    click.echo(reply.text, err=reply.is_error)
    if reply.is_error:
        ctx.exit(1)


@cli.command()
@click.argument("query", required=True)
@click.option("--max-matches", "-k", type=int, default=None, help="Maximum number of matches to return")
@click.pass_context
def search(ctx, query: str, max_matches: Optional[int]):
    """
    Search stored content.

    Example:
        embedding-storage search "how do vector indexes work?"
    """
    handlers = EmbeddingToolHandlers(_client(_config(ctx)))
    reply = asyncio.run(handlers.search_content(query=query, max_matches=max_matches))

    click.echo(reply.text, err=reply.is_error)
    if reply.is_error:
        ctx.exit(1)


@cli.command()
@click.pass_context
def check(ctx):
    """
    Smoke test: store a sample document, then search for it.
    """
    cfg = _config(ctx)
    client = _client(cfg)
    click.echo(f"Testing embedding service at {cfg.mcp.api_base_url}")

    store_result = client.store(
        StoreRequest(content=SAMPLE_CONTENT, path=SAMPLE_PATH, type="markdown", source="test-script")
    )
    click.echo("\n--- Store Content Result ---")
    click.echo(json.dumps(store_result.model_dump(by_alias=True, exclude_none=True), indent=2))

    search_result = client.search(SearchRequest(prompt=SAMPLE_QUERY, match_count=3))
    click.echo("\n--- Search Content Result ---")
    click.echo(json.dumps(search_result.model_dump(by_alias=True, exclude_none=True), indent=2))

    if not store_result.success or search_result.error:
        ctx.exit(1)


def main() -> None:
    cli(obj={})


if __name__ == "__main__":
    main()
