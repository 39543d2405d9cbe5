"""
Embedding Storage MCP Server
============================
MCP bridge exposing the embedding service as tools, a search resource and
prompts for agent clients.
"""

from typing import Annotated, Any, Callable, Dict, Optional

from loguru import logger
from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent
from pydantic import Field

from embedding_storage.core.config import SUPPORTED_TRANSPORTS, AppConfig, get_config
from embedding_storage.core.exceptions import UnsupportedTransportError
from embedding_storage.core.logging_config import configure_logging
from embedding_storage.mcp.adapters.api_adapter import EmbeddingAPIAdapter
from embedding_storage.mcp.handlers import (
    MARKDOWN_MIME_TYPE,
    EmbeddingToolHandlers,
    save_memory_prompt,
    search_memory_prompt,
)
from embedding_storage.mcp.schemas import ToolReply


def _to_call_tool_result(reply: ToolReply) -> CallToolResult:
    return CallToolResult(
        content=[TextContent(type="text", text=reply.text)],
        isError=reply.is_error,
    )


def build_server(config: AppConfig | None = None, client: EmbeddingAPIAdapter | None = None):
    cfg = config or get_config()

    if client is None:
        client = EmbeddingAPIAdapter(
            base_url=cfg.mcp.api_base_url,
            timeout_seconds=cfg.mcp.timeout_seconds,
        )
    handlers = EmbeddingToolHandlers(client)

    server = FastMCP(cfg.mcp.name, host=cfg.mcp.host, port=cfg.mcp.port)
    allow_tools = set(cfg.mcp.allow_tools)

    def register_tool(name: str, fn: Callable[[], None]) -> None:
        if name in allow_tools:
            fn()
        else:
            logger.info("Skipping disabled MCP tool: {}", name)

    def register_store_content() -> None:
        @server.tool(name="store-content", description="Store content to memory")
        async def store_content(
            content: Annotated[str, Field(description="The content to store")],
            path: Annotated[str, Field(description="Unique identifier path for the content")],
            type: Annotated[Optional[str], Field(description="Content type (e.g., 'markdown')")] = None,
            source: Annotated[Optional[str], Field(description="Source of the content")] = None,
            parentPath: Annotated[
                Optional[str], Field(description="Path of the parent content (if applicable)")
            ] = None,
            meta: Annotated[
                Optional[Dict[str, Any]], Field(description="Arbitrary metadata stored with the page")
            ] = None,
        ) -> CallToolResult:
            reply = await handlers.store_content(
                content=content,
                path=path,
                type=type,
                source=source,
                parent_path=parentPath,
                meta=meta,
            )
            return _to_call_tool_result(reply)

    def register_search_content() -> None:
        @server.tool(name="search-content", description="Retrieve content from memory")
        async def search_content(
            query: Annotated[str, Field(description="The search query")],
            maxMatches: Annotated[
                Optional[int], Field(description="Maximum number of matches to return")
            ] = None,
        ) -> CallToolResult:
            reply = await handlers.search_content(query=query, max_matches=maxMatches)
            return _to_call_tool_result(reply)

    register_tool("store-content", register_store_content)
    register_tool("search-content", register_search_content)

    @server.resource(
        "search://{query}",
        name="search-results",
        description="Vector search results for a query",
        mime_type=MARKDOWN_MIME_TYPE,
    )
    async def search_results(query: str) -> str:
        """
        Read ``search://{query}``.

        FastMCP fixes the MIME type per template, so every reply is tagged
        ``text/markdown`` on the wire, including error and no-match text.
        ``ResourceReply.mime_type`` keeps the per-reply distinction.
        """
        reply = await handlers.read_search_resource(f"search://{query}", query)
        return reply.text

    @server.prompt(name="save-memory", description="A prompt to help store new content with embeddings")
    def save_memory(
        path: Annotated[str, Field(description="Unique identifier path for the content")],
        content: Annotated[str, Field(description="The content to store")],
    ) -> str:
        return save_memory_prompt(path, content)

    @server.prompt(name="search-memory", description="A prompt to search for knowledge")
    def search_memory(query: Annotated[str, Field(description="The search query")]) -> str:
        return search_memory_prompt(query)

    return server


def run_server(cfg: AppConfig, transport: str | None = None) -> None:
    transport = transport or cfg.mcp.transport
    if transport not in SUPPORTED_TRANSPORTS:
        raise UnsupportedTransportError(
            transport=transport,
            supported_transports=list(SUPPORTED_TRANSPORTS),
        )

    server = build_server(cfg)
    logger.info("MCP Embedding Storage Server running ({} transport)", transport)
    server.run(transport=transport)


def main() -> None:
    cfg = get_config()
    configure_logging(cfg.observability.log_level)
    run_server(cfg)


if __name__ == "__main__":
    main()
