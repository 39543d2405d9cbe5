"""
Embedding Storage MCP (Model Context Protocol) Module
=====================================================
MCP server exposing a remote embedding / vector-search service to AI agents.

Available Tools:
    - store-content: Embed and store content under a unique path
    - search-content: Vector similarity search over stored content

Resources:
    - search://{query}: Search results as a markdown resource

Prompts:
    - save-memory: Guide the agent to store content
    - search-memory: Guide the agent to search content

Configuration:
    MCP settings are configured in config.yaml under the 'mcp' section:
    - transport: "stdio" or "sse"
    - host/port: SSE binding (if using SSE transport)
    - api_base_url: Base URL of the embedding service
    - allow_tools: List of permitted tools

Usage:
    from embedding_storage.mcp.server import build_server

    server = build_server()
    server.run(transport="stdio")
"""
