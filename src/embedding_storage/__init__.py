"""
Embedding Storage - MCP Knowledge Memory Server
===============================================

Exposes a remote embedding and vector-search service to AI agents through
the Model Context Protocol.

Main Packages:
    - core: Configuration, logging and the exception hierarchy
    - mcp: MCP server, handlers, schemas and the HTTP API adapter
    - cli: Command-line interface

Quick Start:
    embedding-storage serve                 # stdio MCP server
    embedding-storage search "vector databases"

Version: 1.0.0
"""

__version__ = "1.0.0"
