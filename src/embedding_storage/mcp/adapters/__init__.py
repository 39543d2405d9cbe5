"""
MCP Adapters Package
====================
Clients for the collaborators the MCP server talks to.

Available Adapters:
    - EmbeddingAPIAdapter: HTTP client for the embedding / vector-search
      service, returning result values instead of raising.
"""

from .api_adapter import EmbeddingAPIAdapter

__all__ = ["EmbeddingAPIAdapter"]
