"""
Embedding Storage Core Module
=============================
Configuration and the exception hierarchy shared by the MCP layer and the CLI.
"""

from .config import AppConfig, ObservabilityConfig, ServerConfig, get_config, load_config, reset_config
from .exceptions import (
    ConfigurationError,
    EmbeddingAPIError,
    EmbeddingStorageError,
    UnsupportedTransportError,
    ValidationError,
)

__all__ = [
    "AppConfig",
    "ObservabilityConfig",
    "ServerConfig",
    "get_config",
    "load_config",
    "reset_config",
    "ConfigurationError",
    "EmbeddingAPIError",
    "EmbeddingStorageError",
    "UnsupportedTransportError",
    "ValidationError",
]
