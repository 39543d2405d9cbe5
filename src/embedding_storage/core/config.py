"""
Embedding Storage Configuration System
======================================
Centralized, validated configuration with environment variable overrides.
"""

import os
from pathlib import Path
from typing import Optional
from dataclasses import dataclass, field

import yaml

from embedding_storage.core.exceptions import ConfigurationError

ENV_PREFIX = "EMBEDDING_STORAGE"
DEFAULT_API_BASE_URL = "https://ai-embeddings.vercel.app/api"
KNOWN_TOOLS = ("store-content", "search-content")
SUPPORTED_TRANSPORTS = ("stdio", "sse")


@dataclass(frozen=True)
class ServerConfig:
    name: str = "embedding-storage"
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8110
    api_base_url: str = DEFAULT_API_BASE_URL
    timeout_seconds: int = 15
    allow_tools: list[str] = field(default_factory=lambda: list(KNOWN_TOOLS))


@dataclass(frozen=True)
class ObservabilityConfig:
    log_level: str = "INFO"


@dataclass(frozen=True)
class AppConfig:
    """Root configuration for the embedding storage server."""

    mcp: ServerConfig = field(default_factory=ServerConfig)
    observability: ObservabilityConfig = field(default_factory=ObservabilityConfig)


def _env_override(key: str, default):
    """Check for EMBEDDING_STORAGE_<KEY> environment variable override."""
    env_key = f"{ENV_PREFIX}_{key.upper()}"
    val = os.environ.get(env_key)
    if val is None:
        return default
    # Type coercion based on the default's type
    if isinstance(default, bool):
        return val.lower() in ("true", "1", "yes")
    if isinstance(default, int):
        try:
            return int(val)
        except ValueError as exc:
            raise ConfigurationError(
                config_key=env_key,
                reason=f"expected an integer, got {val!r}",
            ) from exc
    return val


def _env_list_override(key: str, default) -> list[str]:
    """Comma-separated EMBEDDING_STORAGE_<KEY> override for list settings."""
    val = os.environ.get(f"{ENV_PREFIX}_{key.upper()}")
    if val is None:
        return list(default)
    return [item.strip() for item in val.split(",") if item.strip()]


def _validate(cfg: ServerConfig) -> None:
    if not cfg.api_base_url:
        raise ConfigurationError(config_key="mcp.api_base_url", reason="must not be empty")
    if cfg.timeout_seconds <= 0:
        raise ConfigurationError(
            config_key="mcp.timeout_seconds",
            reason=f"must be positive, got {cfg.timeout_seconds}",
        )
    unknown = sorted(set(cfg.allow_tools) - set(KNOWN_TOOLS))
    if unknown:
        raise ConfigurationError(
            config_key="mcp.allow_tools",
            reason=f"unknown tools: {', '.join(unknown)}",
            context={"known_tools": list(KNOWN_TOOLS)},
        )


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Priority: ENV > YAML > defaults.

    Args:
        path: Path to config.yaml. If None, searches ./config.yaml.

    Returns:
        Validated AppConfig instance.

    Raises:
        ConfigurationError: If a value is out of range or malformed.
    """
    if path is None:
        candidate = Path("config.yaml")
        if candidate.exists():
            path = candidate

    raw = {}
    if path is not None and path.exists():
        with open(path) as f:
            loaded = yaml.safe_load(f) or {}
            raw = loaded.get("embedding_storage") or {}

    mcp_raw = raw.get("mcp") or {}
    mcp = ServerConfig(
        name=_env_override("MCP_NAME", mcp_raw.get("name", "embedding-storage")),
        transport=_env_override("MCP_TRANSPORT", mcp_raw.get("transport", "stdio")),
        host=_env_override("MCP_HOST", mcp_raw.get("host", "127.0.0.1")),
        port=_env_override("MCP_PORT", mcp_raw.get("port", 8110)),
        api_base_url=_env_override("MCP_API_BASE_URL", mcp_raw.get("api_base_url", DEFAULT_API_BASE_URL)),
        timeout_seconds=_env_override("MCP_TIMEOUT_SECONDS", mcp_raw.get("timeout_seconds", 15)),
        allow_tools=_env_list_override("MCP_ALLOW_TOOLS", mcp_raw.get("allow_tools", KNOWN_TOOLS)),
    )
    _validate(mcp)

    obs_raw = raw.get("observability") or {}
    observability = ObservabilityConfig(
        log_level=_env_override("LOG_LEVEL", obs_raw.get("log_level", "INFO")),
    )

    return AppConfig(
        mcp=mcp,
        observability=observability,
    )


# Module-level singleton (lazy-loaded)
_CONFIG: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """Get or initialize the global config singleton."""
    global _CONFIG
    if _CONFIG is None:
        _CONFIG = load_config()
    return _CONFIG


def reset_config():
    """Reset the global config singleton (useful for testing)."""
    global _CONFIG
    _CONFIG = None
