"""
Embedding Storage Domain-Specific Exceptions
============================================

Exception hierarchy shared by the configuration layer, the remote API client
and the MCP server bootstrap.

Exception Hierarchy:
    EmbeddingStorageError (base)
    ├── RecoverableError (transient, retry possible)
    │   └── EmbeddingAPIError
    └── IrrecoverableError (permanent, requires intervention)
        ├── ConfigurationError
        ├── ValidationError
        └── UnsupportedTransportError

Usage Guidelines:
    - Tool and resource handlers never raise these to the MCP host; the API
      client converts failures into result values.
    - Raise at startup for bad configuration or an unknown transport.
    - Always include context in error messages
    - Use error_code for machine-readable output
"""

from typing import Optional, Any


class EmbeddingStorageError(Exception):
    """
    Base exception for all embedding storage errors.

    Attributes:
        message: Human-readable error message
        error_code: Machine-readable error code
        context: Additional context about the error
        recoverable: Whether the error is potentially recoverable
    """

    error_code: str = "EMBEDDING_STORAGE_ERROR"
    recoverable: bool = True

    def __init__(
        self,
        message: str,
        context: Optional[dict] = None,
        error_code: Optional[str] = None,
        recoverable: Optional[bool] = None
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        if error_code is not None:
            self.error_code = error_code
        if recoverable is not None:
            self.recoverable = recoverable

    def __str__(self) -> str:
        if self.context:
            return f"{self.message} | context={self.context}"
        return self.message

    def to_dict(self) -> dict:
        """Convert exception to a JSON-friendly dictionary."""
        result = {
            "error": self.message,
            "code": self.error_code,
            "recoverable": self.recoverable,
        }
        if self.context:
            result["context"] = self.context
        return result


# =============================================================================
# Base Categories: Recoverable vs Irrecoverable
# =============================================================================

class RecoverableError(EmbeddingStorageError):
    """
    Base class for recoverable errors.

    Transient failures that may succeed if the caller tries again later:
    - Connection failures
    - Timeouts
    - Upstream 5xx replies
    """
    recoverable = True


class IrrecoverableError(EmbeddingStorageError):
    """
    Base class for irrecoverable errors.

    Permanent errors that require intervention:
    - Invalid configuration
    - Validation failures
    """
    recoverable = False


# =============================================================================
# Upstream Errors
# =============================================================================

class EmbeddingAPIError(RecoverableError):
    """
    Raised inside the API client when a call to the embedding service fails.

    Attributes:
        status_code: HTTP status code if available (None for network errors).
        upstream_error: The ``error`` field reported by the service, if any.
    """
    error_code = "EMBEDDING_API_ERROR"

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        upstream_error: Optional[str] = None,
        context: Optional[dict] = None,
    ):
        ctx = context or {}
        if status_code is not None:
            ctx["status_code"] = status_code
        super().__init__(message, ctx)
        self.status_code = status_code
        self.upstream_error = upstream_error

    @property
    def is_connectivity_failure(self) -> bool:
        """True when the service never produced a usable HTTP reply."""
        return self.status_code is None


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(IrrecoverableError):
    """Raised when configuration is invalid or missing."""
    error_code = "CONFIGURATION_ERROR"

    def __init__(self, config_key: str, reason: str, context: Optional[dict] = None):
        ctx = {"config_key": config_key}
        if context:
            ctx.update(context)
        super().__init__(f"Configuration error for '{config_key}': {reason}", ctx)
        self.config_key = config_key


class UnsupportedTransportError(IrrecoverableError, ValueError):
    """Raised when an unsupported transport is requested."""
    error_code = "UNSUPPORTED_TRANSPORT_ERROR"

    def __init__(self, transport: str, supported_transports: Optional[list] = None, context: Optional[dict] = None):
        ctx = {"transport": transport}
        if supported_transports:
            ctx["supported_transports"] = supported_transports
        if context:
            ctx.update(context)
        msg = f"Unsupported transport: {transport}"
        if supported_transports:
            msg += f". Supported: {', '.join(supported_transports)}"
        super().__init__(msg, ctx)
        self.transport = transport


# =============================================================================
# Validation Errors
# =============================================================================

class ValidationError(IrrecoverableError):
    """Raised when input validation fails."""
    error_code = "VALIDATION_ERROR"

    def __init__(self, field: str, reason: str, value: Any = None, context: Optional[dict] = None):
        ctx = {"field": field}
        if value is not None:
            # Truncate large values
            value_str = str(value)
            if len(value_str) > 100:
                value_str = value_str[:100] + "..."
            ctx["value"] = value_str
        if context:
            ctx.update(context)
        super().__init__(f"Validation error for '{field}': {reason}", ctx)
        self.field = field
        self.reason = reason


__all__ = [
    "EmbeddingStorageError",
    "RecoverableError",
    "IrrecoverableError",
    "EmbeddingAPIError",
    "ConfigurationError",
    "UnsupportedTransportError",
    "ValidationError",
]
