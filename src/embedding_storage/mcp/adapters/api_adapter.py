"""
Embedding Service API Adapter
=============================
HTTP client adapter for the remote embedding / vector-search service.

``store`` and ``search`` never raise: every failure is folded into the
returned result so the MCP layer only branches on values.
"""

from typing import Any, Dict, Optional

import requests
from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from embedding_storage.core.config import DEFAULT_API_BASE_URL
from embedding_storage.core.exceptions import EmbeddingAPIError
from embedding_storage.mcp.schemas import SearchRequest, SearchResult, StoreRequest, StoreResult

STORE_ENDPOINT = "/generate-embeddings"
SEARCH_ENDPOINT = "/vector-search"

CONNECTION_FAILED = "Failed to connect to embedding service"
STORE_FAILED = "Failed to generate embeddings"
SEARCH_FAILED = "Failed to perform vector search"


def _upstream_error(response) -> Optional[str]:
    """Pull the ``error`` field out of a failed reply, if it has one."""
    try:
        details = response.json()
    except ValueError:
        return None
    if not isinstance(details, dict):
        return None
    error = details.get("error")
    if not error:
        return None
    return error if isinstance(error, str) else str(error)


class EmbeddingAPIAdapter:
    def __init__(self, base_url: str = DEFAULT_API_BASE_URL, timeout_seconds: int = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds

    def _request(self, method: str, path: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        headers = {"Content-Type": "application/json"}

        logger.debug("{} {}", method, url)
        try:
            response = requests.request(
                method=method,
                url=url,
                json=payload,
                headers=headers,
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise EmbeddingAPIError(f"Upstream request failed: {exc}") from exc

        if not 200 <= response.status_code < 300:
            raise EmbeddingAPIError(
                f"Upstream error ({response.status_code})",
                status_code=response.status_code,
                upstream_error=_upstream_error(response),
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise EmbeddingAPIError("Upstream returned non-JSON response") from exc

        if not isinstance(body, dict):
            raise EmbeddingAPIError(f"Upstream returned unexpected payload type: {type(body).__name__}")
        return body

    def store(self, request: StoreRequest) -> StoreResult:
        """Embed and store ``request.content`` under ``request.path``."""
        try:
            body = self._request("POST", STORE_ENDPOINT, request.to_payload())
            result = StoreResult.model_validate(body)
        except EmbeddingAPIError as exc:
            if exc.is_connectivity_failure:
                logger.warning("Embedding service unreachable during store: {}", exc)
                return StoreResult(success=False, error=CONNECTION_FAILED)
            logger.warning("Embedding service rejected store of {}: {}", request.path, exc)
            return StoreResult(success=False, error=exc.upstream_error or STORE_FAILED)
        except PydanticValidationError as exc:
            logger.warning("Malformed store reply from embedding service: {}", exc)
            return StoreResult(success=False, error=CONNECTION_FAILED)
        except Exception:
            logger.exception("Unexpected failure calling embedding service")
            return StoreResult(success=False, error=CONNECTION_FAILED)

        if not result.success:
            logger.warning("Embedding service rejected store of {}: {}", request.path, result.error)
        return result

    def search(self, request: SearchRequest) -> SearchResult:
        """Run a vector similarity search for ``request.prompt``."""
        try:
            body = self._request("POST", SEARCH_ENDPOINT, request.to_payload())
            return SearchResult.model_validate(body)
        except EmbeddingAPIError as exc:
            if exc.is_connectivity_failure:
                logger.warning("Embedding service unreachable during search: {}", exc)
                return SearchResult(context_text="", error=CONNECTION_FAILED)
            logger.warning("Embedding service rejected search: {}", exc)
            return SearchResult(context_text="", error=exc.upstream_error or SEARCH_FAILED)
        except PydanticValidationError as exc:
            logger.warning("Malformed search reply from embedding service: {}", exc)
            return SearchResult(context_text="", error=CONNECTION_FAILED)
        except Exception:
            logger.exception("Unexpected failure calling embedding service")
            return SearchResult(context_text="", error=CONNECTION_FAILED)
