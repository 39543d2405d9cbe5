"""
Tool, resource and prompt handlers.

Each handler validates its arguments, makes at most one call to the API
client, and shapes the outcome into one of three replies: success, error,
or an empty-but-successful "no matches".
"""

import asyncio
from typing import Any, Dict, List, Optional, Union
from urllib.parse import unquote

from loguru import logger
from pydantic import ValidationError as PydanticValidationError

from embedding_storage.core.exceptions import ValidationError
from embedding_storage.mcp.adapters.api_adapter import EmbeddingAPIAdapter
from embedding_storage.mcp.schemas import (
    UNKNOWN_ERROR,
    ResourceReply,
    SearchToolInput,
    StoreToolInput,
    ToolReply,
)

NO_MATCHES = "No matching content found for your query."
RESOURCE_FAILED = "An error occurred while searching content."
MARKDOWN_MIME_TYPE = "text/markdown"


def _describe(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'input'}: {err['msg']}"
        for err in exc.errors()
    )


def _single_query(query: Union[str, List[str]]) -> str:
    """
    Resolve the ``{query}`` segment of a resource URI to one string.

    A one-element list is unwrapped; anything longer is ambiguous.
    """
    if isinstance(query, (list, tuple)):
        if len(query) != 1:
            raise ValidationError(
                field="query",
                reason=f"expected a single value, got {len(query)}",
                value=query,
            )
        query = query[0]
    return unquote(query)


class EmbeddingToolHandlers:
    def __init__(self, client: EmbeddingAPIAdapter):
        self.client = client

    async def store_content(
        self,
        content: str,
        path: str,
        type: Optional[str] = None,
        source: Optional[str] = None,
        parent_path: Optional[str] = None,
        meta: Optional[Dict[str, Any]] = None,
    ) -> ToolReply:
        try:
            request = StoreToolInput(
                content=content,
                path=path,
                type=type,
                source=source,
                parentPath=parent_path,
                meta=meta,
            ).to_request()
        except PydanticValidationError as exc:
            return ToolReply(text=f"Invalid arguments: {_describe(exc)}", is_error=True)

        result = await asyncio.to_thread(self.client.store, request)

        if not result.success:
            return ToolReply(
                text=f"Error storing content: {result.error or UNKNOWN_ERROR}",
                is_error=True,
            )

        logger.info("Stored {} ({} sections)", request.path, result.sections or 0)
        return ToolReply(
            text=(
                f"Successfully stored content at path: {request.path}\n"
                f"Sections processed: {result.sections or 0}"
            )
        )

    async def search_content(self, query: str, max_matches: Optional[int] = None) -> ToolReply:
        try:
            request = SearchToolInput(query=query, maxMatches=max_matches).to_request()
        except PydanticValidationError as exc:
            return ToolReply(text=f"Invalid arguments: {_describe(exc)}", is_error=True)

        result = await asyncio.to_thread(self.client.search, request)

        if result.error:
            return ToolReply(text=f"Error searching content: {result.error}", is_error=True)
        if not result.context_text.strip():
            return ToolReply(text=NO_MATCHES)
        return ToolReply(text=result.context_text)

    async def read_search_resource(self, uri: str, query: Union[str, List[str]]) -> ResourceReply:
        """Serve ``search://{query}``; never raises."""
        try:
            try:
                request = SearchToolInput(query=_single_query(query)).to_request()
            except ValidationError as exc:
                return ResourceReply(uri=uri, text=f"Invalid search query: {exc.reason}")
            except PydanticValidationError as exc:
                return ResourceReply(uri=uri, text=f"Invalid search query: {_describe(exc)}")

            result = await asyncio.to_thread(self.client.search, request)

            if result.error:
                return ResourceReply(uri=uri, text=f"Error searching content: {result.error}")
            if not result.context_text.strip():
                return ResourceReply(uri=uri, text=NO_MATCHES)
            return ResourceReply(uri=uri, text=result.context_text, mime_type=MARKDOWN_MIME_TYPE)
        except Exception:
            logger.exception("Error in search resource")
            return ResourceReply(uri=uri, text=RESOURCE_FAILED)


def save_memory_prompt(path: str, content: str) -> str:
    return (
        f'Please help me store the following content with path "{path}":\n\n'
        f"{content}\n\n"
        "You can use the store-content tool to save this information."
    )


def search_memory_prompt(query: str) -> str:
    return (
        f"Please search for information about: {query}\n\n"
        "You can use the search-content tool to find relevant information."
    )
