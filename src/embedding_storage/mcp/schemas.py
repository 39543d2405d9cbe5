from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_CONTENT_TYPE = "markdown"
DEFAULT_SOURCE = "api"
UNKNOWN_ERROR = "Unknown error"


# --- Wire models (embedding service request/response bodies) ---

class StoreRequest(BaseModel):
    """Body of ``POST /generate-embeddings``."""
    model_config = ConfigDict(populate_by_name=True)

    content: str
    path: str
    type: Optional[str] = None
    source: Optional[str] = None
    parent_path: Optional[str] = Field(default=None, alias="parentPath")
    meta: Optional[Dict[str, Any]] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class StoredPage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: Optional[Union[int, str]] = None
    path: Optional[str] = None
    type: Optional[str] = None
    source: Optional[str] = None


class StoreResult(BaseModel):
    """Reply of ``POST /generate-embeddings``, or a locally built failure."""
    model_config = ConfigDict(extra="allow")

    success: bool
    page: Optional[StoredPage] = None
    sections: Optional[int] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def failure_carries_error(self):
        if not self.success and not self.error:
            self.error = UNKNOWN_ERROR
        return self


class SearchRequest(BaseModel):
    """Body of ``POST /vector-search``."""

    prompt: str
    match_count: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class SearchResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    context_text: str = Field(default="", alias="contextText")
    error: Optional[str] = None

    @field_validator("context_text", mode="before")
    @classmethod
    def null_context_is_empty(cls, value):
        return "" if value is None else value

    @model_validator(mode="after")
    def error_clears_context(self):
        # An empty error string is treated as no error at all.
        if not self.error:
            self.error = None
        else:
            self.context_text = ""
        return self


# --- Tool inputs (validated before any network call) ---

class StoreToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., min_length=1, description="The content to store")
    path: str = Field(..., min_length=1, description="Unique identifier path for the content")
    type: Optional[str] = Field(default=None, description="Content type (e.g., 'markdown')")
    source: Optional[str] = Field(default=None, description="Source of the content")
    parent_path: Optional[str] = Field(
        default=None, alias="parentPath", description="Path of the parent content (if applicable)"
    )
    meta: Optional[Dict[str, Any]] = Field(default=None, description="Arbitrary metadata stored with the page")

    def to_request(self) -> StoreRequest:
        return StoreRequest(
            content=self.content,
            path=self.path,
            type=self.type or DEFAULT_CONTENT_TYPE,
            source=self.source or DEFAULT_SOURCE,
            parent_path=self.parent_path,
            meta=self.meta,
        )


class SearchToolInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    query: str = Field(..., min_length=1, description="The search query")
    max_matches: Optional[int] = Field(
        default=None, gt=0, alias="maxMatches", description="Maximum number of matches to return"
    )

    def to_request(self) -> SearchRequest:
        return SearchRequest(prompt=self.query, match_count=self.max_matches)


# --- Replies handed back to the MCP layer ---

class ToolReply(BaseModel):
    text: str
    is_error: bool = False


class ResourceReply(BaseModel):
    uri: str
    text: str
    mime_type: Optional[str] = None
