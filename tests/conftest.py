import sys
from pathlib import Path
from typing import List, Optional

import pytest

# Ensure local src/ package imports work without editable install.
ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from embedding_storage.core.config import reset_config
from embedding_storage.mcp.schemas import SearchRequest, SearchResult, StoreRequest, StoreResult


class DummyResponse:
    """Mock HTTP response for testing."""

    def __init__(self, status_code=200, data=None, text="", invalid_json=False):
        self.status_code = status_code
        self._data = data if data is not None else {}
        self.text = text
        self._invalid_json = invalid_json

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._data


class FakeClient:
    """Stands in for EmbeddingAPIAdapter, recording every request it gets."""

    def __init__(
        self,
        store_result: Optional[StoreResult] = None,
        search_result: Optional[SearchResult] = None,
        search_exc: Optional[Exception] = None,
    ):
        self.store_result = store_result or StoreResult(
            success=True,
            page={"id": 1, "path": "/p", "type": "markdown", "source": "api"},
            sections=2,
        )
        self.search_result = search_result or SearchResult(context_text="Some context")
        self.search_exc = search_exc
        self.store_requests: List[StoreRequest] = []
        self.search_requests: List[SearchRequest] = []

    def store(self, request: StoreRequest) -> StoreResult:
        self.store_requests.append(request)
        return self.store_result

    def search(self, request: SearchRequest) -> SearchResult:
        self.search_requests.append(request)
        if self.search_exc is not None:
            raise self.search_exc
        return self.search_result


@pytest.fixture(autouse=True)
def clean_config():
    """Reset global config singleton between tests."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def fake_client():
    return FakeClient()
