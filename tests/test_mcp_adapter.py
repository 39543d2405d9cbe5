"""
Tests for MCP API Adapter
=========================
Tests for src/embedding_storage/mcp/adapters/api_adapter.py covering the
outbound request bodies and the folding of every failure into a result value.
"""

import pytest
import requests

from conftest import DummyResponse
from embedding_storage.mcp.adapters.api_adapter import (
    CONNECTION_FAILED,
    SEARCH_FAILED,
    STORE_FAILED,
    EmbeddingAPIAdapter,
)
from embedding_storage.mcp.schemas import SearchRequest, StoreRequest


BASE_URL = "http://localhost:3000/api"


def _adapter(**kwargs):
    return EmbeddingAPIAdapter(BASE_URL, **kwargs)


def _raise(exc):
    def fake_request(method, url, json, headers, timeout):
        raise exc

    return fake_request


# ============================================================================
# store
# ============================================================================

class TestStore:
    def test_store_success_returned_as_is(self, monkeypatch):
        captured = {}

        def fake_request(method, url, json, headers, timeout):
            captured.update(method=method, url=url, json=json, timeout=timeout)
            return DummyResponse(
                status_code=200,
                data={
                    "success": True,
                    "page": {"id": 7, "path": "/docs/a", "type": "markdown", "source": "api"},
                    "sections": 4,
                },
            )

        monkeypatch.setattr(requests, "request", fake_request)

        result = _adapter(timeout_seconds=5).store(
            StoreRequest(content="abc", path="/docs/a", type="markdown", source="api")
        )

        assert captured["method"] == "POST"
        assert captured["url"] == f"{BASE_URL}/generate-embeddings"
        assert captured["timeout"] == 5
        assert result.success is True
        assert result.page.id == 7
        assert result.page.path == "/docs/a"
        assert result.sections == 4
        assert result.error is None

    def test_store_sends_only_set_fields(self, monkeypatch):
        captured = []

        def fake_request(method, url, json, headers, timeout):
            captured.append(json)
            return DummyResponse(data={"success": True, "sections": 1})

        monkeypatch.setattr(requests, "request", fake_request)

        _adapter().store(
            StoreRequest(
                content="abc",
                path="/p",
                type="markdown",
                source="api",
                parent_path="/parent",
                meta={"lang": "en"},
            )
        )
        _adapter().store(StoreRequest(content="abc", path="/p"))

        assert captured[0] == {
            "content": "abc",
            "path": "/p",
            "type": "markdown",
            "source": "api",
            "parentPath": "/parent",
            "meta": {"lang": "en"},
        }
        assert captured[1] == {"content": "abc", "path": "/p"}

    def test_store_domain_rejection_in_body(self, monkeypatch):
        monkeypatch.setattr(
            requests,
            "request",
            lambda **kwargs: DummyResponse(data={"success": False, "error": "Content too long"}),
        )

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == "Content too long"

    def test_store_rejection_without_message_gets_unknown_error(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(data={"success": False})
        )

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == "Unknown error"

    def test_store_http_error_carries_upstream_message(self, monkeypatch):
        monkeypatch.setattr(
            requests,
            "request",
            lambda **kwargs: DummyResponse(status_code=400, data={"error": "Missing path"}),
        )

        result = _adapter().store(StoreRequest(content="abc", path=""))

        assert result.success is False
        assert result.error == "Missing path"

    def test_store_http_error_without_message(self, monkeypatch):
        monkeypatch.setattr(
            requests,
            "request",
            lambda **kwargs: DummyResponse(status_code=500, text="<html>", invalid_json=True),
        )

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == STORE_FAILED

    @pytest.mark.parametrize(
        "exc",
        [
            requests.ConnectionError("Connection refused"),
            requests.Timeout("Request timed out"),
        ],
    )
    def test_store_transport_failure(self, monkeypatch, exc):
        monkeypatch.setattr(requests, "request", _raise(exc))

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == CONNECTION_FAILED

    def test_store_non_json_reply_is_connectivity_failure(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(status_code=200, invalid_json=True)
        )

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == CONNECTION_FAILED

    def test_store_malformed_reply_is_connectivity_failure(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(data={"page": "nope"})
        )

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == CONNECTION_FAILED

    def test_store_unexpected_exception_does_not_escape(self, monkeypatch):
        monkeypatch.setattr(requests, "request", _raise(RuntimeError("boom")))

        result = _adapter().store(StoreRequest(content="abc", path="/p"))

        assert result.success is False
        assert result.error == CONNECTION_FAILED


# ============================================================================
# search
# ============================================================================

class TestSearch:
    def test_search_success(self, monkeypatch):
        captured = {}

        def fake_request(method, url, json, headers, timeout):
            captured.update(method=method, url=url, json=json)
            return DummyResponse(data={"contextText": "## Match\nVectors are lists."})

        monkeypatch.setattr(requests, "request", fake_request)

        result = _adapter().search(SearchRequest(prompt="ml", match_count=3))

        assert captured["method"] == "POST"
        assert captured["url"] == f"{BASE_URL}/vector-search"
        assert captured["json"] == {"prompt": "ml", "match_count": 3}
        assert result.context_text == "## Match\nVectors are lists."
        assert result.error is None

    def test_search_omits_unset_match_count(self, monkeypatch):
        captured = []

        def fake_request(method, url, json, headers, timeout):
            captured.append(json)
            return DummyResponse(data={"contextText": ""})

        monkeypatch.setattr(requests, "request", fake_request)

        _adapter().search(SearchRequest(prompt="ml"))

        assert captured == [{"prompt": "ml"}]

    def test_search_empty_context_is_not_an_error(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(data={"contextText": ""})
        )

        result = _adapter().search(SearchRequest(prompt="ml"))

        assert result.context_text == ""
        assert result.error is None

    def test_search_context_is_not_trimmed(self, monkeypatch):
        text = "  leading and trailing  \n"
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(data={"contextText": text})
        )

        assert _adapter().search(SearchRequest(prompt="ml")).context_text == text

    def test_search_http_error_carries_upstream_message(self, monkeypatch):
        monkeypatch.setattr(
            requests,
            "request",
            lambda **kwargs: DummyResponse(status_code=400, data={"error": "Missing prompt"}),
        )

        result = _adapter().search(SearchRequest(prompt=""))

        assert result.context_text == ""
        assert result.error == "Missing prompt"

    def test_search_http_error_without_message(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(status_code=503, data={})
        )

        result = _adapter().search(SearchRequest(prompt="ml"))

        assert result.error == SEARCH_FAILED

    def test_search_transport_failure(self, monkeypatch):
        monkeypatch.setattr(requests, "request", _raise(requests.ConnectionError("refused")))

        result = _adapter().search(SearchRequest(prompt="ml"))

        assert result.context_text == ""
        assert result.error == CONNECTION_FAILED

    def test_search_non_object_reply_is_connectivity_failure(self, monkeypatch):
        monkeypatch.setattr(
            requests, "request", lambda **kwargs: DummyResponse(data=["not", "an", "object"])
        )

        result = _adapter().search(SearchRequest(prompt="ml"))

        assert result.error == CONNECTION_FAILED


class TestAdapterConfig:
    def test_trailing_slash_stripped(self):
        adapter = EmbeddingAPIAdapter("http://localhost:3000/api/")
        assert adapter.base_url == "http://localhost:3000/api"

    def test_default_timeout(self, monkeypatch):
        captured_timeout = []

        def fake_request(method, url, json, headers, timeout):
            captured_timeout.append(timeout)
            return DummyResponse(data={"contextText": ""})

        monkeypatch.setattr(requests, "request", fake_request)

        _adapter().search(SearchRequest(prompt="ml"))

        assert captured_timeout == [15]
