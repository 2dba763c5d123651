"""
Tests for keyword search and document fetch.
"""

from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given, strategies as st, settings

from api_bridge.config import Settings
from api_bridge.context import build_context
from api_bridge.exceptions import DocumentNotFoundError
from api_bridge.models.history import RequestRecord
from api_bridge.schemas.api_config import ApiConfigCreate, AuthInput
from api_bridge.services.search import (
    ApiDocument,
    EndpointDocument,
    EndpointDocumentKey,
    encode_document_id,
    endpoint_key,
    fetch_document,
    parse_document_id,
    sanitize_endpoint,
    search,
)


BASE_TIME = datetime(2026, 3, 1, tzinfo=timezone.utc)


def make_context(**settings_overrides):
    return build_context(Settings(**settings_overrides))


def save(ctx, name, base_url="https://api.example.com", **kwargs):
    return ctx.store.save(ApiConfigCreate(name=name, base_url=base_url, **kwargs))


def add_record(ctx, api_name, endpoint, method="GET", status=200, response_time_ms=100, offset=0):
    ctx.ledger.append(RequestRecord(
        timestamp=BASE_TIME + timedelta(seconds=offset),
        api_name=api_name,
        method=method,
        endpoint=endpoint,
        status=status,
        response_time_ms=response_time_ms,
    ))


class TestDocumentIds:
    """Encoding and parsing of document ids."""

    def test_api_id(self):
        assert encode_document_id(ApiDocument("github")) == "api-github"
        assert parse_document_id("api-github") == ApiDocument("github")

    def test_endpoint_id(self):
        doc = EndpointDocument("jp", "/posts/1")
        assert encode_document_id(doc) == "endpoint-jp-_posts_1"
        assert parse_document_id("endpoint-jp-_posts_1") == EndpointDocumentKey("jp-_posts_1")

    def test_sanitize_endpoint(self):
        assert sanitize_endpoint("/users/{id}?x=1") == "_users__id__x_1"

    @pytest.mark.parametrize("raw", ["", "api-", "endpoint-", "doc-github", "github"])
    def test_malformed_ids_rejected(self, raw: str):
        with pytest.raises(DocumentNotFoundError):
            parse_document_id(raw)

    @given(name=st.text(alphabet="abcxyz-_", min_size=1, max_size=12))
    @settings(max_examples=50, deadline=None)
    def test_api_ids_round_trip(self, name: str):
        """Property: any non-empty API name survives encode then parse."""
        assert parse_document_id(encode_document_id(ApiDocument(name))) == ApiDocument(name)


class TestSearch:
    """Search over configurations and history."""

    def test_partial_name_match(self):
        ctx = make_context()
        save(ctx, "github", base_url="https://api.github.com")
        save(ctx, "stripe", base_url="https://api.stripe.com")

        results = search(ctx, "git")

        assert [r.id for r in results] == ["api-github"]
        assert results[0].url == "https://api.github.com"

    def test_case_insensitive(self):
        ctx = make_context()
        save(ctx, "GitHub", description="Source HOSTING")
        assert [r.id for r in search(ctx, "github")] == ["api-GitHub"]
        assert [r.id for r in search(ctx, "hosting")] == ["api-GitHub"]

    def test_matches_description_url_and_auth_type(self):
        ctx = make_context()
        save(ctx, "one", description="Weather forecasts")
        save(ctx, "two", base_url="https://weather.example.org")
        save(ctx, "three", auth=AuthInput(type="bearer", token="t"))

        assert {r.id for r in search(ctx, "weather")} == {"api-one", "api-two"}
        assert [r.id for r in search(ctx, "bearer")] == ["api-three"]

    def test_name_match_outranks_description_match(self):
        ctx = make_context()
        save(ctx, "billing-service-with-long-name", description="Handles payments")
        save(ctx, "payments")

        results = search(ctx, "payments")

        assert [r.id for r in results] == ["api-payments", "api-billing-service-with-long-name"]

    def test_title_length_ordering_option(self):
        ctx = make_context(search_ordering="title_length")
        save(ctx, "billing-service-with-long-name", description="Handles payments")
        save(ctx, "payments")

        results = search(ctx, "payments")

        assert [r.id for r in results] == ["api-billing-service-with-long-name", "api-payments"]

    def test_history_endpoints_emitted_once_per_pair(self):
        ctx = make_context()
        save(ctx, "jp", base_url="https://jsonplaceholder.typicode.com")
        add_record(ctx, "jp", "/posts/1", offset=0)
        add_record(ctx, "jp", "/posts/1", method="DELETE", offset=1)
        add_record(ctx, "jp", "/users", offset=2)

        results = search(ctx, "posts")
        ids = [r.id for r in results]

        assert ids.count("endpoint-jp-_posts_1") == 1
        assert "endpoint-jp-_users" not in ids
        # The API itself matches through its history
        assert "api-jp" in ids
        endpoint = next(r for r in results if r.id == "endpoint-jp-_posts_1")
        assert endpoint.url == "https://jsonplaceholder.typicode.com/posts/1"

    def test_method_match(self):
        ctx = make_context()
        add_record(ctx, "gone", "/things", method="PATCH")
        assert [r.id for r in search(ctx, "patch")] == ["endpoint-gone-_things"]

    def test_dangling_history_still_searchable(self):
        ctx = make_context()
        add_record(ctx, "deleted-api", "/orders")
        results = search(ctx, "orders")
        assert [r.id for r in results] == ["endpoint-deleted-api-_orders"]
        assert results[0].url == "/orders"

    def test_result_limit(self):
        ctx = make_context()
        for i in range(15):
            save(ctx, f"service-{i}")
        assert len(search(ctx, "service")) == 10

    @pytest.mark.parametrize("query", ["", "   "])
    def test_blank_query_returns_nothing(self, query: str):
        ctx = make_context()
        save(ctx, "github")
        assert search(ctx, query) == []

    def test_surrounding_whitespace_is_part_of_query(self):
        ctx = make_context()
        save(ctx, "github", description="Code hosting API")
        assert [r.id for r in search(ctx, " api")] == ["api-github"]
        assert search(ctx, " github") == []

    def test_no_match(self):
        ctx = make_context()
        save(ctx, "github")
        assert search(ctx, "zzz") == []


class TestFetch:
    """Document synthesis for search result ids."""

    def test_api_document(self):
        ctx = make_context()
        save(
            ctx, "github",
            base_url="https://api.github.com",
            description="GitHub REST",
            auth=AuthInput(type="bearer", token="ghp_supersecret"),
        )
        add_record(ctx, "github", "/user", status=200, response_time_ms=100, offset=0)
        add_record(ctx, "github", "/repos", status=404, response_time_ms=300, offset=1)
        add_record(ctx, "other", "/x", offset=2)

        doc = fetch_document(ctx, "api-github")

        assert doc.id == "api-github"
        assert doc.url == "https://api.github.com"
        assert "GitHub REST" in doc.text
        assert "Requests: 2" in doc.text
        assert "Success rate: 50.0%" in doc.text
        assert "Average response time: 200.0 ms" in doc.text
        assert "/user" in doc.text and "/repos" in doc.text
        assert "ghp_supersecret" not in doc.text
        assert "ghp_supersecret" not in str(doc.metadata)
        assert doc.metadata["endpoints"] == ["/user", "/repos"]
        assert doc.metadata["request_count"] == 2

    def test_api_document_without_history(self):
        ctx = make_context()
        save(ctx, "fresh")
        doc = fetch_document(ctx, "api-fresh")
        assert "Requests: 0" in doc.text
        assert "no requests recorded" in doc.text

    def test_api_document_gone_after_delete(self):
        ctx = make_context()
        save(ctx, "github")
        assert fetch_document(ctx, "api-github").id == "api-github"

        ctx.store.delete("github")

        with pytest.raises(DocumentNotFoundError):
            fetch_document(ctx, "api-github")

    def test_endpoint_document(self):
        ctx = make_context()
        save(ctx, "jp", base_url="https://jsonplaceholder.typicode.com")
        for i in range(7):
            method = "GET" if i % 2 == 0 else "PUT"
            status = 200 if i < 6 else 500
            add_record(ctx, "jp", "/posts/1", method=method, status=status, offset=i)

        doc = fetch_document(ctx, "endpoint-jp-_posts_1")

        assert doc.title == "jp /posts/1"
        assert doc.url == "https://jsonplaceholder.typicode.com/posts/1"
        assert doc.metadata["methods"] == ["GET", "PUT"]
        assert doc.metadata["request_count"] == 7
        recent = doc.metadata["recent_calls"]
        assert len(recent) == 5
        # Newest first
        assert recent[0]["status"] == 500
        assert recent[0]["timestamp"] > recent[-1]["timestamp"]
        assert "Methods seen: GET, PUT" in doc.text

    def test_endpoint_document_with_dashed_api_name(self):
        ctx = make_context()
        add_record(ctx, "my-api", "/v1/items")
        doc = fetch_document(ctx, encode_document_id(EndpointDocument("my-api", "/v1/items")))
        assert doc.metadata["api_name"] == "my-api"
        assert doc.metadata["endpoint"] == "/v1/items"

    def test_endpoint_document_requires_history(self):
        ctx = make_context()
        save(ctx, "jp")
        with pytest.raises(DocumentNotFoundError):
            fetch_document(ctx, "endpoint-jp-_posts_1")

    def test_unknown_prefix(self):
        ctx = make_context()
        save(ctx, "github")
        with pytest.raises(DocumentNotFoundError):
            fetch_document(ctx, "config-github")

    def test_search_results_are_fetchable(self):
        ctx = make_context()
        save(ctx, "jp", base_url="https://jsonplaceholder.typicode.com")
        add_record(ctx, "jp", "/posts/1")
        add_record(ctx, "jp", "/comments?postId=1", offset=1)

        for result in search(ctx, "jp") + search(ctx, "post"):
            assert fetch_document(ctx, result.id).id == result.id

    def test_endpoint_key_matches_encoding(self):
        assert f"endpoint-{endpoint_key('a', '/b')}" == encode_document_id(EndpointDocument("a", "/b"))
