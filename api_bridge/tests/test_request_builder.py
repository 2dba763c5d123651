"""
Tests for outbound URL and header construction.
"""

import base64
from datetime import datetime, timezone

import pytest
from hypothesis import given, strategies as st, settings

from api_bridge.models.api_config import ApiConfiguration, ApiKeyAuth, BasicAuth, BearerAuth, NoAuth
from api_bridge.services.request_builder import build_headers, build_url


def make_config(auth=None, headers=None) -> ApiConfiguration:
    return ApiConfiguration(
        name="test",
        base_url="https://api.example.com",
        auth=auth or NoAuth(),
        headers=headers or {},
        created_at=datetime.now(timezone.utc),
    )


segment_strategy = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789-_"),
    min_size=1,
    max_size=15
)


class TestBuildUrl:
    """Tests for build_url."""

    @pytest.mark.parametrize("base_url,endpoint,expected", [
        ("https://api.example.com", "/users", "https://api.example.com/users"),
        ("https://api.example.com/", "/users", "https://api.example.com/users"),
        ("https://api.example.com", "users", "https://api.example.com/users"),
        ("https://api.example.com/v1", "users/1", "https://api.example.com/v1/users/1"),
        ("https://api.example.com", "", "https://api.example.com/"),
    ])
    def test_joins_base_and_endpoint(self, base_url, endpoint, expected):
        assert build_url(base_url, endpoint) == expected

    def test_query_params_keep_caller_order(self):
        url = build_url("https://api.example.com", "/search", {"q": "python", "page": 2, "sort": "desc"})
        assert url == "https://api.example.com/search?q=python&page=2&sort=desc"

    def test_none_values_skipped(self):
        url = build_url("https://api.example.com", "/items", {"a": 1, "b": None, "c": "x"})
        assert url == "https://api.example.com/items?a=1&c=x"

    def test_all_none_values_leave_no_query(self):
        assert build_url("https://api.example.com", "/items", {"a": None}) == "https://api.example.com/items"

    def test_values_are_stringified(self):
        url = build_url("https://api.example.com", "/items", {"flag": True, "off": False, "ratio": 0.5})
        assert url == "https://api.example.com/items?flag=true&off=false&ratio=0.5"

    def test_values_are_encoded(self):
        url = build_url("https://api.example.com", "/items", {"q": "a b&c"})
        assert url == "https://api.example.com/items?q=a+b%26c"

    def test_existing_query_string_extended(self):
        url = build_url("https://api.example.com", "/items?fixed=1", {"extra": 2})
        assert url == "https://api.example.com/items?fixed=1&extra=2"

    @given(segments=st.lists(segment_strategy, min_size=1, max_size=4))
    @settings(max_examples=50, deadline=None)
    def test_exactly_one_slash_between_base_and_endpoint(self, segments):
        """
        Property: base and endpoint are joined by exactly one slash whether or
        not either side carries one.
        """
        path = "/".join(segments)
        for base in ("https://api.example.com", "https://api.example.com/"):
            for endpoint in (path, f"/{path}"):
                assert build_url(base, endpoint) == f"https://api.example.com/{path}"


class TestBuildHeaders:
    """Tests for build_headers."""

    def test_default_content_type(self):
        assert build_headers(make_config()) == {"Content-Type": "application/json"}

    def test_layers_override_in_order(self):
        config = make_config(headers={"Accept": "text/plain", "X-Client": "default"})
        headers = build_headers(config, {"X-Client": "override"})
        assert headers == {
            "Content-Type": "application/json",
            "Accept": "text/plain",
            "X-Client": "override",
        }

    def test_override_is_case_insensitive(self):
        config = make_config(headers={"content-type": "text/xml"})
        headers = build_headers(config, {"CONTENT-TYPE": "application/xml"})
        assert headers == {"CONTENT-TYPE": "application/xml"}

    def test_bearer_auth(self):
        headers = build_headers(make_config(auth=BearerAuth(token="abc123")))
        assert headers["Authorization"] == "Bearer abc123"

    def test_api_key_auth_uses_configured_header(self):
        headers = build_headers(make_config(auth=ApiKeyAuth(api_key="k-1", header_name="X-Api-Key")))
        assert headers["X-Api-Key"] == "k-1"
        assert "Authorization" not in headers

    def test_basic_auth(self):
        headers = build_headers(make_config(auth=BasicAuth(username="alice", password="s3cret")))
        expected = base64.b64encode(b"alice:s3cret").decode()
        assert headers["Authorization"] == f"Basic {expected}"

    def test_auth_cannot_be_overridden(self):
        config = make_config(
            auth=BearerAuth(token="real"),
            headers={"Authorization": "Bearer default"},
        )
        headers = build_headers(config, {"authorization": "Bearer forged"})
        assert headers == {"Content-Type": "application/json", "Authorization": "Bearer real"}

    def test_no_auth_injects_nothing(self):
        headers = build_headers(make_config(), {"X-Trace": "1"})
        assert headers == {"Content-Type": "application/json", "X-Trace": "1"}
