"""
URL and header construction for outbound calls.

Pure functions: they turn a stored configuration plus per-call overrides into
the concrete URL and headers the executor sends.
"""

import base64
from typing import Any, Mapping

import httpx

from ..models.api_config import ApiConfiguration, ApiKeyAuth, BasicAuth, BearerAuth


DEFAULT_HEADERS = {"Content-Type": "application/json"}


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def build_url(base_url: str, endpoint: str, query_params: Mapping[str, Any] | None = None) -> str:
    """
    Join a base URL and an endpoint, then append query parameters.

    Args:
        base_url: Configuration base URL
        endpoint: Endpoint path; a leading slash is added if missing
        query_params: Parameters in caller order; ``None`` values are skipped

    Returns:
        The absolute URL to call
    """
    base = base_url.rstrip("/")
    path = endpoint if endpoint.startswith("/") else f"/{endpoint}"
    url = f"{base}{path}"

    if not query_params:
        return url

    params = [(key, _stringify(value)) for key, value in query_params.items() if value is not None]
    if not params:
        return url

    query = str(httpx.QueryParams(params))
    separator = "&" if "?" in path else "?"
    return f"{url}{separator}{query}"


def _set_header(headers: dict[str, str], name: str, value: str) -> None:
    # Header names are case-insensitive; the newest spelling wins
    for existing in [key for key in headers if key.lower() == name.lower()]:
        del headers[existing]
    headers[name] = value


def auth_headers(config: ApiConfiguration) -> dict[str, str]:
    """Headers that carry the configuration's credentials."""
    auth = config.auth
    if isinstance(auth, BearerAuth):
        return {"Authorization": f"Bearer {auth.token}"}
    if isinstance(auth, ApiKeyAuth):
        return {auth.header_name: auth.api_key}
    if isinstance(auth, BasicAuth):
        encoded = base64.b64encode(f"{auth.username}:{auth.password}".encode("utf-8")).decode("ascii")
        return {"Authorization": f"Basic {encoded}"}
    return {}


def build_headers(config: ApiConfiguration, override_headers: Mapping[str, str] | None = None) -> dict[str, str]:
    """
    Layer headers for a call.

    Order: JSON content type, configuration defaults, per-call overrides,
    then authentication, so credentials cannot be overridden.
    """
    headers: dict[str, str] = {}
    layers = (DEFAULT_HEADERS, config.headers, override_headers or {}, auth_headers(config))
    for layer in layers:
        for name, value in layer.items():
            _set_header(headers, name, value)
    return headers
