"""
In-memory store of named API configurations.

The store validates configurations before accepting them: names are unique,
base URLs must be absolute http(s) URLs, and each auth scheme must carry its
required credentials. Rejected saves leave the store untouched.
"""

from datetime import datetime, timezone
from typing import Iterator

import httpx
from loguru import logger

from ..exceptions import AlreadyExistsError, ApiNotFoundError, IncompleteAuthError, InvalidUrlError
from ..models.api_config import (
    ApiConfiguration,
    ApiKeyAuth,
    AuthConfig,
    BasicAuth,
    BearerAuth,
    NoAuth,
)
from ..schemas.api_config import ApiConfigCreate, ApiConfigResponse, ApiSummary, AuthInput


# Credential fields each auth type must provide
REQUIRED_AUTH_FIELDS: dict[str, tuple[str, ...]] = {
    "none": (),
    "bearer": ("token",),
    "api_key": ("api_key", "header_name"),
    "basic": ("username", "password"),
}


def normalize_base_url(url: str) -> str:
    """
    Validate a base URL and strip trailing slashes.

    Raises:
        InvalidUrlError: If the URL is not an absolute http or https URL
    """
    candidate = url.strip()
    try:
        parsed = httpx.URL(candidate)
    except (httpx.InvalidURL, TypeError):
        raise InvalidUrlError(url)
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError(url)
    return candidate.rstrip("/")


def build_auth(auth: AuthInput) -> AuthConfig:
    """
    Convert caller-supplied auth into the matching auth variant.

    Raises:
        IncompleteAuthError: If a credential required by the auth type is missing or empty
    """
    missing = [field for field in REQUIRED_AUTH_FIELDS[auth.type] if not getattr(auth, field)]
    if missing:
        raise IncompleteAuthError(auth.type, missing)

    if auth.type == "bearer":
        return BearerAuth(token=auth.token)
    if auth.type == "api_key":
        return ApiKeyAuth(api_key=auth.api_key, header_name=auth.header_name)
    if auth.type == "basic":
        return BasicAuth(username=auth.username, password=auth.password)
    return NoAuth()


def _recency_key(config: ApiConfiguration) -> tuple:
    # Used configurations first, most recent first; then newest created
    created = -config.created_at.timestamp()
    if config.last_used_at is None:
        return (1, 0.0, created)
    return (0, -config.last_used_at.timestamp(), created)


class ConfigStore:
    """Named API configurations, keyed by name."""

    def __init__(self, default_timeout_ms: int = 30000):
        self.default_timeout_ms = default_timeout_ms
        self._configs: dict[str, ApiConfiguration] = {}

    def save(self, data: ApiConfigCreate) -> ApiConfiguration:
        """
        Validate and store a new configuration.

        Args:
            data: Configuration as supplied by the caller

        Returns:
            The stored configuration

        Raises:
            AlreadyExistsError: If the name is already taken
            InvalidUrlError: If base_url is not an absolute http(s) URL
            IncompleteAuthError: If the auth type lacks required credentials
        """
        if data.name in self._configs:
            raise AlreadyExistsError(data.name)

        base_url = normalize_base_url(data.base_url)
        auth = build_auth(data.auth)

        config = ApiConfiguration(
            name=data.name,
            base_url=base_url,
            description=data.description,
            auth=auth,
            headers=dict(data.headers),
            timeout_ms=data.timeout_ms or self.default_timeout_ms,
            created_at=datetime.now(timezone.utc),
        )
        self._configs[config.name] = config
        logger.info("Saved API configuration '{}' ({}, auth={})", config.name, config.base_url, config.auth_type)
        return config

    def get(self, name: str) -> ApiConfiguration:
        """
        Get a configuration by name, credentials included.

        Raises:
            ApiNotFoundError: If no configuration has this name
        """
        config = self._configs.get(name)
        if config is None:
            raise ApiNotFoundError(name)
        return config

    def render(self, name: str) -> ApiConfigResponse:
        """Get a configuration by name with secrets redacted."""
        return ApiConfigResponse.from_config(self.get(name))

    def list(self) -> list[ApiSummary]:
        """Redacted summaries, most recently used first."""
        ordered = sorted(self._configs.values(), key=_recency_key)
        return [ApiSummary.from_config(config) for config in ordered]

    def delete(self, name: str) -> None:
        """
        Remove a configuration. History records that reference it are kept.

        Raises:
            ApiNotFoundError: If no configuration has this name
        """
        if name not in self._configs:
            raise ApiNotFoundError(name)
        del self._configs[name]
        logger.info("Deleted API configuration '{}'", name)

    def touch(self, name: str, at: datetime) -> None:
        """Record a use of the configuration, if it still exists."""
        config = self._configs.get(name)
        if config is not None:
            config.last_used_at = at

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, name: object) -> bool:
        return name in self._configs

    def __iter__(self) -> Iterator[ApiConfiguration]:
        return iter(list(self._configs.values()))
