"""
Pydantic schemas for API configurations.

Defines the input accepted when saving a configuration and the redacted
shapes returned to callers. Secret values never appear in response schemas.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from ..models.api_config import ApiConfiguration, AuthType


class AuthInput(BaseModel):
    """
    Authentication as supplied by a caller.

    Every credential field is optional here; the configuration store checks
    that the fields required by ``type`` are present.
    """
    type: AuthType = "none"
    token: str | None = None
    api_key: str | None = None
    header_name: str | None = None
    username: str | None = None
    password: str | None = None


class ApiConfigCreate(BaseModel):
    """Schema for saving a new API configuration."""
    name: str = Field(..., min_length=1, max_length=255)
    base_url: str = Field(..., min_length=1)
    description: str | None = None
    auth: AuthInput = AuthInput()
    headers: dict[str, str] = {}
    timeout_ms: int | None = Field(default=None, gt=0)


class ApiConfigResponse(BaseModel):
    """Full configuration with secrets redacted."""
    name: str
    base_url: str
    description: str | None
    auth: dict[str, Any]
    headers: dict[str, str]
    timeout_ms: int
    created_at: datetime
    last_used_at: datetime | None

    @classmethod
    def from_config(cls, config: ApiConfiguration) -> "ApiConfigResponse":
        return cls(
            name=config.name,
            base_url=config.base_url,
            description=config.description,
            auth=config.redacted_auth(),
            headers=dict(config.headers),
            timeout_ms=config.timeout_ms,
            created_at=config.created_at,
            last_used_at=config.last_used_at,
        )


class ApiSummary(BaseModel):
    """Compact listing entry for a configuration."""
    name: str
    base_url: str
    description: str | None
    auth_type: AuthType
    has_headers: bool
    created_at: datetime
    last_used_at: datetime | None

    @classmethod
    def from_config(cls, config: ApiConfiguration) -> "ApiSummary":
        return cls(
            name=config.name,
            base_url=config.base_url,
            description=config.description,
            auth_type=config.auth_type,
            has_headers=bool(config.headers),
            created_at=config.created_at,
            last_used_at=config.last_used_at,
        )
