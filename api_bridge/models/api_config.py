"""
API configuration model held by the configuration store.

A configuration is a named, reusable description of how to reach and
authenticate to a remote HTTP API. Authentication is a tagged union over the
supported schemes; each variant carries only the credentials it needs.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


# Marker used in place of secret values in any external rendering
REDACTED = "[REDACTED]"

AuthType = Literal["none", "bearer", "api_key", "basic"]


class NoAuth(BaseModel):
    """No authentication header is injected."""
    type: Literal["none"] = "none"


class BearerAuth(BaseModel):
    """Sends ``Authorization: Bearer <token>``."""
    type: Literal["bearer"] = "bearer"
    token: str


class ApiKeyAuth(BaseModel):
    """Sends the key in a caller-chosen header."""
    type: Literal["api_key"] = "api_key"
    api_key: str
    header_name: str


class BasicAuth(BaseModel):
    """Sends ``Authorization: Basic base64(username:password)``."""
    type: Literal["basic"] = "basic"
    username: str
    password: str


AuthConfig = Annotated[
    Union[NoAuth, BearerAuth, ApiKeyAuth, BasicAuth],
    Field(discriminator="type"),
]

# Secret field names per auth variant
SECRET_FIELDS = ("token", "api_key", "password")


class ApiConfiguration(BaseModel):
    """
    A stored API configuration.

    Attributes:
        name: Unique key; never changes after creation
        base_url: Absolute http(s) URL without trailing slash
        description: Optional free text
        auth: Authentication scheme and credentials
        headers: Default headers sent with every call
        timeout_ms: Deadline for each outbound call
        created_at: Timestamp when the configuration was saved
        last_used_at: Timestamp of the most recent recorded call, if any
    """
    model_config = ConfigDict(validate_assignment=True)

    name: str = Field(frozen=True)
    base_url: str
    description: str | None = None
    auth: AuthConfig = Field(default_factory=NoAuth)
    headers: dict[str, str] = {}
    timeout_ms: int = Field(default=30000, gt=0)
    created_at: datetime = Field(frozen=True)
    last_used_at: datetime | None = None

    @property
    def auth_type(self) -> str:
        return self.auth.type

    def redacted_auth(self) -> dict:
        """Auth as a plain dict with secret values replaced by ``REDACTED``."""
        data = self.auth.model_dump()
        for key in SECRET_FIELDS:
            if key in data:
                data[key] = REDACTED
        return data
