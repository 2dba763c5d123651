"""
Pydantic schemas for request execution.

Defines the schema for invoking a stored configuration and the two possible
outcomes: an HTTP response (any status) or a transport-level error.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field, JsonValue


# HTTP methods supported by the executor
HttpMethod = Literal["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


class ExecuteRequest(BaseModel):
    """Schema for a call through a stored configuration."""
    endpoint: str = "/"
    method: HttpMethod = "GET"
    body: JsonValue = None
    query_params: dict[str, Any] = {}
    headers: dict[str, str] = {}


class ExecuteResponse(BaseModel):
    """
    Schema for a completed call.

    ``body`` is parsed JSON when the response carries JSON, otherwise text.
    """
    status: int
    status_text: str
    headers: dict[str, str]
    body: JsonValue = None
    response_time_ms: int


class ExecuteErrorResponse(BaseModel):
    """Schema for a call that produced no HTTP response."""
    error: str
    error_type: Literal["network_error", "timeout", "invalid_url", "unknown"]
    details: str | None = None
    response_time_ms: int = Field(default=0, ge=0)
