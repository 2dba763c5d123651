"""
Pydantic schemas package.

Exports all schemas for API request/response validation.
"""

from .api_config import (
    AuthInput,
    ApiConfigCreate,
    ApiConfigResponse,
    ApiSummary,
)

from .execute import (
    HttpMethod,
    ExecuteRequest,
    ExecuteResponse,
    ExecuteErrorResponse,
)

from .history import (
    HistoryListResponse,
    LedgerStats,
    StatsResponse,
)

from .search import (
    SearchResult,
    SearchResponse,
    Document,
)

__all__ = [
    # API configuration schemas
    "AuthInput",
    "ApiConfigCreate",
    "ApiConfigResponse",
    "ApiSummary",
    # Execute schemas
    "HttpMethod",
    "ExecuteRequest",
    "ExecuteResponse",
    "ExecuteErrorResponse",
    # History schemas
    "HistoryListResponse",
    "LedgerStats",
    "StatsResponse",
    # Search schemas
    "SearchResult",
    "SearchResponse",
    "Document",
]
