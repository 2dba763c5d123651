"""
Pydantic schemas for request history and usage statistics.
"""

from pydantic import BaseModel

from ..models.history import RequestRecord


class HistoryListResponse(BaseModel):
    """Schema for the recent history listing."""
    items: list[RequestRecord]
    total: int
    capacity: int


class LedgerStats(BaseModel):
    """Aggregates computed from the current history buffer."""
    total_requests: int
    successful_requests: int
    success_rate: float
    average_response_time_ms: float
    most_used_api_name: str | None
    last_10: list[RequestRecord]


class StatsResponse(LedgerStats):
    """Statistics view including the configuration count."""
    total_apis: int
