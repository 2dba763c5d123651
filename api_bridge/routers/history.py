"""
History and statistics API routes.

Provides read-only views over the request history ledger, the derived
usage statistics, and the recent activity log. History records are created
automatically when requests are executed.
"""

from fastapi import APIRouter, Depends, Query

from ..context import ServiceContext, get_context
from ..schemas.history import HistoryListResponse, StatsResponse
from ..services.stats_service import get_stats


router = APIRouter(prefix="/api", tags=["history"])


@router.get("/history", response_model=HistoryListResponse)
def list_history(
    limit: int = Query(default=100, ge=1, le=1000),
    ctx: ServiceContext = Depends(get_context)
):
    """
    Get the most recent history records in insertion order (oldest first).

    Args:
        limit: Maximum number of records to return
        ctx: Service context

    Returns:
        HistoryListResponse with items, total count and ledger capacity
    """
    return HistoryListResponse(
        items=ctx.ledger.recent(limit),
        total=len(ctx.ledger),
        capacity=ctx.ledger.capacity,
    )


@router.get("/stats", response_model=StatsResponse)
def stats(ctx: ServiceContext = Depends(get_context)):
    """Usage statistics computed from the current store and history."""
    return get_stats(ctx)


@router.get("/logs", response_model=list[str])
def recent_logs(
    limit: int = Query(default=20, ge=1, le=1000),
    ctx: ServiceContext = Depends(get_context)
):
    """Most recent activity log lines, oldest first."""
    return ctx.activity_log.recent(limit)
