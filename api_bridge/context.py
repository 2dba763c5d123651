"""
Service context shared by every operation.

One context owns the configuration store, the history ledger, the activity
log and the outbound HTTP transport for a service instance. Routers receive
it through the ``get_context`` dependency; the MCP server is built around one.
"""

import time
from dataclasses import dataclass, field

import httpx
from fastapi import Request

from .activity_log import ActivityLog
from .config import Settings
from .services.config_store import ConfigStore
from .services.history_ledger import HistoryLedger


@dataclass
class ServiceContext:
    """
    State of one service instance.

    Attributes:
        settings: Runtime settings
        store: Named API configurations
        ledger: Recent request history
        activity_log: Recent log lines
        transport: Optional httpx transport for outbound calls (tests use
            ``httpx.MockTransport``); ``None`` means real network I/O
        started_at: Monotonic start time, for uptime reporting
    """
    settings: Settings
    store: ConfigStore
    ledger: HistoryLedger
    activity_log: ActivityLog
    transport: httpx.AsyncBaseTransport | None = None
    started_at: float = field(default_factory=time.monotonic)

    @property
    def uptime_seconds(self) -> float:
        return round(time.monotonic() - self.started_at, 3)


def build_context(
    settings: Settings | None = None,
    transport: httpx.AsyncBaseTransport | None = None
) -> ServiceContext:
    """Create a fresh, empty context from settings."""
    settings = settings or Settings()
    return ServiceContext(
        settings=settings,
        store=ConfigStore(default_timeout_ms=settings.default_timeout_ms),
        ledger=HistoryLedger(capacity=settings.history_capacity),
        activity_log=ActivityLog(max_lines=settings.activity_log_size),
        transport=transport,
    )


def get_context(request: Request) -> ServiceContext:
    """
    Dependency function for FastAPI to get the service context.

    Usage:
        @router.get("/items")
        def get_items(ctx: ServiceContext = Depends(get_context)):
            ...
    """
    return request.app.state.context
