"""
Statistics view combining the configuration store and the history ledger.
"""

from ..context import ServiceContext
from ..schemas.history import StatsResponse


def get_stats(ctx: ServiceContext) -> StatsResponse:
    """
    Compute the statistics view from the current store and ledger.

    Args:
        ctx: Service context

    Returns:
        Configuration count plus ledger aggregates and the 10 latest records
    """
    ledger_stats = ctx.ledger.stats()
    return StatsResponse(total_apis=len(ctx.store), **ledger_stats.model_dump())
