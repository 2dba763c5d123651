"""
Logging setup and the in-memory activity log.

All modules log through loguru's ``logger``. ``configure_logging`` installs a
stderr sink and a sink that keeps the most recent lines in an ``ActivityLog``
so they can be served back over HTTP and MCP.
"""

import sys
from collections import deque

from loguru import logger

DEFAULT_HANDLER_ID = 0

ACTIVITY_FORMAT = "[{time:YYYY-MM-DD[T]HH:mm:ss.SSS!UTC}Z] {message}"


class ActivityLog:
    """Bounded list of formatted log lines, oldest dropped first."""

    def __init__(self, max_lines: int = 100):
        self._lines: deque[str] = deque(maxlen=max_lines)

    def write(self, message) -> None:
        """loguru sink entry point."""
        self._lines.append(str(message).rstrip("\n"))

    def recent(self, limit: int = 20) -> list[str]:
        if limit <= 0:
            return []
        return list(self._lines)[-limit:]

    def __len__(self) -> int:
        return len(self._lines)


def configure_logging(activity_log: ActivityLog, level: str = "INFO", stderr: bool = True) -> list[int]:
    """
    Attach sinks for the given activity log.

    Args:
        activity_log: Destination for recent activity lines
        level: Minimum level for both sinks
        stderr: Whether to also log to standard error

    Returns:
        loguru handler ids, to be passed to ``remove_logging`` on shutdown
    """
    handler_ids = [
        logger.add(activity_log.write, level=level, format=ACTIVITY_FORMAT, colorize=False)
    ]
    if stderr:
        # Replace loguru's default stderr handler so lines are not doubled
        remove_logging([DEFAULT_HANDLER_ID])
        handler_ids.append(logger.add(sys.stderr, level=level))
    return handler_ids


def remove_logging(handler_ids: list[int]) -> None:
    for handler_id in handler_ids:
        try:
            logger.remove(handler_id)
        except ValueError:
            # Already removed, e.g. by a global logger.remove()
            pass
