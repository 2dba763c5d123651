"""
Models package for API Bridge.

Exports the in-memory domain models held by the configuration store and
the history ledger.
"""

from .api_config import (
    REDACTED,
    ApiConfiguration,
    ApiKeyAuth,
    AuthConfig,
    BasicAuth,
    BearerAuth,
    NoAuth,
)
from .history import TRANSPORT_FAILURE_STATUS, RequestRecord

__all__ = [
    "REDACTED",
    "ApiConfiguration",
    "ApiKeyAuth",
    "AuthConfig",
    "BasicAuth",
    "BearerAuth",
    "NoAuth",
    "TRANSPORT_FAILURE_STATUS",
    "RequestRecord",
]
