"""
History record model for executed requests.

One record is created per recorded call. Records reference their
configuration by name only, so they survive deletion of that configuration.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, computed_field


# Status used for calls that never produced an HTTP response
TRANSPORT_FAILURE_STATUS = 0


class RequestRecord(BaseModel):
    """
    Immutable record of one executed request.

    Attributes:
        timestamp: Completion time of the call
        api_name: Name of the configuration the call went through
        method: HTTP method used
        endpoint: Endpoint path as supplied by the caller
        status: HTTP status code, or ``TRANSPORT_FAILURE_STATUS``
        response_time_ms: End-to-end duration in milliseconds
    """
    model_config = ConfigDict(frozen=True)

    timestamp: datetime
    api_name: str
    method: str
    endpoint: str
    status: int
    response_time_ms: int

    @computed_field
    @property
    def success(self) -> bool:
        return 200 <= self.status <= 299
