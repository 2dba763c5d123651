"""
Runtime settings for API Bridge.

Values are read from the environment (``API_BRIDGE_`` prefix) or a ``.env``
file; every field has a development-friendly default.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_BRIDGE_", env_file=".env", extra="ignore")

    app_name: str = "API Bridge"
    version: str = "1.0.0"

    # History ledger keeps only the most recent calls
    history_capacity: int = Field(default=100, gt=0)
    default_timeout_ms: int = Field(default=30000, gt=0)
    # Timeouts and connection failures are left out of history unless enabled
    record_transport_failures: bool = False

    search_result_limit: int = Field(default=10, gt=0)
    search_ordering: Literal["score", "title_length"] = "score"

    activity_log_size: int = Field(default=100, gt=0)
    log_level: str = "INFO"

    cors_origins: list[str] = ["*"]

    mcp_transport: Literal["stdio", "sse", "streamable-http"] = "stdio"
    mcp_host: str = "127.0.0.1"
    mcp_port: int = 8000


@lru_cache
def get_settings() -> Settings:
    return Settings()
