# Services package

from .config_store import ConfigStore, build_auth, normalize_base_url
from .history_ledger import HistoryLedger
from .request_builder import build_headers, build_url

__all__ = [
    "ConfigStore",
    "build_auth",
    "normalize_base_url",
    "HistoryLedger",
    "build_headers",
    "build_url",
]
