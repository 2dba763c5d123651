"""
API Bridge - named HTTP API configurations with request execution,
bounded request history, and keyword search over both.
"""

__version__ = "1.0.0"
