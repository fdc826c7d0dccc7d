"""
Error types raised by stock-checker.

Ratio gaps (missing or zero inputs) are not errors; they surface as ``None``
fields on IndicatorRecord.
"""

from typing import Optional


class StockCheckerError(Exception):
    """Base class for all stock-checker errors."""


class AuthenticationError(StockCheckerError):
    """Invalid credentials, or a request issued without a session token."""


class RemoteRequestError(StockCheckerError):
    """Transport failure or non-success response from the J-Quants API."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.endpoint = endpoint
        self.status_code = status_code


class CacheUnavailableError(StockCheckerError):
    """Snapshot storage could not be read or written."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
