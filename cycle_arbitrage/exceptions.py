"""
Exception hierarchy for the cycle arbitrage engine.

Separates fatal conditions (configuration, feed transport) from the
recoverable ones the event loop skips (unknown pools, encoding failures).
"""

from typing import Any, Dict, Optional


class CycleArbitrageError(Exception):
    """Base exception for all cycle arbitrage related errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.details = details or {}


class ConfigurationError(CycleArbitrageError):
    """Raised when required configuration is missing or malformed."""

    pass


class DataError(CycleArbitrageError):
    """Raised when an on-chain payload cannot be decoded."""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.source = source


class UnknownPoolError(CycleArbitrageError):
    """Raised when a reserve update names a pool the graph does not track."""

    def __init__(self, pool_id: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(f"Pool {pool_id} is not tracked", details)
        self.pool_id = pool_id


class EncodingError(CycleArbitrageError):
    """Raised when a route cannot be turned into executor calls."""

    def __init__(
        self,
        message: str,
        hop_index: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.hop_index = hop_index


class SubmissionError(CycleArbitrageError):
    """Raised when the bundle relay rejects or fails a request."""

    def __init__(
        self,
        message: str,
        endpoint: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint
        self.status_code = status_code


class FeedDisconnectedError(CycleArbitrageError):
    """Raised when the reserve-update subscription stops delivering events."""

    pass
