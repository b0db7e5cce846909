"""
Exceptions Module
Error hierarchy shared by the transport, the providers and the API layer.
"""

from typing import Optional


class GameScraperError(Exception):
    """Base class for all scraper errors"""


class TransportError(GameScraperError):
    """Raised when a page cannot be fetched (network failure, timeout, non-2xx status)"""

    def __init__(self, message: str, url: Optional[str] = None, status_code: Optional[int] = None):
        self.url = url
        self.status_code = status_code
        super().__init__(message)


class ScraperError(GameScraperError):
    """
    Raised by a provider when an operation cannot complete.

    Attributes:
        operation: Human readable label of the failed operation (e.g. "search")
        cause: The underlying exception
    """

    def __init__(self, operation: str, cause: Exception):
        self.operation = operation
        self.cause = cause
        super().__init__(f"Failed to {operation}: {cause}")


class InvalidQueryError(GameScraperError):
    """Raised for bad client input, before any request is made"""
