"""
Custom exceptions for the search proxy.

Every exception carries the HTTP status the backend answers with.
"""

from typing import Any, Optional


class SearchProxyException(Exception):
    """Base exception for all search-proxy errors."""

    status_code: int = 500

    def __init__(self, message: str, detail: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail


class InvalidRequest(SearchProxyException):
    """Request parameters failed validation. No upstream calls are made."""

    status_code = 400


class Unauthorized(SearchProxyException):
    """Inbound credential missing or incorrect."""

    status_code = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ConfigurationError(SearchProxyException):
    """Required credential or endpoint is not configured."""

    pass


class UpstreamFailure(SearchProxyException):
    """An outbound collaborator answered with a non-success status."""

    def __init__(
        self,
        provider: str,
        message: str,
        status: Optional[int] = None,
        detail: Optional[Any] = None,
    ):
        super().__init__(message, detail)
        self.provider = provider
        self.status = status


class UpstreamTimeout(UpstreamFailure):
    """An outbound collaborator did not answer within the configured timeout."""

    def __init__(self, provider: str, timeout_seconds: float):
        super().__init__(provider, f"{provider} timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds


class UnexpectedError(SearchProxyException):
    """Network errors, malformed responses and anything else unforeseen."""

    pass
