"""Custom error classes for the Bungie API client."""

from typing import Optional, Dict, Any


class BungieAPIError(Exception):
    """Base exception for Bungie API errors with status code tracking."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: Optional[int] = None,
        error_status: Optional[str] = None,
        response_data: Optional[Dict[str, Any]] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        """
        Initialize BungieAPIError.

        Args:
            message: Error message (Bungie's ``Message`` field when available)
            status_code: HTTP status code
            error_code: Bungie ``ErrorCode`` from the response envelope
            error_status: Bungie ``ErrorStatus`` from the response envelope
            response_data: Raw response data from API
            retry_after: Seconds Bungie asked us to wait (``ThrottleSeconds``)
        """
        super().__init__(message)
        self.message: str = message
        self.status_code: Optional[int] = status_code
        self.error_code: Optional[int] = error_code
        self.error_status: Optional[str] = error_status
        self.response_data: Dict[str, Any] = response_data or {}
        self.retry_after: Optional[float] = retry_after

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_status:
            return f"Bungie API Error {self.error_status}: {self.message}"
        if self.status_code:
            return f"Bungie API Error {self.status_code}: {self.message}"
        return f"Bungie API Error: {self.message}"


class RateLimitError(BungieAPIError):
    """Throttled by Bungie (HTTP 429 or a throttle error code)."""

    pass


class AuthenticationError(BungieAPIError):
    """Authentication error (401) - missing or invalid API key."""

    pass


class ForbiddenError(BungieAPIError):
    """Forbidden error (403) - key not allowed for this origin or endpoint."""

    pass


class EndpointNotFoundError(BungieAPIError):
    """Not found error (404) - unknown endpoint path."""

    pass


class ServiceUnavailableError(BungieAPIError):
    """Service unavailable (503) - Bungie servers down or in maintenance."""

    pass


class BadRequestError(BungieAPIError):
    """Bad request (400) - invalid parameters."""

    pass
