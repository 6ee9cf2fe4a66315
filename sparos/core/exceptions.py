"""
Service layer custom exceptions.

``ServiceException`` carries structured context for logging; the
``ResolutionError`` family is the taxonomy a player search can end in. The
``message`` attribute of a resolution error is the text shown to the user,
while ``str()`` adds the service/operation prefix for logs.
"""

from typing import Any, Dict, Optional


class ServiceException(Exception):
    """Base exception for all service layer errors."""

    def __init__(
        self,
        message: str,
        service: Optional[str] = None,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.service = service
        self.operation = operation
        self.context = context or {}
        self.original_error = original_error

    def __str__(self) -> str:
        if self.service and self.operation:
            return f"[{self.service}.{self.operation}] {self.message}"
        return self.message


class ResolutionError(ServiceException):
    """Base exception for a player search that ended without an account."""

    kind = "resolution"

    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            service="UserResolver",
            operation=operation,
            context=context,
            original_error=original_error,
        )


class InputError(ResolutionError):
    """The query was empty or not in ``Name#1234`` form."""

    kind = "input"


class UpstreamError(ResolutionError):
    """Bungie returned a non-success code or the request never completed."""

    kind = "upstream"


class NotFoundError(ResolutionError):
    """No directory entry matched the query."""

    kind = "not_found"


class ValidationError(ResolutionError):
    """Directory entries exist but none of them has a playable account."""

    kind = "validation"
