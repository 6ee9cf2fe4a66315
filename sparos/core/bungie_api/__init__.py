"""
Bungie.net Platform API client package.

This package provides the HTTP transport used to talk to Bungie's player
directory, with error mapping and authentication.
"""

from .client import BungieAPIClient
from .constants import MembershipType, PlatformErrorCode
from .errors import (
    BungieAPIError,
    RateLimitError,
    AuthenticationError,
    ForbiddenError,
    EndpointNotFoundError,
    BadRequestError,
    ServiceUnavailableError,
)
from .models import (
    BungieResponse,
    UserInfoCardDTO,
    UserSearchResponseDetailDTO,
    UserSearchResponseDTO,
)
from .endpoints import BungieAPIEndpoints

__all__ = [
    "BungieAPIClient",
    "MembershipType",
    "PlatformErrorCode",
    "BungieAPIError",
    "RateLimitError",
    "AuthenticationError",
    "ForbiddenError",
    "EndpointNotFoundError",
    "BadRequestError",
    "ServiceUnavailableError",
    "BungieResponse",
    "UserInfoCardDTO",
    "UserSearchResponseDetailDTO",
    "UserSearchResponseDTO",
    "BungieAPIEndpoints",
]
