"""Bungie API constants and enum definitions."""

from enum import Enum


class MembershipType(int, Enum):
    """Bungie membership types (platforms an account can live on)."""

    NONE = 0
    XBOX = 1
    PSN = 2
    STEAM = 3
    BLIZZARD = 4
    STADIA = 5
    EPIC = 6
    DEMON = 10
    BUNGIE_NEXT = 254
    ALL = -1


class PlatformErrorCode(int, Enum):
    """Subset of Bungie ``PlatformErrorCodes`` the client reacts to."""

    SUCCESS = 1
    SYSTEM_DISABLED = 5
    THROTTLE_LIMIT_EXCEEDED = 31
    THROTTLE_LIMIT_EXCEEDED_MINUTES = 35
    THROTTLE_LIMIT_EXCEEDED_MOMENTARILY = 36
    THROTTLE_LIMIT_EXCEEDED_SECONDS = 37
    PER_APPLICATION_THROTTLE_EXCEEDED = 51
    PER_APPLICATION_ANONYMOUS_THROTTLE_EXCEEDED = 52
    PER_APPLICATION_AUTHENTICATED_THROTTLE_EXCEEDED = 53
    PER_USER_THROTTLE_EXCEEDED = 54


THROTTLE_ERROR_CODES = frozenset(
    {
        PlatformErrorCode.THROTTLE_LIMIT_EXCEEDED,
        PlatformErrorCode.THROTTLE_LIMIT_EXCEEDED_MINUTES,
        PlatformErrorCode.THROTTLE_LIMIT_EXCEEDED_MOMENTARILY,
        PlatformErrorCode.THROTTLE_LIMIT_EXCEEDED_SECONDS,
        PlatformErrorCode.PER_APPLICATION_THROTTLE_EXCEEDED,
        PlatformErrorCode.PER_APPLICATION_ANONYMOUS_THROTTLE_EXCEEDED,
        PlatformErrorCode.PER_APPLICATION_AUTHENTICATED_THROTTLE_EXCEEDED,
        PlatformErrorCode.PER_USER_THROTTLE_EXCEEDED,
    }
)
