"""Pydantic models for Bungie API response data."""

from typing import Any, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class BungieResponse(BaseModel, Generic[T]):
    """Envelope every Bungie.net Platform response is wrapped in."""

    error_code: int = Field(..., alias="ErrorCode")
    error_status: Optional[str] = Field(None, alias="ErrorStatus")
    message: Optional[str] = Field(None, alias="Message")
    throttle_seconds: int = Field(0, alias="ThrottleSeconds")
    response: Optional[T] = Field(None, alias="Response")

    model_config = ConfigDict(populate_by_name=True)


class UserInfoCardDTO(BaseModel):
    """A Destiny membership as returned by SearchDestinyPlayer."""

    membership_type: int = Field(..., alias="membershipType")
    membership_id: str = Field(..., alias="membershipId")
    display_name: Optional[str] = Field(None, alias="displayName")
    bungie_global_display_name: Optional[str] = Field(
        None, alias="bungieGlobalDisplayName"
    )
    bungie_global_display_name_code: Optional[int] = Field(
        None, alias="bungieGlobalDisplayNameCode"
    )
    icon_path: Optional[str] = Field(None, alias="iconPath")
    cross_save_override: Optional[int] = Field(None, alias="crossSaveOverride")
    applicable_membership_types: List[int] = Field(
        default_factory=list, alias="applicableMembershipTypes"
    )
    is_public: Optional[bool] = Field(None, alias="isPublic")

    model_config = ConfigDict(populate_by_name=True)


class UserSearchResponseDetailDTO(BaseModel):
    """One Bungie.net user from the global name search."""

    bungie_global_display_name: Optional[str] = Field(
        None, alias="bungieGlobalDisplayName"
    )
    bungie_global_display_name_code: Optional[int] = Field(
        None, alias="bungieGlobalDisplayNameCode"
    )
    bungie_net_membership_id: Optional[str] = Field(
        None, alias="bungieNetMembershipId"
    )
    destiny_memberships: List[UserInfoCardDTO] = Field(
        default_factory=list, alias="destinyMemberships"
    )

    model_config = ConfigDict(populate_by_name=True)


class UserSearchResponseDTO(BaseModel):
    """One page of the global name search."""

    search_results: List[UserSearchResponseDetailDTO] = Field(
        default_factory=list, alias="searchResults"
    )
    page: int = 0
    has_more: bool = Field(False, alias="hasMore")

    model_config = ConfigDict(populate_by_name=True)


# Stats payloads are large and only checked for presence
AccountStatsDTO = dict[str, Any]
