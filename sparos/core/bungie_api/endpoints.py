"""Bungie API endpoint paths."""

from typing import Union
from urllib.parse import quote

from .constants import MembershipType


class BungieAPIEndpoints:
    """Bungie API endpoint definitions, relative to the Platform base URL."""

    # Destiny2 endpoints
    @staticmethod
    def search_destiny_player(
        display_name: str, membership_type: MembershipType = MembershipType.ALL
    ) -> str:
        """Search Destiny players by full Bungie name (``Name#1234``)."""
        encoded = quote(display_name, safe="")
        return f"/Destiny2/SearchDestinyPlayer/{membership_type.value}/{encoded}/"

    @staticmethod
    def account_stats(
        membership_type: Union[int, str, MembershipType], membership_id: str
    ) -> str:
        """Historical account stats for one Destiny membership."""
        if isinstance(membership_type, MembershipType):
            membership_type = membership_type.value
        return f"/Destiny2/{membership_type}/Account/{membership_id}/Stats/"

    # User endpoints
    @staticmethod
    def search_by_global_name_prefix(page: int) -> str:
        """Paginated search of Bungie.net users by global display name prefix."""
        return f"/User/Search/GlobalName/{page}/"
