"""
Bungie Directory Gateway - Anti-Corruption Layer for the search feature.

Translates Bungie's envelopes and camelCase DTOs into search candidates so the
resolver never sees Platform API structures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Tuple

import structlog

from sparos.core.bungie_api.errors import BungieAPIError
from .models import BackupCandidate, PrimaryCandidate
from .transformers import search_detail_to_candidate, user_info_card_to_candidate

if TYPE_CHECKING:
    from sparos.core.bungie_api.client import BungieAPIClient

logger = structlog.get_logger(__name__)


class BungieDirectoryGateway:
    """
    Anti-Corruption Layer over the Bungie API client.

    Implements the ``PlayerDirectory`` protocol consumed by the resolver and
    the backup search client.
    """

    def __init__(self, bungie_api_client: "BungieAPIClient"):
        """
        Initialize gateway with Bungie API client.

        :param bungie_api_client: Low-level Bungie API client
        """
        self._client = bungie_api_client

    async def search_players(self, query: str) -> List[PrimaryCandidate]:
        """
        Primary directory search by full Bungie name, across all platforms.

        :param query: Raw ``Name#1234`` handle; the client URL-encodes it
        :returns: Candidates in the order Bungie returned them
        :raises BungieAPIError: On transport failure or non-success ErrorCode
        """
        cards = await self._client.search_destiny_player(query)
        candidates = [user_info_card_to_candidate(card) for card in cards]

        logger.debug(
            "Primary search returned candidates",
            query=query,
            candidate_count=len(candidates),
        )
        return candidates

    async def has_account_stats(self, candidate: PrimaryCandidate) -> bool:
        """
        Check that a candidate has a playable Destiny account.

        Any failure counts as "not viable" and is never raised.
        """
        try:
            stats = await self._client.get_account_stats(
                candidate.membership_type, candidate.membership_id
            )
        except BungieAPIError as e:
            logger.debug(
                "Stats check failed",
                membership_type=candidate.membership_type,
                membership_id=candidate.membership_id,
                error=str(e),
            )
            return False

        return bool(stats)

    async def search_global_name_page(
        self, prefix: str, page: int
    ) -> Tuple[List[BackupCandidate], bool]:
        """
        Fetch one page of the global display name prefix search.

        :returns: Tuple of (candidates on this page, upstream ``hasMore`` flag)
        :raises BungieAPIError: On transport failure or non-success ErrorCode
        """
        result = await self._client.search_by_global_name_prefix(prefix, page)
        candidates = [search_detail_to_candidate(d) for d in result.search_results]
        return candidates, result.has_more
