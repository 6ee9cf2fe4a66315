"""Backup search: paginated global name search filtered by display name code."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from sparos.core.bungie_api.errors import BungieAPIError
from sparos.core.exceptions import UpstreamError
from .models import BackupCandidate, Resolution
from .transformers import (
    backup_candidate_to_account,
    destiny_memberships_to_membership_set,
)

if TYPE_CHECKING:
    from sparos.protocols import PlayerDirectory

logger = structlog.get_logger(__name__)


class BackupSearchClient:
    """Finds a user by walking every page of the global name prefix search."""

    def __init__(self, directory: "PlayerDirectory"):
        self._directory = directory

    async def _collect_pages(self, prefix: str) -> List[BackupCandidate]:
        """Accumulate every page; an empty page ends the walk even if hasMore is set."""
        results: List[BackupCandidate] = []
        page = 0
        has_more = True

        while has_more:
            try:
                page_results, has_more = await self._directory.search_global_name_page(
                    prefix, page
                )
            except BungieAPIError as e:
                logger.warning(
                    "Backup search page failed",
                    prefix=prefix,
                    page=page,
                    results_discarded=len(results),
                    error=str(e),
                )
                raise UpstreamError(
                    message=e.message,
                    operation="search_by_prefix_and_code",
                    context={"prefix": prefix, "page": page},
                    original_error=e,
                ) from e

            results.extend(page_results)
            if not page_results:
                if has_more:
                    logger.debug(
                        "Empty page with hasMore set, stopping", prefix=prefix, page=page
                    )
                break
            page += 1

        return results

    async def search_by_prefix_and_code(
        self,
        prefix: str,
        code: str,
        membership_id: Optional[str] = None,
    ) -> Optional[Resolution]:
        """
        Search all users named ``prefix`` and pick the one with ``code``.

        :param prefix: Global display name (or its prefix)
        :param code: Display name code, already stripped of leading zeros
        :param membership_id: Narrow the result to this destiny membership only
        :returns: Resolution, or None when no user matches
        :raises UpstreamError: If any page request fails
        """
        if not prefix or not code:
            return None

        results = await self._collect_pages(prefix)
        # Entries without a bungie.net membership are not resolvable accounts
        results = [r for r in results if r.bungie_net_membership_id is not None]

        logger.debug(
            "Backup search collected users",
            prefix=prefix,
            code=code,
            user_count=len(results),
        )

        matched = next((r for r in results if r.matches_code(code)), None)
        if matched is None:
            return None

        memberships = list(matched.destiny_memberships)
        if membership_id:
            memberships = [
                m for m in memberships if str(m.membership_id) == str(membership_id)
            ]

        account = backup_candidate_to_account(matched, memberships)
        logger.info(
            "Backup search matched user",
            prefix=prefix,
            code=code,
            bungie_net_membership_id=matched.bungie_net_membership_id,
            membership_count=len(memberships),
        )
        return Resolution(
            account=account,
            memberships=destiny_memberships_to_membership_set(memberships),
        )
