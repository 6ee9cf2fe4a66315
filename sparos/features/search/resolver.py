"""User resolver: turns a Bungie name into exactly one validated account.

The primary search frequently returns several entries for one person
(cross-save leaves a copy per platform), and some of them have no game data.
The resolver tries the first result, then the entry listed under its global
name, and only accepts a candidate once its stats endpoint answers.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

import structlog

from sparos.core.bungie_api.errors import BungieAPIError
from sparos.core.decorators import service_error_handler
from sparos.core.exceptions import (
    InputError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from .models import PrimaryCandidate, Resolution, parse_query
from .transformers import candidates_to_membership_set, primary_candidate_to_account

if TYPE_CHECKING:
    from sparos.protocols import PlayerDirectory
    from .backup import BackupSearchClient

logger = structlog.get_logger(__name__)


class UserResolver:
    """Resolves ``Name#1234`` queries against the Bungie directory."""

    def __init__(
        self,
        directory: "PlayerDirectory",
        backup: "BackupSearchClient",
    ):
        """
        :param directory: Gateway used for the primary search and stats checks
        :param backup: Client used when the primary search yields no memberships
        """
        self._directory = directory
        self._backup = backup

    @staticmethod
    def _pick_candidates(
        candidates: List[PrimaryCandidate],
    ) -> List[PrimaryCandidate]:
        """Return the candidates to check, in order.

        The first result always comes first; the first entry whose display
        name equals its global name follows when it is a different entry.
        """
        first = candidates[0]
        second: Optional[PrimaryCandidate] = next(
            (c for c in candidates if c.is_global_identity), None
        )
        if second is not None and second is not first:
            return [first, second]
        return [first]

    async def _search_primary(self, query: str) -> List[PrimaryCandidate]:
        try:
            return await self._directory.search_players(query)
        except BungieAPIError as e:
            raise UpstreamError(
                message=e.message,
                operation="resolve",
                context={"query": query, "error_code": e.error_code},
                original_error=e,
            ) from e

    @service_error_handler("UserResolver")
    async def resolve(self, query: str) -> Resolution:
        """
        Resolve a Bungie name into one account and its memberships.

        :param query: Raw ``Name#1234`` handle
        :returns: The validated account with every membership found for the name
        :raises InputError: Empty query, or malformed name on the backup path
        :raises UpstreamError: Bungie answered with an error or was unreachable
        :raises NotFoundError: No directory entry matched
        :raises ValidationError: Entries matched but none has game data
        """
        if not query:
            raise InputError("empty query", operation="resolve")

        candidates = await self._search_primary(query)
        if not candidates:
            raise NotFoundError(
                "no users found with that name",
                operation="resolve",
                context={"query": query},
            )

        memberships = candidates_to_membership_set(candidates)

        for candidate in self._pick_candidates(candidates):
            if await self._directory.has_account_stats(candidate):
                logger.info(
                    "Resolved account from primary search",
                    query=query,
                    membership_type=candidate.membership_type,
                    membership_id=candidate.membership_id,
                    candidate_count=len(candidates),
                )
                return Resolution(
                    account=primary_candidate_to_account(candidate),
                    memberships=memberships,
                )

        if not memberships.is_empty:
            raise ValidationError(
                "no valid account found for this name",
                operation="resolve",
                context={"query": query, "candidate_count": len(candidates)},
            )

        # Unreachable while the empty-result check above stands; kept so the
        # backup path triggers on exactly this condition.
        return await self._resolve_from_backup(query)

    async def _resolve_from_backup(self, query: str) -> Resolution:
        """Split the query and look the user up through the backup search."""
        prefix, code = parse_query(query)
        if not prefix or not code:
            raise InputError(
                "invalid name format, expected Name#1234",
                operation="resolve",
                context={"query": query},
            )

        resolution = await self._backup.search_by_prefix_and_code(prefix, code)
        if resolution is None:
            raise NotFoundError(
                "no account found using backup search",
                operation="resolve",
                context={"prefix": prefix, "code": code},
            )
        return resolution
