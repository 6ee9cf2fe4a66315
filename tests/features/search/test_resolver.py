"""Tests for the user resolver."""

import pytest
from unittest.mock import AsyncMock

from sparos.core.bungie_api.errors import BungieAPIError
from sparos.core.exceptions import (
    InputError,
    NotFoundError,
    UpstreamError,
    ValidationError,
)
from sparos.features.search.backup import BackupSearchClient
from sparos.features.search.gateway import BungieDirectoryGateway
from sparos.features.search.models import (
    MembershipSet,
    PrimaryCandidate,
    Resolution,
    ResolvedAccount,
)
from sparos.features.search.resolver import UserResolver


def candidate(membership_id, display_name, global_name="Guardian", mtype=3):
    return PrimaryCandidate(
        membership_type=mtype,
        membership_id=membership_id,
        display_name=display_name,
        global_display_name=global_name,
        global_display_name_code=42,
    )


@pytest.fixture
def mock_directory():
    return AsyncMock(spec=BungieDirectoryGateway)


@pytest.fixture
def mock_backup():
    return AsyncMock(spec=BackupSearchClient)


@pytest.fixture
def resolver(mock_directory, mock_backup):
    return UserResolver(mock_directory, mock_backup)


class TestResolve:
    """Primary path of UserResolver.resolve."""

    async def test_empty_query_fails_before_network(self, resolver, mock_directory):
        with pytest.raises(InputError) as exc_info:
            await resolver.resolve("")

        assert exc_info.value.message == "empty query"
        mock_directory.search_players.assert_not_called()
        mock_directory.has_account_stats.assert_not_called()

    async def test_whitespace_query_is_sent_to_directory(
        self, resolver, mock_directory
    ):
        """Only the empty string is rejected locally; Bungie judges the rest"""
        mock_directory.search_players.return_value = []

        with pytest.raises(NotFoundError):
            await resolver.resolve("   ")

        mock_directory.search_players.assert_awaited_once_with("   ")

    async def test_upstream_error_carries_message(self, resolver, mock_directory):
        mock_directory.search_players.side_effect = BungieAPIError(
            "Bungie.net is down for maintenance", error_code=5
        )

        with pytest.raises(UpstreamError) as exc_info:
            await resolver.resolve("Guardian#0042")

        assert exc_info.value.message == "Bungie.net is down for maintenance"

    async def test_zero_candidates_is_not_found_without_stats_lookup(
        self, resolver, mock_directory, mock_backup
    ):
        mock_directory.search_players.return_value = []

        with pytest.raises(NotFoundError) as exc_info:
            await resolver.resolve("Nobody#0001")

        assert exc_info.value.message == "no users found with that name"
        mock_directory.has_account_stats.assert_not_called()
        mock_backup.search_by_prefix_and_code.assert_not_called()

    async def test_first_candidate_accepted_when_viable(
        self, resolver, mock_directory
    ):
        a = candidate("1", "psn-name", mtype=2)
        b = candidate("2", "Guardian")
        mock_directory.search_players.return_value = [a, b]
        mock_directory.has_account_stats.return_value = True

        resolution = await resolver.resolve("Guardian#0042")

        assert resolution.account.membership_id == "1"
        assert resolution.account.source == "primary"
        mock_directory.has_account_stats.assert_awaited_once_with(a)

    async def test_global_identity_candidate_wins_when_first_not_viable(
        self, resolver, mock_directory
    ):
        """Only B (display name == global name) passes the stats check"""
        a = candidate("1", "psn-name", mtype=2)
        b = candidate("2", "Guardian")
        mock_directory.search_players.return_value = [a, b]
        mock_directory.has_account_stats.side_effect = lambda c: c is b

        resolution = await resolver.resolve("Guardian#0042")

        assert resolution.account.membership_id == "2"
        assert resolution.account.membership_type == 3
        checked = [c.args[0] for c in mock_directory.has_account_stats.await_args_list]
        assert checked == [a, b]

    async def test_membership_set_holds_every_candidate(
        self, resolver, mock_directory
    ):
        candidates = [
            candidate("1", "psn-name", mtype=2),
            candidate("2", "Guardian"),
            candidate("3", "xbox-name", mtype=1),
        ]
        mock_directory.search_players.return_value = candidates
        mock_directory.has_account_stats.side_effect = lambda c: c is candidates[1]

        resolution = await resolver.resolve("Guardian#0042")

        assert [m.membership_id for m in resolution.memberships.memberships] == [
            "1",
            "2",
            "3",
        ]
        assert resolution.memberships.memberships[0].global_display_name == "Guardian"

    async def test_same_candidate_is_not_checked_twice(
        self, resolver, mock_directory
    ):
        """When the first result is also the global identity it is tried once"""
        a = candidate("1", "Guardian")
        mock_directory.search_players.return_value = [a, candidate("2", "other")]
        mock_directory.has_account_stats.return_value = False

        with pytest.raises(ValidationError):
            await resolver.resolve("Guardian#0042")

        mock_directory.has_account_stats.assert_awaited_once_with(a)

    async def test_no_viable_candidate_is_validation_error(
        self, resolver, mock_directory, mock_backup
    ):
        mock_directory.search_players.return_value = [
            candidate("1", "psn-name", mtype=2),
            candidate("2", "Guardian"),
        ]
        mock_directory.has_account_stats.return_value = False

        with pytest.raises(ValidationError) as exc_info:
            await resolver.resolve("Guardian#0042")

        assert exc_info.value.message == "no valid account found for this name"
        assert mock_directory.has_account_stats.await_count == 2
        mock_backup.search_by_prefix_and_code.assert_not_called()

    async def test_unexpected_api_error_during_stats_check_becomes_upstream(
        self, resolver, mock_directory
    ):
        """Errors the gateway lets escape are translated by the error handler"""
        mock_directory.search_players.return_value = [candidate("1", "Guardian")]
        mock_directory.has_account_stats.side_effect = BungieAPIError("boom")

        with pytest.raises(UpstreamError) as exc_info:
            await resolver.resolve("Guardian#0042")

        assert exc_info.value.message == "boom"


class TestBackupFallback:
    """The backup path, entered when the primary search leaves no memberships."""

    async def test_code_is_normalized_before_backup(self, resolver, mock_backup):
        expected = Resolution(
            account=ResolvedAccount(source="backup", membership_id="11"),
            memberships=MembershipSet(),
        )
        mock_backup.search_by_prefix_and_code.return_value = expected

        resolution = await resolver._resolve_from_backup("Guardian#0042")

        assert resolution is expected
        mock_backup.search_by_prefix_and_code.assert_awaited_once_with(
            "Guardian", "42"
        )

    @pytest.mark.parametrize("query", ["Guardian", "#0042", "Guardian#0000"])
    async def test_malformed_name_is_input_error(self, resolver, mock_backup, query):
        with pytest.raises(InputError) as exc_info:
            await resolver._resolve_from_backup(query)

        assert exc_info.value.message == "invalid name format, expected Name#1234"
        mock_backup.search_by_prefix_and_code.assert_not_called()

    async def test_no_backup_match_is_not_found(self, resolver, mock_backup):
        mock_backup.search_by_prefix_and_code.return_value = None

        with pytest.raises(NotFoundError) as exc_info:
            await resolver._resolve_from_backup("Guardian#42")

        assert exc_info.value.message == "no account found using backup search"
