import httpx
import pytest
from unittest.mock import AsyncMock

from sparos.core.bungie_api import BungieAPIClient
from sparos.core.bungie_api.errors import BungieAPIError, ServiceUnavailableError
from sparos.core.bungie_api.models import (
    UserInfoCardDTO,
    UserSearchResponseDetailDTO,
    UserSearchResponseDTO,
)
from sparos.features.search.gateway import BungieDirectoryGateway
from sparos.features.search.models import BackupCandidate, PrimaryCandidate


@pytest.fixture
def mock_bungie_client():
    return AsyncMock(spec=BungieAPIClient)


@pytest.fixture
def gateway(mock_bungie_client):
    return BungieDirectoryGateway(mock_bungie_client)


@pytest.fixture
def candidate():
    return PrimaryCandidate(
        membership_type=3,
        membership_id="4611686018467284386",
        display_name="Guardian",
        global_display_name="Guardian",
        global_display_name_code=42,
    )


async def test_search_players_translates_cards(gateway, mock_bungie_client):
    """DTO fields are renamed into candidate fields, order preserved"""
    mock_bungie_client.search_destiny_player.return_value = [
        UserInfoCardDTO.model_validate(
            {
                "membershipType": 2,
                "membershipId": "1",
                "displayName": "psn-name",
                "bungieGlobalDisplayName": "Guardian",
                "bungieGlobalDisplayNameCode": 42,
                "crossSaveOverride": 3,
                "applicableMembershipTypes": [2],
            }
        ),
        UserInfoCardDTO.model_validate(
            {
                "membershipType": 3,
                "membershipId": "2",
                "displayName": "Guardian",
                "bungieGlobalDisplayName": "Guardian",
                "bungieGlobalDisplayNameCode": 42,
                "iconPath": "/steam.png",
            }
        ),
    ]

    result = await gateway.search_players("Guardian#0042")

    mock_bungie_client.search_destiny_player.assert_called_once_with("Guardian#0042")
    assert [c.membership_id for c in result] == ["1", "2"]
    assert all(isinstance(c, PrimaryCandidate) for c in result)
    assert result[0].display_name == "psn-name"
    assert result[0].cross_save_override == 3
    assert result[0].applicable_membership_types == [2]
    assert result[0].is_global_identity is False
    assert result[1].icon_path == "/steam.png"
    assert result[1].is_global_identity is True


async def test_search_players_propagates_api_errors(gateway, mock_bungie_client):
    mock_bungie_client.search_destiny_player.side_effect = ServiceUnavailableError(
        "Maintenance", status_code=503
    )

    with pytest.raises(ServiceUnavailableError):
        await gateway.search_players("Guardian#42")


async def test_has_account_stats_true_for_payload(
    gateway, mock_bungie_client, candidate
):
    mock_bungie_client.get_account_stats.return_value = {"mergedAllCharacters": {}}

    assert await gateway.has_account_stats(candidate) is True
    mock_bungie_client.get_account_stats.assert_called_once_with(
        3, "4611686018467284386"
    )


async def test_has_account_stats_false_for_empty_payload(
    gateway, mock_bungie_client, candidate
):
    mock_bungie_client.get_account_stats.return_value = {}

    assert await gateway.has_account_stats(candidate) is False


async def test_has_account_stats_false_on_api_error(
    gateway, mock_bungie_client, candidate
):
    """Stats lookup failures are a "not viable" answer, never an exception"""
    mock_bungie_client.get_account_stats.side_effect = BungieAPIError(
        "DestinyAccountNotFound", error_code=1601
    )

    assert await gateway.has_account_stats(candidate) is False


async def test_has_account_stats_false_on_rate_limit_with_date_retry_after(
    candidate,
):
    """A 429 carrying an HTTP-date Retry-After still reads as not viable"""

    def handler(request):
        return httpx.Response(
            429,
            headers={"Retry-After": "Wed, 21 Oct 2026 07:28:00 GMT"},
            json={"Message": "Slow down", "ErrorCode": 51},
        )

    async with BungieAPIClient(
        api_key="test_api_key",
        base_url="https://bungie.test/Platform",
        transport=httpx.MockTransport(handler),
    ) as client:
        gateway = BungieDirectoryGateway(client)
        assert await gateway.has_account_stats(candidate) is False


async def test_search_global_name_page(gateway, mock_bungie_client):
    mock_bungie_client.search_by_global_name_prefix.return_value = (
        UserSearchResponseDTO(
            search_results=[
                UserSearchResponseDetailDTO.model_validate(
                    {
                        "bungieGlobalDisplayName": "Guardian",
                        "bungieGlobalDisplayNameCode": 42,
                        "bungieNetMembershipId": "999",
                        "destinyMemberships": [
                            {
                                "membershipType": 3,
                                "membershipId": "1",
                                "displayName": "Guardian",
                            }
                        ],
                    }
                )
            ],
            has_more=True,
        )
    )

    candidates, has_more = await gateway.search_global_name_page("Guardian", 3)

    mock_bungie_client.search_by_global_name_prefix.assert_called_once_with(
        "Guardian", 3
    )
    assert has_more is True
    assert len(candidates) == 1
    assert isinstance(candidates[0], BackupCandidate)
    assert candidates[0].bungie_net_membership_id == "999"
    assert candidates[0].destiny_memberships[0].membership_id == "1"
    assert candidates[0].destiny_memberships[0].membership_type == 3
