"""Transformers between Bungie DTOs, search candidates and resolved accounts."""

from typing import List

from sparos.core.bungie_api.models import (
    UserInfoCardDTO,
    UserSearchResponseDetailDTO,
)
from .models import (
    BackupCandidate,
    DestinyMembership,
    Membership,
    MembershipSet,
    PrimaryCandidate,
    ResolvedAccount,
)


def user_info_card_to_candidate(card: UserInfoCardDTO) -> PrimaryCandidate:
    """Translate a SearchDestinyPlayer entry into a primary candidate."""
    return PrimaryCandidate(
        membership_type=card.membership_type,
        membership_id=card.membership_id,
        display_name=card.display_name,
        global_display_name=card.bungie_global_display_name,
        global_display_name_code=card.bungie_global_display_name_code,
        icon_path=card.icon_path,
        cross_save_override=card.cross_save_override,
        applicable_membership_types=list(card.applicable_membership_types),
    )


def search_detail_to_candidate(detail: UserSearchResponseDetailDTO) -> BackupCandidate:
    """Translate a global name search entry into a backup candidate."""
    return BackupCandidate(
        global_display_name=detail.bungie_global_display_name,
        global_display_name_code=detail.bungie_global_display_name_code,
        bungie_net_membership_id=detail.bungie_net_membership_id,
        destiny_memberships=[
            DestinyMembership(
                membership_id=card.membership_id,
                membership_type=card.membership_type,
                display_name=card.display_name,
            )
            for card in detail.destiny_memberships
        ],
    )


def candidates_to_membership_set(candidates: List[PrimaryCandidate]) -> MembershipSet:
    """Map every primary candidate to a membership record."""
    return MembershipSet(
        memberships=[
            Membership(
                membership_type=c.membership_type,
                membership_id=c.membership_id,
                display_name=c.display_name,
                global_display_name=c.global_display_name,
                global_display_name_code=c.global_display_name_code,
                cross_save_override=c.cross_save_override,
                applicable_membership_types=list(c.applicable_membership_types),
                icon_path=c.icon_path,
            )
            for c in candidates
        ]
    )


def destiny_memberships_to_membership_set(
    memberships: List[DestinyMembership],
) -> MembershipSet:
    """Map a backup user's destiny memberships to membership records."""
    return MembershipSet(
        memberships=[
            Membership(
                membership_type=m.membership_type,
                membership_id=m.membership_id,
                display_name=m.display_name,
            )
            for m in memberships
        ]
    )


def primary_candidate_to_account(candidate: PrimaryCandidate) -> ResolvedAccount:
    """Normalize a validated primary candidate."""
    return ResolvedAccount(
        source="primary",
        membership_type=candidate.membership_type,
        membership_id=candidate.membership_id,
        display_name=candidate.display_name,
        global_display_name=candidate.global_display_name,
        global_display_name_code=candidate.global_display_name_code,
        icon_path=candidate.icon_path,
    )


def backup_candidate_to_account(
    candidate: BackupCandidate, memberships: List[DestinyMembership]
) -> ResolvedAccount:
    """Normalize a matched backup user around its first destiny membership.

    The membership type is left unset, the global search does not say which
    membership is the primary one.
    """
    first = memberships[0] if memberships else None
    return ResolvedAccount(
        source="backup",
        membership_type=None,
        membership_id=first.membership_id if first else "",
        display_name=candidate.global_display_name,
        global_display_name=candidate.global_display_name,
        global_display_name_code=candidate.global_display_name_code,
        icon_path=None,
        bungie_net_membership_id=candidate.bungie_net_membership_id,
        destiny_memberships=list(memberships),
    )
