"""Domain models for player search.

Candidates come in two shapes depending on which Bungie endpoint produced
them; both are normalized into one ``ResolvedAccount`` before they leave the
resolver.
"""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


def parse_query(query: str) -> Tuple[str, Optional[str]]:
    """Split ``Name#1234`` into prefix and code.

    The code is the text between the first and second ``#``; anything after
    a second ``#`` is dropped. Leading zeros are stripped, so ``"0042"``
    becomes ``"42"``. A missing or all-zero code comes back as ``None``.
    """
    parts = query.split("#")
    if len(parts) < 2:
        return parts[0], None
    normalized = parts[1].lstrip("0")
    return parts[0], normalized or None


class DestinyMembership(BaseModel):
    """A Destiny membership listed under a Bungie.net user."""

    membership_id: str
    membership_type: Optional[int] = None
    display_name: Optional[str] = None


class PrimaryCandidate(BaseModel):
    """A directory entry returned by the primary name search."""

    source: Literal["primary"] = "primary"
    membership_type: int
    membership_id: str
    display_name: Optional[str] = None
    global_display_name: Optional[str] = None
    global_display_name_code: Optional[int] = None
    icon_path: Optional[str] = None
    cross_save_override: Optional[int] = None
    applicable_membership_types: List[int] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def is_global_identity(self) -> bool:
        """Whether the platform name equals the Bungie global name.

        Cross-save merged accounts are listed under their global name, which
        the first search result does not always represent.
        """
        return self.display_name == self.global_display_name


class BackupCandidate(BaseModel):
    """A Bungie.net user returned by the global name prefix search."""

    source: Literal["backup"] = "backup"
    global_display_name: Optional[str] = None
    global_display_name_code: Optional[int] = None
    bungie_net_membership_id: Optional[str] = None
    destiny_memberships: List[DestinyMembership] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    def matches_code(self, code: str) -> bool:
        """Compare the display name code to a requested code as strings."""
        return str(self.global_display_name_code) == str(code)


Candidate = Annotated[
    Union[PrimaryCandidate, BackupCandidate], Field(discriminator="source")
]


class Membership(BaseModel):
    """One membership record associated with a searched name."""

    membership_type: Optional[int] = None
    membership_id: str
    display_name: Optional[str] = None
    global_display_name: Optional[str] = None
    global_display_name_code: Optional[int] = None
    cross_save_override: Optional[int] = None
    applicable_membership_types: List[int] = Field(default_factory=list)
    icon_path: Optional[str] = None


class MembershipSet(BaseModel):
    """Every membership record tied to a query, whichever one was validated."""

    memberships: List[Membership] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.memberships)

    @property
    def is_empty(self) -> bool:
        return not self.memberships


class ResolvedAccount(BaseModel):
    """The single account a query resolved to."""

    source: Literal["primary", "backup"]
    membership_type: Optional[int] = None
    membership_id: str
    display_name: Optional[str] = None
    global_display_name: Optional[str] = None
    global_display_name_code: Optional[int] = None
    icon_path: Optional[str] = None
    bungie_net_membership_id: Optional[str] = None
    destiny_memberships: List[DestinyMembership] = Field(default_factory=list)

    @property
    def bungie_name(self) -> Optional[str]:
        """Full ``Name#1234`` handle, zero padded to four digits."""
        if not self.global_display_name or self.global_display_name_code is None:
            return None
        return f"{self.global_display_name}#{self.global_display_name_code:04d}"


class Resolution(BaseModel):
    """Result of a successful search: the chosen account and its memberships."""

    account: ResolvedAccount
    memberships: MembershipSet


class SearchJob(BaseModel):
    """The orchestrator's record of an in-flight search."""

    query: str
    token: int
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class PipelineState(BaseModel):
    """State published to the caller after every pipeline change."""

    running: bool = False
    error: Optional[str] = None
    job: Optional[SearchJob] = None
    account: Optional[ResolvedAccount] = None
    memberships: Optional[MembershipSet] = None


class SearchRequest(BaseModel):
    """Body of a search submission."""

    query: str = Field(..., description="Bungie name in Name#1234 form")
