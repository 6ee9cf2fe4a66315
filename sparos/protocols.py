"""Protocol definitions for the seams between search components."""

from abc import abstractmethod
from typing import List, Optional, Protocol, Tuple

from sparos.features.search.models import (
    BackupCandidate,
    PrimaryCandidate,
    SearchJob,
)


class PlayerDirectory(Protocol):
    """Narrow view of the Bungie directory the resolver depends on."""

    @abstractmethod
    async def search_players(self, query: str) -> List[PrimaryCandidate]:
        """Primary search by full Bungie name."""
        ...

    @abstractmethod
    async def has_account_stats(self, candidate: PrimaryCandidate) -> bool:
        """Whether the candidate's membership has retrievable game data."""
        ...

    @abstractmethod
    async def search_global_name_page(
        self, prefix: str, page: int
    ) -> Tuple[List[BackupCandidate], bool]:
        """One page of the global name prefix search and its ``hasMore`` flag."""
        ...


class JobStore(Protocol):
    """Get/set store for the in-flight search job record."""

    @abstractmethod
    def load(self) -> Optional[SearchJob]:
        """Return the stored job, if any."""
        ...

    @abstractmethod
    def save(self, job: SearchJob) -> None:
        """Store the current job."""
        ...

    @abstractmethod
    def clear(self) -> None:
        """Forget the stored job."""
        ...
