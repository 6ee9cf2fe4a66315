"""Player search feature: resolve a Bungie name into one validated account."""

from .models import (
    BackupCandidate,
    Candidate,
    Membership,
    MembershipSet,
    PipelineState,
    PrimaryCandidate,
    Resolution,
    ResolvedAccount,
    SearchJob,
    parse_query,
)
from .backup import BackupSearchClient
from .gateway import BungieDirectoryGateway
from .job_store import InMemoryJobStore, JsonFileJobStore
from .orchestrator import SearchPipeline
from .resolver import UserResolver
from .router import router as search_router

__all__ = [
    "BackupCandidate",
    "Candidate",
    "Membership",
    "MembershipSet",
    "PipelineState",
    "PrimaryCandidate",
    "Resolution",
    "ResolvedAccount",
    "SearchJob",
    "parse_query",
    "BackupSearchClient",
    "BungieDirectoryGateway",
    "InMemoryJobStore",
    "JsonFileJobStore",
    "SearchPipeline",
    "UserResolver",
    "search_router",
]
