"""Dependencies for the search feature.

The pipeline is owned by the application (built in the lifespan and stored on
``app.state``) so every request talks to the same job orchestrator.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, Request

from sparos.core.bungie_api.client import BungieAPIClient
from sparos.core.config import Settings
from .backup import BackupSearchClient
from .gateway import BungieDirectoryGateway
from .job_store import InMemoryJobStore, JsonFileJobStore
from .orchestrator import SearchPipeline
from .resolver import UserResolver


def build_search_pipeline(
    settings: Settings, bungie_client: BungieAPIClient
) -> SearchPipeline:
    """Wire gateway, backup client, resolver and job store into a pipeline.

    :param settings: Application settings (job store location)
    :param bungie_client: Shared Bungie API client
    :returns: Search pipeline ready to accept submissions
    """
    gateway = BungieDirectoryGateway(bungie_client)
    resolver = UserResolver(gateway, BackupSearchClient(gateway))
    job_store = (
        JsonFileJobStore(settings.job_store_path)
        if settings.job_store_path
        else InMemoryJobStore()
    )
    return SearchPipeline(resolver, job_store=job_store)


async def get_search_pipeline(request: Request) -> SearchPipeline:
    """Get the application's search pipeline.

    :raises HTTPException: 503 if the application has not finished starting
    """
    pipeline = getattr(request.app.state, "search_pipeline", None)
    if pipeline is None:
        raise HTTPException(status_code=503, detail="Search pipeline not ready")
    return pipeline


# Type alias for cleaner dependency injection
SearchPipelineDep = Annotated[SearchPipeline, Depends(get_search_pipeline)]

__all__ = ["build_search_pipeline", "get_search_pipeline", "SearchPipelineDep"]
