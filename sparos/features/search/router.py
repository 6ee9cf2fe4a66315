"""Search API endpoints."""

from fastapi import APIRouter, status
import structlog

from .dependencies import SearchPipelineDep
from .models import PipelineState, SearchRequest

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/search", tags=["search"])


@router.post(
    "",
    response_model=PipelineState,
    status_code=status.HTTP_202_ACCEPTED,
)
async def submit_search(
    search_request: SearchRequest, pipeline: SearchPipelineDep
) -> PipelineState:
    """Start resolving a Bungie name; poll ``/search/state`` for the outcome."""
    pipeline.submit(search_request.query)
    return pipeline.state


@router.get("/state", response_model=PipelineState)
async def get_search_state(pipeline: SearchPipelineDep) -> PipelineState:
    """Current published search state."""
    return pipeline.state


@router.post("/cancel", response_model=PipelineState)
async def cancel_search(pipeline: SearchPipelineDep) -> PipelineState:
    """Drop the current search; its late result will be ignored."""
    pipeline.cancel()
    return pipeline.state
