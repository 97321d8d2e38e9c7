"""
Progress API Endpoints
"""
from fastapi import APIRouter, HTTPException, Query
import logging

from vocabstudy.agents.orchestrator import run_orchestrator
from vocabstudy.schemas.progress import ProgressOverviewResponse


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/overview", response_model=ProgressOverviewResponse)
async def get_progress_overview(
    user_id: str = Query(..., description="User ID")
):
    """
    Get the progress overview of a user.

    Includes total and due words, average interval, 7-day accuracy,
    per-item stats and the daily accuracy chart.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="get_progress"
    )

    if state.get("has_error"):
        logger.error(f"Error getting progress: {state.get('error_message')}")
        raise HTTPException(
            status_code=500,
            detail=f"Error getting progress: {state.get('error_message')}"
        )

    return ProgressOverviewResponse(overview=state["response"]["overview"])
