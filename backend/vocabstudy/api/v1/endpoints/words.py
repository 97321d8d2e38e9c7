"""
Words API Endpoints
Definition lookups through the tiered resolver.
"""
from fastapi import APIRouter, HTTPException, Query
import logging

from vocabstudy.agents.orchestrator import run_orchestrator
from vocabstudy.schemas.words import DefinitionResponse


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{term}/definition", response_model=DefinitionResponse)
async def get_definition(
    term: str,
    user_id: str = Query(default="anonymous", description="User ID"),
    limit: int = Query(default=3, ge=1, le=10, description="Maximum definitions")
):
    """
    Get the definitions of a term.

    Served from the memory cache, the definition store or, on a miss,
    the provider chain. Returns 404 when no provider knows the term.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="get_definition",
        input_data={"term": term, "limit": limit}
    )

    if state.get("has_error"):
        logger.error(f"Error getting definition of '{term}': {state.get('error_message')}")
        raise HTTPException(
            status_code=500,
            detail=f"Error getting definition: {state.get('error_message')}"
        )

    response = state.get("response", {})
    if not response.get("found"):
        raise HTTPException(
            status_code=404,
            detail={"error": "not_found", "term": term, "message": "No definition found"}
        )

    return DefinitionResponse(
        term=response["term"],
        source=response["source"],
        phonetic=response.get("phonetic"),
        definitions=response.get("definitions", []),
        primary=response.get("primary")
    )
