"""
Review API Endpoints
REST API for flashcard review, test queues and graded attempts.
"""
from fastapi import APIRouter, HTTPException, Query
import logging
from typing import Optional

from vocabstudy.agents.orchestrator import run_orchestrator
from vocabstudy.agents.state import AppState
from vocabstudy.config import settings
from vocabstudy.schemas.review import (
    AttemptRequest,
    AttemptResponse,
    MarkReviewedRequest,
    MarkReviewedResponse,
    NextTestResponse,
    QueueToggleRequest,
    QueueToggleResponse,
    ReviewItem,
    ReviewQueueResponse
)


logger = logging.getLogger(__name__)

router = APIRouter()


def _response_or_raise(state: AppState, action: str) -> dict:
    """Return the workflow response, or raise 500 if an agent failed."""
    if state.get("has_error"):
        logger.error(f"Error {action}: {state.get('error_message')}")
        raise HTTPException(
            status_code=500,
            detail=f"Error {action}: {state.get('error_message')}"
        )
    return state.get("response", {})


# ==================== QUEUES ====================

@router.get("/queue", response_model=ReviewQueueResponse)
async def get_review_queue(
    user_id: str = Query(..., description="User ID"),
    stack_id: Optional[str] = Query(default=None, description="Restrict to one stack"),
    limit: int = Query(default=settings.SR_DEFAULT_DUE_LIMIT, ge=0, le=200)
):
    """
    Get the items due for review today.

    Items are ordered by due date, oldest first. Never-scheduled items
    are not included.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="review_queue",
        input_data={"stack_id": stack_id, "limit": limit}
    )
    response = _response_or_raise(state, "getting review queue")

    return ReviewQueueResponse(
        date=response["date"],
        items=[
            ReviewItem(
                item_id=doc["itemId"],
                stack_id=doc.get("stackId"),
                streak=doc.get("streak", 0),
                interval_days=doc.get("intervalDays", 0),
                due_on=doc.get("dueOn"),
                last_result=doc.get("lastResult"),
                in_test_queue=doc.get("inTestQueue", False)
            )
            for doc in response.get("items", [])
        ],
        count=response.get("count", 0)
    )


@router.get("/next-test", response_model=NextTestResponse)
async def get_next_test(
    user_id: str = Query(..., description="User ID"),
    stack_id: Optional[str] = Query(default=None, description="Restrict to one stack"),
    limit: int = Query(default=settings.SR_DEFAULT_DUE_LIMIT, ge=0, le=200),
    shuffle: bool = Query(default=True, description="Shuffle the session order")
):
    """
    Get items for the next test session.

    Due items come first, then items the user queued manually.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="next_test",
        input_data={"stack_id": stack_id, "limit": limit, "shuffle": shuffle}
    )
    response = _response_or_raise(state, "getting next test")

    return NextTestResponse(
        item_ids=response.get("item_ids", []),
        count=response.get("count", 0),
        due_count=response.get("due_count", 0),
        queued_count=response.get("queued_count", 0)
    )


@router.post("/test-queue", response_model=QueueToggleResponse)
async def toggle_test_queue(
    request: QueueToggleRequest,
    user_id: str = Query(..., description="User ID")
):
    """Add an item to or remove it from the test queue."""
    state = await run_orchestrator(
        user_id=user_id,
        request_type="toggle_test_queue",
        input_data=request.model_dump()
    )
    response = _response_or_raise(state, "updating test queue")

    return QueueToggleResponse(
        success=True,
        item_id=response["item_id"],
        in_test_queue=response["in_test_queue"]
    )


# ==================== REVIEW AND ATTEMPTS ====================

@router.post("/mark", response_model=MarkReviewedResponse)
async def mark_reviewed(
    request: MarkReviewedRequest,
    user_id: str = Query(..., description="User ID")
):
    """
    Record that a flashcard was flipped.

    Does not change the item's schedule.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="mark_reviewed",
        input_data=request.model_dump()
    )
    response = _response_or_raise(state, "marking item as reviewed")

    return MarkReviewedResponse(success=True, item_id=response["item_id"])


@router.post("/attempt", response_model=AttemptResponse)
async def submit_attempt(
    request: AttemptRequest,
    user_id: str = Query(..., description="User ID")
):
    """
    Grade a spoken definition and reschedule the item.

    The transcript is graded against the canonical definition (looked up
    when not supplied); the item's streak, interval and due date are
    updated and the attempt is logged.
    """
    state = await run_orchestrator(
        user_id=user_id,
        request_type="test_attempt",
        input_data=request.model_dump(mode="json")
    )
    response = _response_or_raise(state, "processing attempt")

    return AttemptResponse(
        item_id=response["item_id"],
        grade=response["grade"],
        score=response.get("score") or 0.0,
        transcript=response.get("transcript") or "",
        feedback=response.get("feedback") or "",
        missing_key_ideas=response.get("missing_key_ideas", []),
        latency_ms=response.get("latency_ms"),
        streak=response["streak"],
        interval_days=response["interval_days"],
        due_on=response.get("due_on")
    )
