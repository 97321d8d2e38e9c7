"""
Review Schemas
Request and response schemas for review and test endpoints.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field

from vocabstudy.models.review import AttemptMode


# ==================== REQUEST SCHEMAS ====================

class MarkReviewedRequest(BaseModel):
    """Request to record a flashcard flip."""
    item_id: str = Field(..., min_length=1, description="Item being reviewed")
    stack_id: Optional[str] = Field(default=None, description="Stack the item belongs to")


class QueueToggleRequest(BaseModel):
    """Request to add an item to (or remove it from) the test queue."""
    item_id: str = Field(..., min_length=1, description="Item to queue")
    stack_id: Optional[str] = Field(default=None, description="Stack the item belongs to")
    add: bool = Field(..., description="True to add, False to remove")


class AttemptRequest(BaseModel):
    """Request to grade a spoken definition attempt."""
    item_id: str = Field(..., min_length=1, description="Item being tested")
    term: str = Field(..., min_length=1, description="The vocabulary word")
    transcript: str = Field(..., description="Transcribed answer")
    stack_id: Optional[str] = Field(default=None, description="Stack the item belongs to")
    definition: Optional[str] = Field(
        default=None,
        description="Canonical definition; looked up when omitted"
    )
    mode: AttemptMode = Field(default=AttemptMode.TEST, description="test or review")


# ==================== RESPONSE SCHEMAS ====================

class ReviewItem(BaseModel):
    """Scheduling state of one item."""
    item_id: str
    stack_id: Optional[str] = None
    streak: int = 0
    interval_days: int = 0
    due_on: Optional[date] = None
    last_result: Optional[str] = None
    in_test_queue: bool = False


class ReviewQueueResponse(BaseModel):
    """Items due for review, oldest due date first."""
    date: date
    items: list[ReviewItem] = Field(default_factory=list)
    count: int = 0


class NextTestResponse(BaseModel):
    """Items for the next test session."""
    item_ids: list[str] = Field(default_factory=list)
    count: int = 0
    due_count: int = 0
    queued_count: int = 0


class MarkReviewedResponse(BaseModel):
    """Response after a flashcard flip."""
    success: bool = True
    item_id: str


class QueueToggleResponse(BaseModel):
    """Response after toggling the test queue."""
    success: bool = True
    item_id: str
    in_test_queue: bool


class AttemptResponse(BaseModel):
    """Grade and new schedule of an attempt."""
    item_id: str
    grade: str = Field(..., description="pass, almost or fail")
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    transcript: str
    feedback: str = ""
    missing_key_ideas: list[str] = Field(default_factory=list)
    latency_ms: Optional[int] = None
    streak: int
    interval_days: int
    due_on: Optional[date] = None
