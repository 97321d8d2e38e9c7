"""
Review Models
Defines grades, per-item review state and study attempts.
"""
from datetime import date, datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class Grade(str, Enum):
    """Outcome of a single study or test attempt"""
    PASS = "pass"
    ALMOST = "almost"
    FAIL = "fail"


class AttemptMode(str, Enum):
    """Where an attempt came from"""
    TEST = "test"
    REVIEW = "review"


class ReviewState(BaseModel):
    """Scheduling state of one item for one user"""
    user_id: str
    item_id: str
    stack_id: Optional[str] = None

    streak: int = Field(default=0, ge=0, description="Consecutive passing grades")
    interval_days: int = Field(default=0, ge=0, description="Current spacing, 0 = never scheduled")
    due_on: Optional[date] = None
    last_result: Optional[Grade] = None

    # Flashcard flip tracking and manual test queue
    in_test_queue: bool = False
    has_reviewed: bool = False
    first_reviewed_at: Optional[datetime] = None
    last_reviewed_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _unscheduled_has_no_due_date(self) -> "ReviewState":
        if self.interval_days == 0 and self.due_on is not None:
            raise ValueError("an unscheduled item (interval_days=0) cannot have a due date")
        return self

    @property
    def is_scheduled(self) -> bool:
        return self.interval_days > 0

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "userId": self.user_id,
            "itemId": self.item_id,
            "stackId": self.stack_id,
            "streak": self.streak,
            "intervalDays": self.interval_days,
            "dueOn": self.due_on.isoformat() if self.due_on else None,
            "lastResult": self.last_result.value if self.last_result else None,
            "inTestQueue": self.in_test_queue,
            "hasReviewed": self.has_reviewed,
            "firstReviewedAt": self.first_reviewed_at.isoformat() if self.first_reviewed_at else None,
            "lastReviewedAt": self.last_reviewed_at.isoformat() if self.last_reviewed_at else None
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ReviewState":
        """Create from a stored document"""
        return cls(
            user_id=data["userId"],
            item_id=data["itemId"],
            stack_id=data.get("stackId"),
            streak=data.get("streak") or 0,
            interval_days=data.get("intervalDays") or 0,
            due_on=date.fromisoformat(data["dueOn"]) if data.get("dueOn") else None,
            last_result=Grade(data["lastResult"]) if data.get("lastResult") else None,
            in_test_queue=data.get("inTestQueue", False),
            has_reviewed=data.get("hasReviewed", False),
            first_reviewed_at=datetime.fromisoformat(data["firstReviewedAt"])
            if data.get("firstReviewedAt") else None,
            last_reviewed_at=datetime.fromisoformat(data["lastReviewedAt"])
            if data.get("lastReviewedAt") else None
        )


class GradeResult(BaseModel):
    """Verdict returned by the grading collaborator"""
    grade: Grade
    score: float = Field(default=0.0, ge=0.0, le=1.0)
    missing_key_ideas: list[str] = Field(default_factory=list)
    feedback: str = ""


class Attempt(BaseModel):
    """A single recorded study attempt"""
    user_id: str
    item_id: str
    stack_id: Optional[str] = None
    mode: AttemptMode = AttemptMode.TEST
    transcript: Optional[str] = None
    grade: Grade
    score: Optional[float] = Field(default=None, ge=0.0, le=1.0)
    feedback: Optional[str] = None
    latency_ms: Optional[int] = Field(default=None, ge=0)
    created_at: datetime = Field(default_factory=datetime.utcnow)
    day: Optional[date] = Field(default=None, description="Scheduling day, defaults to the created_at date")

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "userId": self.user_id,
            "itemId": self.item_id,
            "stackId": self.stack_id,
            "mode": self.mode.value,
            "transcript": self.transcript,
            "grade": self.grade.value,
            "score": self.score,
            "feedback": self.feedback,
            "latencyMs": self.latency_ms,
            "day": (self.day or self.created_at.date()).isoformat(),
            "attemptedAt": self.created_at.isoformat()
        }
