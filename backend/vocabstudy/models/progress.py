"""
Progress Models
Aggregated attempt and scheduling statistics.
"""
from datetime import date
from typing import Optional
from pydantic import BaseModel, Field


class DailyStats(BaseModel):
    """Attempt counts for one user, stack and day"""
    user_id: str
    stack_id: Optional[str] = None
    day: date
    attempts: int = Field(default=0, ge=0)
    passes: int = Field(default=0, ge=0)
    fails: int = Field(default=0, ge=0)

    @property
    def accuracy(self) -> float:
        return self.passes / self.attempts if self.attempts else 0.0

    def to_dict(self) -> dict:
        """Convert to dictionary for storage"""
        return {
            "userId": self.user_id,
            "stackId": self.stack_id,
            "day": self.day.isoformat(),
            "attempts": self.attempts,
            "passes": self.passes,
            "fails": self.fails
        }


class SchedulerStats(BaseModel):
    """Summary of a user's review states"""
    total_words: int = 0
    due_today: int = 0
    average_interval: float = 0.0


class ItemStats(BaseModel):
    """Per-item progress row"""
    item_id: str
    streak: int = 0
    last_result: Optional[str] = None
    interval_days: int = 0
    due_on: Optional[date] = None
    total_attempts: int = 0
    passes: int = 0
    accuracy: float = 0.0


class DailyAccuracy(BaseModel):
    """One point of the accuracy chart"""
    day: date
    attempts: int
    accuracy: float


class ProgressOverview(BaseModel):
    """Everything the profile page shows"""
    user_id: str
    total_words: int = 0
    due_today: int = 0
    total_attempts: int = 0
    accuracy_last_7_days: int = Field(default=0, ge=0, le=100, description="Percent")
    average_interval: float = 0.0
    item_stats: list[ItemStats] = Field(default_factory=list)
    daily_accuracy: list[DailyAccuracy] = Field(default_factory=list)
