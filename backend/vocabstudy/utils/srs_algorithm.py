"""
Spaced Repetition Scheduler
Streak/interval scheduling driven by three-valued grades.

Rules:
- PASS: streak + 1, interval doubles (1 day for a never-scheduled item),
  capped at SR_MAX_INTERVAL_DAYS
- ALMOST: streak kept, interval halved (never below 1 day)
- FAIL: streak reset to 0, interval back to 1 day

The next due date is always today + new interval.
"""
import math
from datetime import date, datetime, timedelta
from typing import Iterable, Optional

from vocabstudy.config import settings
from vocabstudy.models.review import Grade, ReviewState
from vocabstudy.models.progress import SchedulerStats


class ReviewScheduler:
    """
    Pure transition function over ReviewState.

    Holds no state besides its tuning constants, so a single instance can
    be shared by concurrent requests. Persisting the returned state is the
    caller's job.
    """

    def __init__(
        self,
        max_interval_days: Optional[int] = None,
        almost_factor: Optional[float] = None
    ):
        self.max_interval_days = max_interval_days or settings.SR_MAX_INTERVAL_DAYS
        self.almost_factor = almost_factor or settings.SR_ALMOST_FACTOR

    def advance(
        self,
        state: Optional[ReviewState],
        grade: Grade,
        today: date,
        user_id: Optional[str] = None,
        item_id: Optional[str] = None,
        stack_id: Optional[str] = None
    ) -> ReviewState:
        """
        Compute the state that follows a graded attempt.

        Args:
            state: Current state, or None for an item never attempted
            grade: Outcome of the attempt
            today: Date of the attempt
            user_id, item_id, stack_id: Identity for a first attempt

        Returns:
            New ReviewState (the input is not modified)
        """
        grade = Grade(grade)

        if state is None:
            if not user_id or not item_id:
                raise ValueError("user_id and item_id are required for a first attempt")
            return ReviewState(
                user_id=user_id,
                item_id=item_id,
                stack_id=stack_id,
                streak=1 if grade == Grade.PASS else 0,
                interval_days=1,
                due_on=today + timedelta(days=1),
                last_result=grade
            )

        interval = state.interval_days

        if grade == Grade.PASS:
            streak = state.streak + 1
            if interval == 0:
                interval = 1
            else:
                interval = min(interval * 2, self.max_interval_days)
        elif grade == Grade.ALMOST:
            streak = state.streak
            interval = max(1, math.floor(interval * self.almost_factor))
        else:
            streak = 0
            interval = 1

        return state.model_copy(update={
            "streak": streak,
            "interval_days": interval,
            "due_on": today + timedelta(days=interval),
            "last_result": grade
        })

    def due_items(
        self,
        states: Iterable[ReviewState],
        today: date,
        limit: Optional[int] = None,
        stack_id: Optional[str] = None
    ) -> list[str]:
        """
        Item ids due on or before today, oldest due date first.

        Never-scheduled items are skipped. Ties keep their input order.
        """
        if limit is not None and limit <= 0:
            return []

        due = [
            s for s in states
            if self.is_due(s, today) and (stack_id is None or s.stack_id == stack_id)
        ]
        due.sort(key=lambda s: s.due_on)

        if limit is not None:
            due = due[:limit]
        return [s.item_id for s in due]

    def is_due(self, state: ReviewState, today: date) -> bool:
        """Check if an item is due for review."""
        return state.due_on is not None and state.due_on <= today

    def days_until_review(self, state: ReviewState, today: date) -> Optional[int]:
        """Days until next review (negative if overdue, None if unscheduled)."""
        if state.due_on is None:
            return None
        return (state.due_on - today).days

    def mark_reviewed(
        self,
        state: Optional[ReviewState],
        now: datetime,
        user_id: Optional[str] = None,
        item_id: Optional[str] = None,
        stack_id: Optional[str] = None
    ) -> ReviewState:
        """
        Record a flashcard flip.

        A flip is not a graded attempt: it never changes streak, interval
        or due date. The first flip creates an unscheduled state.
        """
        if state is None:
            if not user_id or not item_id:
                raise ValueError("user_id and item_id are required for a new review state")
            return ReviewState(
                user_id=user_id,
                item_id=item_id,
                stack_id=stack_id,
                has_reviewed=True,
                first_reviewed_at=now,
                last_reviewed_at=now
            )

        return state.model_copy(update={
            "has_reviewed": True,
            "first_reviewed_at": state.first_reviewed_at or now,
            "last_reviewed_at": now
        })

    def set_test_queue(
        self,
        state: Optional[ReviewState],
        in_queue: bool,
        user_id: Optional[str] = None,
        item_id: Optional[str] = None,
        stack_id: Optional[str] = None
    ) -> ReviewState:
        """Add an item to (or remove it from) the manual test queue."""
        if state is None:
            if not user_id or not item_id:
                raise ValueError("user_id and item_id are required for a new review state")
            return ReviewState(
                user_id=user_id,
                item_id=item_id,
                stack_id=stack_id,
                in_test_queue=in_queue
            )
        return state.model_copy(update={"in_test_queue": in_queue})

    def summarize(self, states: Iterable[ReviewState], today: date) -> SchedulerStats:
        """Count items, items due today and the mean interval."""
        states = list(states)
        if not states:
            return SchedulerStats()

        due_today = sum(1 for s in states if self.is_due(s, today))
        average = sum(s.interval_days for s in states) / len(states)

        return SchedulerStats(
            total_words=len(states),
            due_today=due_today,
            average_interval=round(average, 1)
        )


def advance_review(
    current_data: Optional[dict],
    grade: str,
    today: date,
    user_id: str,
    item_id: str,
    stack_id: Optional[str] = None
) -> dict:
    """
    Convenience function to advance a stored review document.

    Args:
        current_data: Stored camelCase document, or None for a first attempt
        grade: "pass", "almost" or "fail"
        today: Date of the attempt
        user_id, item_id, stack_id: Identity of the item

    Returns:
        Updated document as dict
    """
    state = ReviewState.from_dict(current_data) if current_data else None
    result = review_scheduler.advance(
        state, Grade(grade), today,
        user_id=user_id, item_id=item_id, stack_id=stack_id
    )
    return result.to_dict()


# Singleton instance
review_scheduler = ReviewScheduler()
