"""
Progress Agent
Rolls the attempt log up into reports.

Responsibilities:
- Maintain per-day attempt/pass/fail counts
- Build the progress overview: scheduler summary, 7-day accuracy,
  per-item stats and the daily accuracy chart
"""
from collections import defaultdict
from datetime import date, timedelta
from typing import Optional

from vocabstudy.agents.base_agent import BaseAgent
from vocabstudy.agents.state import AppState, add_agent_message, get_today
from vocabstudy.config import Settings
from vocabstudy.models.progress import (
    DailyAccuracy,
    DailyStats,
    ItemStats,
    ProgressOverview
)
from vocabstudy.models.review import Grade, ReviewState
from vocabstudy.services.cosmos_db_service import CosmosDBService
from vocabstudy.utils.srs_algorithm import ReviewScheduler, review_scheduler


ACCURACY_WINDOW_DAYS = 7


class ProgressAgent(BaseAgent[AppState]):
    """
    Progress Agent for reporting.

    Read-only over review states; the only thing it writes is the
    daily stats table.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None,
        scheduler: Optional[ReviewScheduler] = None
    ):
        super().__init__(settings=settings, db_service=db_service)
        self.scheduler = scheduler or review_scheduler

    @property
    def name(self) -> str:
        return "progress"

    @property
    def description(self) -> str:
        return "Aggregates attempts into daily stats and progress overviews"

    async def process(self, state: AppState) -> AppState:
        """Process progress request"""
        self.log_start({"user_id": state["user_id"]})

        try:
            request_type = state.get("request_type", "")

            if request_type == "get_progress":
                return await self._get_overview(state)
            else:
                # After an attempt: refresh today's stats row
                return await self._update_daily_stats(state)

        except Exception as e:
            return self.fail(state, e)

    async def _get_overview(self, state: AppState) -> AppState:
        overview = await self.get_overview(state["user_id"], get_today(state))
        state["progress"] = overview.model_dump(mode="json")
        state["response"] = {
            "type": "progress",
            "overview": state["progress"]
        }
        state = add_agent_message(
            state,
            self.name,
            f"Overview: {overview.total_words} words, {overview.due_today} due"
        )
        return state

    async def _update_daily_stats(self, state: AppState) -> AppState:
        if state.get("has_error") or not state["review"].get("attempt"):
            return state

        stats = await self.aggregate_daily_stats(state["user_id"], get_today(state))
        if stats:
            state["progress"] = {"daily_stats": stats.to_dict()}
        return state

    async def aggregate_daily_stats(self, user_id: str, day: date) -> Optional[DailyStats]:
        """
        Recount one day of attempts and upsert its stats row.

        Days without attempts are skipped and return None.
        """
        attempts = await self.db_service.get_attempts(user_id, since=day, until=day)
        if not attempts:
            return None

        stats = DailyStats(
            user_id=user_id,
            day=day,
            attempts=len(attempts),
            passes=sum(1 for a in attempts if a.get("grade") == Grade.PASS.value),
            fails=sum(1 for a in attempts if a.get("grade") == Grade.FAIL.value)
        )
        await self.db_service.save_daily_stats(user_id, stats.to_dict())
        self.log_debug("Daily stats updated", stats.to_dict())
        return stats

    async def get_overview(self, user_id: str, today: date) -> ProgressOverview:
        """Build the progress overview of a user."""
        documents = await self.db_service.get_review_states(user_id)
        states = [ReviewState.from_dict(doc) for doc in documents]
        summary = self.scheduler.summarize(states, today)

        attempts = await self.db_service.get_attempts(user_id)
        # Window of ACCURACY_WINDOW_DAYS calendar days ending today
        since = today - timedelta(days=ACCURACY_WINDOW_DAYS - 1)
        recent = [a for a in attempts if a.get("day") and date.fromisoformat(a["day"]) >= since]

        recent_passes = sum(1 for a in recent if a.get("grade") == Grade.PASS.value)
        accuracy_7d = round(recent_passes / len(recent) * 100) if recent else 0

        # Per-item attempt counts
        per_item: dict[str, list[int]] = defaultdict(lambda: [0, 0])
        for a in attempts:
            counts = per_item[a.get("itemId")]
            counts[0] += 1
            if a.get("grade") == Grade.PASS.value:
                counts[1] += 1

        item_stats = []
        for s in sorted(states, key=lambda s: s.streak, reverse=True):
            total, passes = per_item.get(s.item_id, (0, 0))
            item_stats.append(ItemStats(
                item_id=s.item_id,
                streak=s.streak,
                last_result=s.last_result.value if s.last_result else None,
                interval_days=s.interval_days,
                due_on=s.due_on,
                total_attempts=total,
                passes=passes,
                accuracy=passes / total if total else 0.0
            ))

        # Accuracy chart over the same window
        per_day: dict[date, list[int]] = defaultdict(lambda: [0, 0])
        for a in recent:
            counts = per_day[date.fromisoformat(a["day"])]
            counts[0] += 1
            if a.get("grade") == Grade.PASS.value:
                counts[1] += 1
        daily_accuracy = [
            DailyAccuracy(day=day, attempts=total, accuracy=passes / total)
            for day, (total, passes) in sorted(per_day.items())
        ]

        return ProgressOverview(
            user_id=user_id,
            total_words=summary.total_words,
            due_today=summary.due_today,
            total_attempts=len(attempts),
            accuracy_last_7_days=accuracy_7d,
            average_interval=summary.average_interval,
            item_stats=item_stats,
            daily_accuracy=daily_accuracy
        )


# Singleton instance
progress_agent = ProgressAgent()
