"""
Scheduler Agent
Owns per-item review states.

Responsibilities:
- Apply graded attempts to review states and log the attempt
- Answer "what is due" for review and test sessions
- Record flashcard flips and manual test queue membership
"""
import random
from datetime import datetime
from typing import Optional

from vocabstudy.agents.base_agent import BaseAgent
from vocabstudy.agents.state import AppState, add_agent_message, get_today
from vocabstudy.config import Settings
from vocabstudy.models.review import Attempt, AttemptMode, Grade, ReviewState
from vocabstudy.utils.srs_algorithm import ReviewScheduler, review_scheduler
from vocabstudy.services.cosmos_db_service import CosmosDBService


class SchedulerAgent(BaseAgent[AppState]):
    """
    Scheduler Agent for review states.

    The transition rules live in ReviewScheduler; this agent loads and
    persists the documents around it.
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
        return "scheduler"

    @property
    def description(self) -> str:
        return "Schedules reviews from graded attempts and builds study queues"

    async def process(self, state: AppState) -> AppState:
        """Process scheduling request"""
        self.log_start({"user_id": state["user_id"], "request_type": state.get("request_type")})

        try:
            request_type = state.get("request_type", "")

            if request_type == "test_attempt":
                return await self._apply_attempt(state)
            elif request_type == "review_queue":
                return await self._get_review_queue(state)
            elif request_type == "next_test":
                return await self._get_next_test(state)
            elif request_type == "mark_reviewed":
                return await self._mark_reviewed(state)
            elif request_type == "toggle_test_queue":
                return await self._toggle_test_queue(state)
            else:
                raise ValueError(f"Unsupported scheduler request: {request_type}")

        except Exception as e:
            return self.fail(state, e)

    async def _load_states(self, user_id: str, stack_id: Optional[str] = None) -> list[ReviewState]:
        documents = await self.db_service.get_review_states(user_id, stack_id)
        return [ReviewState.from_dict(doc) for doc in documents]

    async def _apply_attempt(self, state: AppState) -> AppState:
        """
        Apply a graded attempt.

        Advances the item's review state, then appends the attempt to the
        attempt log.
        """
        if state.get("has_error") or not state.get("grading"):
            return state

        user_id = state["user_id"]
        activity_input = state["activity_input"]
        item_id = activity_input["item_id"]
        stack_id = activity_input.get("stack_id")
        grading = state["grading"]
        today = get_today(state)

        current = await self.db_service.get_review_state(user_id, item_id)
        updated = self.scheduler.advance(
            ReviewState.from_dict(current) if current else None,
            Grade(grading["grade"]),
            today,
            user_id=user_id,
            item_id=item_id,
            stack_id=stack_id
        ).to_dict()
        await self.db_service.save_review_state(user_id, item_id, updated)

        attempt = Attempt(
            user_id=user_id,
            item_id=item_id,
            stack_id=stack_id,
            mode=AttemptMode(activity_input.get("mode", AttemptMode.TEST.value)),
            transcript=grading.get("transcript"),
            grade=Grade(grading["grade"]),
            score=grading.get("score"),
            feedback=grading.get("feedback"),
            latency_ms=grading.get("latency_ms"),
            day=today
        )
        attempt_doc = attempt.to_dict()
        await self.db_service.record_attempt(user_id, attempt_doc)

        state["review"]["review_state"] = updated
        state["review"]["attempt"] = attempt_doc
        state["response"] = {
            "type": "test_attempt",
            "item_id": item_id,
            "grade": grading["grade"],
            "score": grading.get("score"),
            "transcript": grading.get("transcript"),
            "feedback": grading.get("feedback"),
            "missing_key_ideas": grading.get("missing_key_ideas", []),
            "latency_ms": grading.get("latency_ms"),
            "streak": updated["streak"],
            "interval_days": updated["intervalDays"],
            "due_on": updated["dueOn"]
        }

        state = add_agent_message(
            state,
            self.name,
            f"Item {item_id} due {updated['dueOn']} (interval {updated['intervalDays']}d)"
        )
        self.log_complete({"item_id": item_id, "due_on": updated["dueOn"]})
        return state

    async def _get_review_queue(self, state: AppState) -> AppState:
        """Items due on or before today, oldest first"""
        user_id = state["user_id"]
        activity_input = state["activity_input"]
        stack_id = activity_input.get("stack_id")
        limit = activity_input.get("limit", self.settings.SR_DEFAULT_DUE_LIMIT)
        today = get_today(state)

        states = await self._load_states(user_id, stack_id)
        due_ids = self.scheduler.due_items(states, today, limit=limit, stack_id=stack_id)
        by_id = {s.item_id: s for s in states}

        state["review"]["due_item_ids"] = due_ids
        state["response"] = {
            "type": "review_queue",
            "date": today.isoformat(),
            "items": [by_id[item_id].to_dict() for item_id in due_ids],
            "count": len(due_ids)
        }

        state = add_agent_message(state, self.name, f"{len(due_ids)} items due")
        return state

    async def _get_next_test(self, state: AppState) -> AppState:
        """
        Build the next test session.

        Due items come first, then manually queued items that are not
        already due, capped at ``limit`` overall.
        """
        user_id = state["user_id"]
        activity_input = state["activity_input"]
        stack_id = activity_input.get("stack_id")
        limit = activity_input.get("limit", self.settings.SR_DEFAULT_DUE_LIMIT)
        today = get_today(state)

        states = await self._load_states(user_id, stack_id)
        due_ids = self.scheduler.due_items(states, today, limit=limit, stack_id=stack_id)
        due_set = set(due_ids)
        queued_ids = [
            s.item_id for s in states
            if s.in_test_queue and s.item_id not in due_set
        ]

        combined = (due_ids + queued_ids)[:max(limit, 0)]
        if activity_input.get("shuffle", False):
            random.shuffle(combined)

        state["review"]["due_item_ids"] = due_ids
        state["review"]["queued_item_ids"] = queued_ids
        state["response"] = {
            "type": "next_test",
            "item_ids": combined,
            "count": len(combined),
            "due_count": len(due_ids),
            "queued_count": len([i for i in combined if i not in due_set])
        }
        return state

    async def _mark_reviewed(self, state: AppState) -> AppState:
        """Record a flashcard flip without touching the schedule"""
        user_id = state["user_id"]
        activity_input = state["activity_input"]
        item_id = activity_input["item_id"]

        current = await self.db_service.get_review_state(user_id, item_id)
        updated = self.scheduler.mark_reviewed(
            ReviewState.from_dict(current) if current else None,
            datetime.utcnow(),
            user_id=user_id,
            item_id=item_id,
            stack_id=activity_input.get("stack_id")
        )
        document = updated.to_dict()
        await self.db_service.save_review_state(user_id, item_id, document)

        state["review"]["review_state"] = document
        state["response"] = {
            "type": "mark_reviewed",
            "success": True,
            "item_id": item_id,
            "first_reviewed_at": document["firstReviewedAt"],
            "last_reviewed_at": document["lastReviewedAt"]
        }
        return state

    async def _toggle_test_queue(self, state: AppState) -> AppState:
        """Add an item to or remove it from the manual test queue"""
        user_id = state["user_id"]
        activity_input = state["activity_input"]
        item_id = activity_input["item_id"]
        add = bool(activity_input.get("add", True))

        current = await self.db_service.get_review_state(user_id, item_id)
        updated = self.scheduler.set_test_queue(
            ReviewState.from_dict(current) if current else None,
            add,
            user_id=user_id,
            item_id=item_id,
            stack_id=activity_input.get("stack_id")
        )
        document = updated.to_dict()
        await self.db_service.save_review_state(user_id, item_id, document)

        state["review"]["review_state"] = document
        state["response"] = {
            "type": "toggle_test_queue",
            "success": True,
            "item_id": item_id,
            "in_test_queue": add
        }
        return state


# Singleton instance
scheduler_agent = SchedulerAgent()
