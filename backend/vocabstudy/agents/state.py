"""
Agent State
Defines the shared state structure for the LangGraph workflow.
All agents read from and write to this state.
"""
from datetime import date, datetime
from typing import Optional, Literal
from typing_extensions import TypedDict


RequestType = Literal[
    "test_attempt",
    "review_queue",
    "next_test",
    "mark_reviewed",
    "toggle_test_queue",
    "get_definition",
    "get_progress"
]


class GradingState(TypedDict, total=False):
    """Verdict on the current attempt"""
    term: str
    transcript: str
    canonical_definition: str
    grade: str
    score: float
    feedback: str
    missing_key_ideas: list[str]
    latency_ms: int


class ReviewQueueState(TypedDict, total=False):
    """Scheduling results for the current request"""
    due_item_ids: list[str]
    queued_item_ids: list[str]
    review_state: Optional[dict]
    attempt: Optional[dict]


class DictionaryState(TypedDict, total=False):
    """Definition lookup results"""
    term: str
    entry: Optional[dict]
    definitions: list[dict]
    primary: Optional[dict]


class AgentMessage(TypedDict):
    """Message from an agent"""
    agent: str
    message: str
    timestamp: str
    data: Optional[dict]


class AppState(TypedDict, total=False):
    """
    Application state shared across all agents.

    LangGraph uses this for state management between nodes.
    """

    # ==================== REQUEST CONTEXT ====================
    request_id: str
    request_type: RequestType
    timestamp: str
    user_id: str
    today: str  # YYYY-MM-DD, the scheduling day of this request
    activity_input: dict

    # ==================== DOMAIN RESULTS ====================
    grading: GradingState
    review: ReviewQueueState
    dictionary: DictionaryState
    progress: dict

    # ==================== AGENT COORDINATION ====================
    route_decision: Optional[str]
    messages: list[AgentMessage]
    response: dict

    # ==================== CONTROL FLAGS ====================
    is_complete: bool
    has_error: bool
    error_message: Optional[str]


def create_initial_state(
    user_id: str,
    request_type: str,
    input_data: dict | None = None,
    today: date | None = None
) -> AppState:
    """
    Create initial state for a new request.

    Args:
        user_id: User ID for the request
        request_type: Type of request being made
        input_data: Request payload
        today: Scheduling day (defaults to the current UTC date)

    Returns:
        Initialized AppState
    """
    now = datetime.utcnow()

    return {
        "request_id": f"req_{user_id}_{now.timestamp()}",
        "request_type": request_type,
        "timestamp": now.isoformat(),
        "user_id": user_id,
        "today": (today or now.date()).isoformat(),
        "activity_input": dict(input_data or {}),

        "grading": {},
        "review": {
            "due_item_ids": [],
            "queued_item_ids": [],
            "review_state": None,
            "attempt": None
        },
        "dictionary": {},
        "progress": {},

        "route_decision": None,
        "messages": [],
        "response": {},

        "is_complete": False,
        "has_error": False,
        "error_message": None
    }


def get_today(state: AppState) -> date:
    """Scheduling day of the request as a date"""
    return date.fromisoformat(state["today"])


def add_agent_message(
    state: AppState,
    agent: str,
    message: str,
    data: dict | None = None
) -> AppState:
    """
    Add a message from an agent to the state.

    Args:
        state: Current state
        agent: Agent name
        message: Message text
        data: Optional additional data

    Returns:
        Updated state
    """
    msg: AgentMessage = {
        "agent": agent,
        "message": message,
        "timestamp": datetime.utcnow().isoformat(),
        "data": data
    }
    state["messages"].append(msg)
    return state
