"""
Agents Module
LangGraph workflow for vocabulary study.

Available Agents:
- Orchestrator: Central coordinator using LangGraph
- Grading: Grades transcribed spoken definitions
- Scheduler: Review states, due queues and test queues
- Dictionary: Definition lookups through the tiered resolver
- Progress: Daily stats and progress overview
"""

# Base classes
from vocabstudy.agents.base_agent import BaseAgent

# Shared state
from vocabstudy.agents.state import (
    AppState,
    GradingState,
    ReviewQueueState,
    DictionaryState,
    AgentMessage,
    create_initial_state,
    add_agent_message,
    get_today
)

from vocabstudy.agents.dictionary_agent import (
    DictionaryAgent,
    dictionary_agent
)

from vocabstudy.agents.grading_agent import (
    GradingAgent,
    grading_agent
)

from vocabstudy.agents.scheduler_agent import (
    SchedulerAgent,
    scheduler_agent
)

from vocabstudy.agents.progress_agent import (
    ProgressAgent,
    progress_agent
)

# Orchestrator
from vocabstudy.agents.orchestrator import (
    Orchestrator,
    orchestrator,
    run_orchestrator
)


__all__ = [
    "BaseAgent",

    # State types
    "AppState",
    "GradingState",
    "ReviewQueueState",
    "DictionaryState",
    "AgentMessage",

    # State utilities
    "create_initial_state",
    "add_agent_message",
    "get_today",

    # Agents
    "DictionaryAgent",
    "dictionary_agent",
    "GradingAgent",
    "grading_agent",
    "SchedulerAgent",
    "scheduler_agent",
    "ProgressAgent",
    "progress_agent",
    "Orchestrator",
    "orchestrator",

    # Convenience functions
    "run_orchestrator"
]
