"""
Base Agent
Shared plumbing for the study workflow agents: injected settings and
document store, a per-agent logger and error capture on the shared state.
"""
import logging
from abc import ABC, abstractmethod
from typing import Any, TypeVar, Generic

from vocabstudy.config import Settings, get_settings
from vocabstudy.services.cosmos_db_service import CosmosDBService, cosmos_db_service


# Type variable for agent state
StateT = TypeVar("StateT")


class BaseAgent(ABC, Generic[StateT]):
    """
    Abstract base class for all agents.

    An agent owns one step of a request (grading, scheduling, lookup or
    reporting), reads its input from the shared state and writes its
    output back to it. Collaborators are injectable so tests can swap in
    mocks; the module singletons are used otherwise.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        db_service: CosmosDBService | None = None
    ):
        self.settings = settings or get_settings()
        self.db_service = db_service or cosmos_db_service
        self.logger = logging.getLogger(f"agent.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Agent name for logging and identification"""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Agent description for documentation"""
        pass

    @abstractmethod
    async def process(self, state: StateT) -> StateT:
        """
        Run this agent's step on the shared state.

        Implementations catch their own exceptions and report them with
        ``fail`` so the graph always reaches finalize.
        """
        pass

    def _format(self, message: str, label: str | None = None, data: Any = None) -> str:
        msg = f"[{self.name}] {message}"
        if data:
            msg += f" - {label}: {data}" if label else f" - {data}"
        return msg

    def log_start(self, context: dict | None = None) -> None:
        """Log the start of a request"""
        self.logger.info(self._format("Starting processing", "Context", context))

    def log_complete(self, result: Any = None) -> None:
        """Log a completed request with a short result summary"""
        self.logger.info(self._format("Processing complete", "Result", result))

    def log_error(self, error: Exception, context: dict | None = None) -> None:
        """Log an error with its traceback"""
        self.logger.error(self._format(f"Error: {error}", "Context", context), exc_info=True)

    def log_debug(self, message: str, data: Any = None) -> None:
        """Log debug information"""
        self.logger.debug(self._format(message, "Data", data))

    def fail(self, state: StateT, error: Exception) -> StateT:
        """
        Record an error on the state instead of raising.

        The orchestrator routes any state with ``has_error`` straight to
        finalize, so later agents never see a half-processed request.
        """
        self.log_error(error, {"request_id": state.get("request_id")})
        state["has_error"] = True
        state["error_message"] = f"{self.name.capitalize()} error: {error}"
        return state
