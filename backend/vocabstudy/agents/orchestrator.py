"""
Orchestrator Agent
Central coordinator for the study workflow using LangGraph.

Responsibilities:
- Route requests to the appropriate agents
- Chain grading, scheduling and reporting for test attempts
- Turn agent errors into a final response instead of exceptions
"""
import logging
from datetime import date, datetime
from typing import Literal

from langgraph.graph import StateGraph, END

from vocabstudy.agents.base_agent import BaseAgent
from vocabstudy.agents.state import AppState, create_initial_state, add_agent_message
from vocabstudy.agents.dictionary_agent import dictionary_agent
from vocabstudy.agents.grading_agent import grading_agent
from vocabstudy.agents.progress_agent import progress_agent
from vocabstudy.agents.scheduler_agent import scheduler_agent
from vocabstudy.config import Settings


logger = logging.getLogger(__name__)


RouteType = Literal[
    "grading",
    "scheduler",
    "dictionary",
    "progress",
    "complete"
]

ROUTES: dict[str, RouteType] = {
    "test_attempt": "grading",
    "review_queue": "scheduler",
    "next_test": "scheduler",
    "mark_reviewed": "scheduler",
    "toggle_test_queue": "scheduler",
    "get_definition": "dictionary",
    "get_progress": "progress"
}


class Orchestrator(BaseAgent[AppState]):
    """
    Orchestrator Agent - Central coordinator for all agents.

    Uses LangGraph to define agent workflows and manage state
    transitions between agents.
    """

    def __init__(self, settings: Settings | None = None):
        super().__init__(settings=settings)
        self.graph = self._build_graph()
        self.compiled_graph = self.graph.compile()

    @property
    def name(self) -> str:
        return "orchestrator"

    @property
    def description(self) -> str:
        return "Coordinates all agents and manages workflow execution"

    def _build_graph(self) -> StateGraph:
        """
        Build the LangGraph workflow.

        Graph structure:
        START -> router -> grading -> scheduler -> progress -> finalize -> END
                        -> scheduler | dictionary | progress -> finalize
        """
        graph = StateGraph(AppState)

        graph.add_node("router", self._router_node)
        graph.add_node("grading", self._grading_node)
        graph.add_node("scheduler", self._scheduler_node)
        graph.add_node("dictionary", self._dictionary_node)
        graph.add_node("progress", self._progress_node)
        graph.add_node("finalize", self._finalize_node)

        graph.set_entry_point("router")

        graph.add_conditional_edges(
            "router",
            self._route_decision,
            {
                "grading": "grading",
                "scheduler": "scheduler",
                "dictionary": "dictionary",
                "progress": "progress",
                "complete": "finalize"
            }
        )

        # A graded attempt is always scheduled unless grading failed
        graph.add_conditional_edges(
            "grading",
            self._post_grading_route,
            {
                "scheduler": "scheduler",
                "complete": "finalize"
            }
        )

        # Only attempts feed the daily stats
        graph.add_conditional_edges(
            "scheduler",
            self._post_scheduler_route,
            {
                "progress": "progress",
                "complete": "finalize"
            }
        )

        graph.add_edge("dictionary", "finalize")
        graph.add_edge("progress", "finalize")
        graph.add_edge("finalize", END)

        return graph

    async def process(self, state: AppState) -> AppState:
        """
        Process a request through the agent workflow.

        This is the main entry point for the orchestrator.
        """
        self.log_start({
            "request_type": state.get("request_type"),
            "user_id": state["user_id"]
        })

        try:
            final_state = await self.compiled_graph.ainvoke(state)

            self.log_complete({
                "is_complete": final_state.get("is_complete"),
                "has_error": final_state.get("has_error")
            })

            return final_state

        except Exception as e:
            self.log_error(e)
            state["has_error"] = True
            state["error_message"] = f"Orchestrator error: {str(e)}"
            state["is_complete"] = True
            return state

    async def run(
        self,
        user_id: str,
        request_type: str,
        input_data: dict | None = None,
        today: date | None = None
    ) -> AppState:
        """
        Run the orchestrator with a new request.

        Args:
            user_id: User making the request
            request_type: Type of request
            input_data: Request payload
            today: Scheduling day (defaults to the current UTC date)

        Returns:
            Final state after processing
        """
        state = create_initial_state(user_id, request_type, input_data, today)
        return await self.process(state)

    # ==================== ROUTER NODE ====================

    async def _router_node(self, state: AppState) -> AppState:
        """Router node - decides which agent to invoke."""
        request_type = state.get("request_type", "")
        self.log_debug("Router processing", {"request_type": request_type})

        route = ROUTES.get(request_type)
        if route is None:
            state["route_decision"] = "complete"
            state["has_error"] = True
            state["error_message"] = f"Unknown request type: {request_type}"
        else:
            state["route_decision"] = route

        state = add_agent_message(
            state,
            self.name,
            f"Routing to: {state['route_decision']}"
        )

        return state

    def _route_decision(self, state: AppState) -> RouteType:
        """Get routing decision from state"""
        return state.get("route_decision") or "complete"

    # ==================== AGENT NODES ====================

    async def _grading_node(self, state: AppState) -> AppState:
        """Grading agent node"""
        self.log_debug("Grading node processing")
        return await grading_agent.process(state)

    async def _scheduler_node(self, state: AppState) -> AppState:
        """Scheduler agent node"""
        self.log_debug("Scheduler node processing")
        return await scheduler_agent.process(state)

    async def _dictionary_node(self, state: AppState) -> AppState:
        """Dictionary agent node"""
        self.log_debug("Dictionary node processing")
        return await dictionary_agent.process(state)

    async def _progress_node(self, state: AppState) -> AppState:
        """Progress agent node"""
        self.log_debug("Progress node processing")
        return await progress_agent.process(state)

    async def _finalize_node(self, state: AppState) -> AppState:
        """
        Finalize node - prepare final response.

        Marks processing as complete and prepares response.
        """
        self.log_debug("Finalize node processing")

        state["is_complete"] = True

        if state.get("has_error") and not state.get("response"):
            state["response"] = {"error": state.get("error_message")}

        state["response"]["timestamp"] = datetime.utcnow().isoformat()
        state["response"]["request_id"] = state.get("request_id")

        state = add_agent_message(
            state,
            self.name,
            "Processing complete"
        )

        return state

    # ==================== CONDITIONAL ROUTING ====================

    def _post_grading_route(self, state: AppState) -> Literal["scheduler", "complete"]:
        """Route after grading node"""
        if state.get("has_error") or not state.get("grading", {}).get("grade"):
            return "complete"
        return "scheduler"

    def _post_scheduler_route(self, state: AppState) -> Literal["progress", "complete"]:
        """Route after scheduler node"""
        if state.get("request_type") == "test_attempt" and not state.get("has_error"):
            return "progress"
        return "complete"


# Singleton instance
orchestrator = Orchestrator()


# Convenience function to run orchestrator
async def run_orchestrator(
    user_id: str,
    request_type: str,
    input_data: dict | None = None,
    today: date | None = None
) -> AppState:
    """
    Run the orchestrator with a request.

    Args:
        user_id: User making the request
        request_type: Type of request (e.g., "test_attempt", "get_definition")
        input_data: Request payload
        today: Scheduling day

    Returns:
        Final state with response

    Example:
        >>> state = await run_orchestrator(
        ...     user_id="user123",
        ...     request_type="get_definition",
        ...     input_data={"term": "ephemeral"}
        ... )
        >>> print(state["response"])
    """
    return await orchestrator.run(user_id, request_type, input_data, today)
