"""
Grading Agent
Grades a transcribed spoken definition.

The transcript arrives already produced by the transcription
collaborator; this agent only compares it with the canonical definition.
"""
import time
from typing import Optional

from vocabstudy.agents.base_agent import BaseAgent
from vocabstudy.agents.dictionary_agent import DictionaryAgent, dictionary_agent
from vocabstudy.agents.state import AppState, add_agent_message
from vocabstudy.config import Settings
from vocabstudy.services.grading_service import GradingService, grading_service


MISSING_DEFINITION = "No definition available"


class GradingAgent(BaseAgent[AppState]):
    """Grading Agent for test attempts"""

    def __init__(
        self,
        settings: Settings | None = None,
        grader: Optional[GradingService] = None,
        dictionary: Optional[DictionaryAgent] = None
    ):
        super().__init__(settings=settings)
        self.grader = grader or grading_service
        self.dictionary = dictionary or dictionary_agent

    @property
    def name(self) -> str:
        return "grading"

    @property
    def description(self) -> str:
        return "Grades spoken definitions as pass, almost or fail"

    async def process(self, state: AppState) -> AppState:
        """Grade the attempt described by activity_input"""
        activity_input = state["activity_input"]
        term = activity_input.get("term", "")
        transcript = activity_input.get("transcript", "")
        self.log_start({"term": term})

        started = time.perf_counter()
        try:
            canonical = activity_input.get("definition")
            if not canonical:
                canonical = await self.dictionary.get_canonical_definition(term) or MISSING_DEFINITION

            result = await self.grader.grade_definition(term, canonical, transcript)
            latency_ms = int((time.perf_counter() - started) * 1000)

            state["grading"] = {
                "term": term,
                "transcript": transcript,
                "canonical_definition": canonical,
                "grade": result.grade.value,
                "score": result.score,
                "feedback": result.feedback,
                "missing_key_ideas": result.missing_key_ideas,
                "latency_ms": latency_ms
            }
            state = add_agent_message(
                state,
                self.name,
                f"Graded '{term}': {result.grade.value}",
                {"score": result.score}
            )
            self.log_complete({"grade": result.grade.value, "latency_ms": latency_ms})
            return state

        except Exception as e:
            return self.fail(state, e)


# Singleton instance
grading_agent = GradingAgent()
