"""
Grading Service
Turns a spoken transcript and a canonical definition into a Grade.

The model verdict is preferred; when the model is unavailable or returns
something unusable, a keyword-overlap grader takes over so an attempt is
always graded.
"""
import logging
import re
from typing import Optional

from vocabstudy.config import Settings, get_settings
from vocabstudy.models.review import Grade, GradeResult
from vocabstudy.services.azure_openai_service import AzureOpenAIService, azure_openai_service

logger = logging.getLogger(__name__)


STOP_WORDS = {
    "about", "being", "having", "where", "which", "their", "there", "these", "those"
}

PASS_RATIO = 0.6
ALMOST_RATIO = 0.3


def keyword_grade(transcript: str, definition: str) -> GradeResult:
    """
    Grade by the share of the definition's key words found in the transcript.

    Key words are words longer than four letters, minus a small stop list.
    """
    transcript_lower = transcript.lower()
    key_words = [
        word for word in re.split(r"\s+", definition.lower())
        if len(word) > 4 and word not in STOP_WORDS
    ]

    matches = [word for word in key_words if word in transcript_lower]
    ratio = len(matches) / len(key_words) if key_words else 0.0

    if ratio >= PASS_RATIO:
        return GradeResult(
            grade=Grade.PASS,
            score=ratio,
            missing_key_ideas=[],
            feedback="Great job! You captured the key meaning."
        )
    if ratio >= ALMOST_RATIO:
        missing = [word for word in key_words if word not in transcript_lower][:2]
        return GradeResult(
            grade=Grade.ALMOST,
            score=ratio,
            missing_key_ideas=missing,
            feedback="You're on the right track. Try to include more key elements."
        )
    return GradeResult(
        grade=Grade.FAIL,
        score=ratio,
        missing_key_ideas=key_words[:3],
        feedback="Let's review the definition together. Focus on the core meaning."
    )


class GradingService:
    """Grades spoken definitions"""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        openai_service: Optional[AzureOpenAIService] = None
    ):
        self.settings = settings or get_settings()
        self.openai_service = openai_service or azure_openai_service

    async def grade_definition(
        self,
        word: str,
        canonical_definition: str,
        transcript: str
    ) -> GradeResult:
        """
        Grade a student's spoken definition.

        Args:
            word: The vocabulary word
            canonical_definition: The correct definition
            transcript: The student's transcribed answer

        Returns:
            GradeResult with grade, score and feedback
        """
        if self.settings.GRADER_VERBOSE:
            logger.info(f"[Grader] Input: word={word!r} definition={canonical_definition!r} transcript={transcript!r}")

        try:
            raw = await self.openai_service.grade_spoken_definition(
                word,
                canonical_definition,
                transcript,
                temperature=self.settings.GRADER_TEMPERATURE
            )
            result = GradeResult(
                grade=Grade(str(raw.get("grade", "")).lower()),
                score=min(1.0, max(0.0, float(raw.get("score", 0.0)))),
                missing_key_ideas=raw.get("missing_key_ideas") or [],
                feedback=raw.get("feedback") or ""
            )
            if self.settings.GRADER_VERBOSE:
                logger.info(f"[Grader] Model verdict: {result.model_dump()}")
            return result
        except Exception as e:
            logger.warning(f"[Grader] Model grading failed for '{word}', using keyword grading: {e}")
            return keyword_grade(transcript, canonical_definition)


# Singleton instance
grading_service = GradingService()
