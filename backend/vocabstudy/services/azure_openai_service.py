"""
Azure OpenAI Service
Provides integration with Azure OpenAI for generative word lookups and
for grading spoken definitions.
"""
import json
import logging
from typing import Optional
from openai import AsyncAzureOpenAI

from vocabstudy.config import settings

logger = logging.getLogger(__name__)


DEFINITION_SYSTEM_PROMPT = (
    "You are a lexicographer writing study-friendly dictionary entries. "
    "Always respond with valid JSON."
)

GRADER_SYSTEM_PROMPT = """You are an SAT vocabulary grader. Your job is to evaluate whether a student's spoken definition captures the essential meaning of a word.

GRADING CRITERIA:
- PASS: The transcript captures the core meaning and 1-2 key facets of the definition. Accept paraphrases and synonyms. Minor grammar issues are okay.
- ALMOST: Partially correct but missing a critical facet or key element of the meaning. The student shows understanding but needs more precision.
- FAIL: Incorrect, off-topic, or completely missing the core meaning.

Be lenient with paraphrasing and synonyms, focus on semantic meaning rather than exact wording, and ignore minor grammar or pronunciation issues.

Respond in JSON format:
{
  "grade": "pass" | "almost" | "fail",
  "score": 0.0 to 1.0,
  "missing_key_ideas": ["idea1", "idea2"],
  "feedback": "One-sentence mnemonic or helpful tip"
}

Feedback: brief praise for PASS, the missing element for ALMOST, a memory aid for FAIL."""


def parse_json_response(response: str) -> dict:
    """Parse a JSON object out of a model reply, tolerating surrounding prose."""
    try:
        return json.loads(response)
    except (json.JSONDecodeError, TypeError):
        if not response:
            raise ValueError("Empty response from model")
        start = response.find('{')
        end = response.rfind('}') + 1
        if start != -1 and end > start:
            return json.loads(response[start:end])
        raise ValueError("Failed to parse JSON from response")


class AzureOpenAIService:
    """Service for interacting with Azure OpenAI"""

    def __init__(self):
        self._client: Optional[AsyncAzureOpenAI] = None
        self.deployment_name = settings.AZURE_OPENAI_DEPLOYMENT_NAME
        self.max_tokens = settings.AZURE_OPENAI_MAX_TOKENS
        self.temperature = settings.AZURE_OPENAI_TEMPERATURE

    @property
    def is_configured(self) -> bool:
        return bool(settings.AZURE_OPENAI_API_KEY and settings.AZURE_OPENAI_ENDPOINT)

    @property
    def client(self) -> AsyncAzureOpenAI:
        """OpenAI client, created on first use."""
        if self._client is None:
            if not self.is_configured:
                raise RuntimeError("Azure OpenAI credentials are not configured")
            self._client = AsyncAzureOpenAI(
                api_key=settings.AZURE_OPENAI_API_KEY,
                api_version=settings.AZURE_OPENAI_API_VERSION,
                azure_endpoint=settings.AZURE_OPENAI_ENDPOINT
            )
        return self._client

    async def chat_completion(
        self,
        messages: list[dict],
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None
    ) -> str:
        """
        Send a chat completion request to Azure OpenAI.

        Args:
            messages: List of message dicts with 'role' and 'content'
            max_tokens: Override default max_tokens
            temperature: Override default temperature

        Returns:
            The assistant's response text
        """
        try:
            response = await self.client.chat.completions.create(
                model=self.deployment_name,
                messages=messages,
                max_tokens=max_tokens or self.max_tokens,
                temperature=self.temperature if temperature is None else temperature,
                response_format={"type": "json_object"}
            )
            return response.choices[0].message.content
        except Exception as e:
            logger.error(f"Azure OpenAI chat completion error: {e}")
            raise

    async def define_word(self, term: str) -> dict:
        """
        Ask the model for a dictionary entry.

        Returns:
            Dict with definition, partOfSpeech, example, synonyms,
            antonyms, phonetic, etymology and difficulty
        """
        prompt = f"""Provide the SAT vocabulary definition for the word "{term}". Focus on the meaning commonly tested on the SAT exam, not technical or obscure definitions.

For words with multiple meanings, prioritize the academic or literary sense.

Respond in JSON format:
{{
    "definition": "clear definition of the word",
    "partOfSpeech": "noun, verb, adjective, etc.",
    "example": "sentence showing usage in an academic or literary context",
    "synonyms": ["similar words, empty if none"],
    "antonyms": ["opposite words, empty if none"],
    "phonetic": "pronunciation guide, empty string if unknown",
    "etymology": "word origin, empty string if unknown",
    "difficulty": "easy | medium | hard"
}}"""

        messages = [
            {"role": "system", "content": DEFINITION_SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

        response = await self.chat_completion(messages, temperature=0.2)
        return parse_json_response(response)

    async def grade_spoken_definition(
        self,
        word: str,
        canonical_definition: str,
        transcript: str,
        temperature: Optional[float] = None
    ) -> dict:
        """
        Grade a student's spoken definition against the canonical one.

        Returns:
            Dict with grade, score, missing_key_ideas and feedback
        """
        prompt = f"""Word: "{word}"
Canonical Definition: "{canonical_definition}"
Student's Response: "{transcript}"

Evaluate the student's response and return the grading JSON."""

        messages = [
            {"role": "system", "content": GRADER_SYSTEM_PROMPT},
            {"role": "user", "content": prompt}
        ]

        response = await self.chat_completion(messages, temperature=temperature)
        return parse_json_response(response)


# Singleton instance
azure_openai_service = AzureOpenAIService()
