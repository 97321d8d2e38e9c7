"""
Exa provider.
Exa's OpenAI-compatible answer endpoint with a structured output schema.
"""
import json
import logging
from typing import Optional

import httpx

from vocabstudy.config import settings
from vocabstudy.services.dictionary.providers.base import ProviderResult, build_entry, normalize_term
from vocabstudy.services.dictionary.providers.http import HttpProvider

logger = logging.getLogger(__name__)


OUTPUT_SCHEMA = {
    "description": "Schema describing a word with its definition, example, synonyms, and antonyms",
    "type": "object",
    "required": ["definition", "example", "synonyms", "antonyms"],
    "additionalProperties": False,
    "properties": {
        "definition": {"type": "string", "description": "The meaning or explanation of the word"},
        "example": {"type": "string", "description": "A sentence demonstrating the usage of the word"},
        "synonyms": {"type": "array", "items": {"type": "string"}},
        "antonyms": {"type": "array", "items": {"type": "string"}},
        "partOfSpeech": {"type": "string", "description": "Part of speech (noun, verb, adjective, etc.)"}
    }
}


class ExaProvider(HttpProvider):
    """AI search lookup through Exa"""

    name = "exa"
    base_url = "https://api.exa.ai/chat/completions"

    def __init__(self, api_key: Optional[str] = None, **kwargs):
        super().__init__(**kwargs)
        self.api_key = api_key or settings.EXA_API_KEY

    async def resolve(self, term: str) -> ProviderResult:
        term = normalize_term(term)

        if not self.api_key:
            return ProviderResult.failed(self.name, "EXA_API_KEY not configured")

        body = {
            "model": "exa",
            "messages": [{"role": "user", "content": f"define {term}"}],
            "extra_body": {
                "user_location": "US",
                "output_schema": OUTPUT_SCHEMA
            }
        }

        try:
            async with self._session() as client:
                response = await client.post(
                    self.base_url,
                    json=body,
                    headers={"Authorization": f"Bearer {self.api_key}"}
                )
        except httpx.HTTPError as e:
            logger.error(f"[{self.name}] Error fetching '{term}': {e}")
            return ProviderResult.failed(self.name, str(e))

        if response.status_code >= 400:
            return ProviderResult.failed(self.name, f"Exa API error ({response.status_code})")

        try:
            content = response.json()["choices"][0]["message"]["content"]
            data = json.loads(content) if isinstance(content, str) else content
        except (ValueError, KeyError, IndexError, TypeError) as e:
            return ProviderResult.failed(self.name, f"Failed to parse Exa response: {e}")

        if not isinstance(data, dict) or not data.get("definition"):
            return ProviderResult.not_found(self.name, "No definition in Exa response")

        entry = build_entry(
            term,
            [{
                "part_of_speech": data.get("partOfSpeech") or "unknown",
                "definitions": [{
                    "text": data["definition"],
                    "example": data.get("example"),
                    "synonyms": data.get("synonyms"),
                    "antonyms": data.get("antonyms")
                }]
            }],
            self.name
        )
        if entry is None:
            return ProviderResult.not_found(self.name, "No definition in Exa response")
        return ProviderResult.found(self.name, entry)
