"""
Generative lookup provider.
Asks Azure OpenAI for an entry. Most expensive, but copes with rare terms,
so it belongs at the end of the chain.
"""
import logging
from typing import Optional

from vocabstudy.services.azure_openai_service import AzureOpenAIService, azure_openai_service
from vocabstudy.services.dictionary.providers.base import ProviderResult, build_entry, normalize_term

logger = logging.getLogger(__name__)


class GenerativeProvider:
    """AI-assisted lookup"""

    name = "llm"

    def __init__(self, openai_service: Optional[AzureOpenAIService] = None):
        self.openai_service = openai_service or azure_openai_service

    async def resolve(self, term: str) -> ProviderResult:
        term = normalize_term(term)

        if not self.openai_service.is_configured:
            return ProviderResult.failed(self.name, "Azure OpenAI is not configured")

        data = await self.openai_service.define_word(term)
        logger.debug(f"[{self.name}] Raw response for '{term}': {data}")

        if not data.get("definition") or not data.get("partOfSpeech"):
            return ProviderResult.failed(
                self.name,
                "Invalid response: missing definition or partOfSpeech"
            )

        entry = build_entry(
            term,
            [{
                "part_of_speech": data["partOfSpeech"],
                "definitions": [{
                    "text": data["definition"],
                    "example": data.get("example"),
                    "synonyms": data.get("synonyms"),
                    "antonyms": data.get("antonyms")
                }]
            }],
            self.name,
            phonetic=data.get("phonetic")
        )
        if entry is None:
            return ProviderResult.failed(self.name, "Response had no usable definition")
        return ProviderResult.found(self.name, entry)
