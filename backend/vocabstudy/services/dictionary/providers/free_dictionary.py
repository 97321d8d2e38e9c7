"""
Free Dictionary API provider.
Uses dictionaryapi.dev: free, keyless and fast, so it goes first.
"""
import logging
from typing import Optional
from urllib.parse import quote

import httpx

from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import ProviderResult, build_entry, normalize_term
from vocabstudy.services.dictionary.providers.http import HttpProvider

logger = logging.getLogger(__name__)


class FreeDictionaryProvider(HttpProvider):
    """Structured JSON lookup against dictionaryapi.dev"""

    name = "free-dictionary-api"
    base_url = "https://api.dictionaryapi.dev/api/v2/entries/en"

    async def resolve(self, term: str) -> ProviderResult:
        term = normalize_term(term)
        url = f"{self.base_url}/{quote(term, safe='')}"

        try:
            async with self._session() as client:
                response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.HTTPError as e:
            logger.error(f"[{self.name}] Error fetching '{term}': {e}")
            return ProviderResult.failed(self.name, str(e))

        if response.status_code == 404:
            return ProviderResult.not_found(self.name)
        if response.status_code >= 400:
            return ProviderResult.failed(self.name, f"HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError:
            return ProviderResult.failed(self.name, "Response is not JSON")

        entry = self.parse_response(payload, term)
        if entry is None:
            return ProviderResult.failed(self.name, "Could not parse API response")
        return ProviderResult.found(self.name, entry)

    def parse_response(self, data, term: str) -> Optional[WordEntry]:
        """Convert the first API entry into a WordEntry."""
        if not isinstance(data, list) or not data:
            return None

        first = data[0]
        if not isinstance(first, dict):
            return None

        phonetic = first.get("phonetic")
        if not phonetic:
            phonetics = [p for p in first.get("phonetics") or [] if p.get("text")]
            # Prefer a transcription that also has audio
            with_audio = [p for p in phonetics if p.get("audio")]
            if with_audio:
                phonetic = with_audio[0]["text"]
            elif phonetics:
                phonetic = phonetics[0]["text"]

        meanings = []
        for meaning in first.get("meanings") or []:
            meanings.append({
                "part_of_speech": meaning.get("partOfSpeech") or "unknown",
                "definitions": [
                    {
                        "text": d.get("definition"),
                        "example": d.get("example"),
                        "synonyms": d.get("synonyms"),
                        "antonyms": d.get("antonyms")
                    }
                    for d in meaning.get("definitions") or []
                ]
            })

        return build_entry(first.get("word") or term, meanings, self.name, phonetic=phonetic)
