"""
Provider contract for definition lookups.

A provider is anything with a ``name`` and an async ``resolve(term)``
returning a ProviderResult. Providers report "no such word" as a
NOT_FOUND result; anything else that goes wrong may be returned as an
ERROR result or simply raised, the provider chain treats both alike.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Protocol, runtime_checkable

from pydantic import ValidationError

from vocabstudy.models.dictionary import DefinitionSense, Meaning, WordEntry

logger = logging.getLogger(__name__)


class ProviderStatus(str, Enum):
    """Outcome of one provider call"""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"
    TIMEOUT = "timeout"


@dataclass
class ProviderResult:
    """Result of one provider call"""
    provider: str
    status: ProviderStatus
    entry: Optional[WordEntry] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.status == ProviderStatus.FOUND and self.entry is not None

    @classmethod
    def found(cls, provider: str, entry: WordEntry) -> "ProviderResult":
        return cls(provider=provider, status=ProviderStatus.FOUND, entry=entry)

    @classmethod
    def not_found(cls, provider: str, reason: str = "Word not found") -> "ProviderResult":
        return cls(provider=provider, status=ProviderStatus.NOT_FOUND, error=reason)

    @classmethod
    def failed(cls, provider: str, error: str) -> "ProviderResult":
        return cls(provider=provider, status=ProviderStatus.ERROR, error=error)

    @classmethod
    def timed_out(cls, provider: str, timeout: float) -> "ProviderResult":
        return cls(provider=provider, status=ProviderStatus.TIMEOUT, error=f"Timed out after {timeout}s")


@runtime_checkable
class DefinitionProvider(Protocol):
    """Shared contract of all lookup strategies"""
    name: str

    async def resolve(self, term: str) -> ProviderResult:
        ...


def normalize_term(term: str) -> str:
    """Trim and lowercase a term; every cache tier keys on this form."""
    return (term or "").strip().lower()


def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace runs into single spaces."""
    return " ".join((text or "").split())


def build_entry(
    term: str,
    meanings: Iterable[dict],
    source: str,
    phonetic: Optional[str] = None
) -> Optional[WordEntry]:
    """
    Build a WordEntry from loosely shaped provider data.

    Each meaning dict has ``part_of_speech`` and ``definitions`` (dicts with
    ``text`` and optional ``example``/``synonyms``/``antonyms``). Senses
    without text and meanings without senses are dropped. Returns None if
    nothing usable is left.
    """
    cleaned = []
    for meaning in meanings:
        senses = []
        for sense in meaning.get("definitions", []):
            text = clean_text(sense.get("text"))
            if not text:
                continue
            senses.append(DefinitionSense(
                text=text,
                example=clean_text(sense.get("example")) or None,
                synonyms=list(sense.get("synonyms") or []) or None,
                antonyms=list(sense.get("antonyms") or []) or None
            ))
        if senses:
            cleaned.append(Meaning(
                part_of_speech=clean_text(meaning.get("part_of_speech")).lower() or "unknown",
                definitions=senses
            ))

    if not cleaned:
        return None

    try:
        return WordEntry(
            term=term,
            phonetic=clean_text(phonetic) or None,
            meanings=cleaned,
            source=source
        )
    except ValidationError as e:
        logger.debug(f"Discarding invalid entry for '{term}' from {source}: {e}")
        return None
