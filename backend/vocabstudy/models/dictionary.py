"""
Dictionary Models
Resolved word definitions and their cache envelopes.
"""
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class DefinitionSense(BaseModel):
    """One sense of a word within a part of speech"""
    text: str
    example: Optional[str] = None
    synonyms: Optional[list[str]] = None
    antonyms: Optional[list[str]] = None


class Meaning(BaseModel):
    """Senses grouped by part of speech"""
    part_of_speech: str = Field(default="unknown")
    definitions: list[DefinitionSense] = Field(default_factory=list)


class WordEntry(BaseModel):
    """
    A resolved definition payload.

    Always holds at least one meaning with at least one non-empty
    definition text; providers that cannot satisfy this report failure.
    """
    term: str
    phonetic: Optional[str] = None
    meanings: list[Meaning]
    source: str = Field(..., description="Provider that produced the entry")

    @model_validator(mode="after")
    def _has_a_definition(self) -> "WordEntry":
        if not any(
            sense.text.strip()
            for meaning in self.meanings
            for sense in meaning.definitions
        ):
            raise ValueError(f"word entry for '{self.term}' has no definition text")
        return self


class CacheEntry(BaseModel):
    """A WordEntry stamped with the time it was cached"""
    term: str
    entry: WordEntry
    cached_at: datetime

    def is_fresh(self, ttl: timedelta, now: datetime) -> bool:
        return now - self.cached_at < ttl


class SimplifiedDefinition(BaseModel):
    """Flattened definition for flashcards"""
    definition: str
    part_of_speech: str
    rank: int = Field(..., ge=1, description="1 = primary, 2+ = alternates")
    example: Optional[str] = None
    synonyms: list[str] = Field(default_factory=list)
    antonyms: list[str] = Field(default_factory=list)
    phonetic: Optional[str] = None
