"""
Word Schemas
Response schemas for definition lookups.
"""
from typing import Optional
from pydantic import BaseModel, Field

from vocabstudy.models.dictionary import SimplifiedDefinition


class DefinitionResponse(BaseModel):
    """Flattened definitions of a term."""
    term: str
    source: str = Field(..., description="Provider that produced the entry")
    phonetic: Optional[str] = None
    definitions: list[SimplifiedDefinition] = Field(default_factory=list)
    primary: Optional[SimplifiedDefinition] = Field(
        default=None,
        description="Shortest definition, shown on the flashcard"
    )
