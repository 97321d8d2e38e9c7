"""
Flatten WordEntry payloads into flashcard-sized definitions.
"""
from typing import Optional

from vocabstudy.models.dictionary import SimplifiedDefinition, WordEntry


def extract_definitions(entry: Optional[WordEntry], limit: int = 3) -> list[SimplifiedDefinition]:
    """
    Return up to ``limit`` definitions in entry order.

    Rank 1 is the first sense of the first meaning; later senses are
    alternates.
    """
    if entry is None or limit <= 0:
        return []

    simplified = []
    for meaning in entry.meanings:
        for sense in meaning.definitions:
            if len(simplified) >= limit:
                return simplified
            simplified.append(SimplifiedDefinition(
                definition=sense.text,
                part_of_speech=meaning.part_of_speech,
                rank=len(simplified) + 1,
                example=sense.example,
                synonyms=sense.synonyms or [],
                antonyms=sense.antonyms or [],
                phonetic=entry.phonetic
            ))
    return simplified


def get_primary_definition(definitions: list[SimplifiedDefinition]) -> Optional[SimplifiedDefinition]:
    """Shortest definition wins; ties keep the earlier one."""
    if not definitions:
        return None
    return min(definitions, key=lambda d: len(d.definition))
