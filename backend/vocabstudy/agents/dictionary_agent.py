"""
Dictionary Agent
Looks up definitions through the tiered resolver.

Responsibilities:
- Resolve a term to a WordEntry (memory cache, store, providers)
- Flatten it into ranked flashcard definitions
- Pick the primary definition used for grading
"""
from typing import Optional

from vocabstudy.agents.base_agent import BaseAgent
from vocabstudy.agents.state import AppState, add_agent_message
from vocabstudy.config import Settings
from vocabstudy.services.dictionary import (
    TieredContentResolver,
    definition_resolver,
    extract_definitions,
    get_primary_definition,
)


class DictionaryAgent(BaseAgent[AppState]):
    """
    Dictionary Agent for definition lookups.

    Never caches or reports provider failures itself: a term either has a
    definition or it does not.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        resolver: Optional[TieredContentResolver] = None
    ):
        super().__init__(settings=settings)
        self.resolver = resolver or definition_resolver

    @property
    def name(self) -> str:
        return "dictionary"

    @property
    def description(self) -> str:
        return "Resolves word definitions through the cache tiers and provider chain"

    async def process(self, state: AppState) -> AppState:
        """Process a definition request"""
        term = state["activity_input"].get("term", "")
        limit = state["activity_input"].get("limit", 3)
        self.log_start({"term": term})

        try:
            lookup = await self.lookup(term, limit)
            state["dictionary"] = lookup

            if lookup["entry"] is None:
                state["response"] = {
                    "type": "definition",
                    "term": term,
                    "found": False
                }
                state = add_agent_message(state, self.name, f"No definition found for '{term}'")
                return state

            state["response"] = {
                "type": "definition",
                "term": term,
                "found": True,
                "source": lookup["entry"]["source"],
                "phonetic": lookup["entry"].get("phonetic"),
                "definitions": lookup["definitions"],
                "primary": lookup["primary"]
            }
            state = add_agent_message(
                state,
                self.name,
                f"Resolved '{term}' from {lookup['entry']['source']}",
                {"definitions": len(lookup["definitions"])}
            )
            self.log_complete({"term": term, "source": lookup["entry"]["source"]})
            return state

        except Exception as e:
            return self.fail(state, e)

    async def lookup(self, term: str, limit: int = 3) -> dict:
        """
        Resolve a term and flatten it.

        Returns:
            Dict with ``term``, ``entry`` (or None), ``definitions`` and ``primary``
        """
        entry = await self.resolver.get_definition(term)
        definitions = extract_definitions(entry, limit=limit)
        primary = get_primary_definition(definitions)

        return {
            "term": term,
            "entry": entry.model_dump(mode="json") if entry else None,
            "definitions": [d.model_dump(mode="json") for d in definitions],
            "primary": primary.model_dump(mode="json") if primary else None
        }

    async def get_canonical_definition(self, term: str) -> Optional[str]:
        """Rank 1 definition of a term, the one answers are graded against"""
        entry = await self.resolver.get_definition(term)
        definitions = extract_definitions(entry, limit=1)
        return definitions[0].definition if definitions else None


# Singleton instance
dictionary_agent = DictionaryAgent()
