"""
Persistent definition store (L2).

One document per normalized term in the Cosmos definitions container.
Writes overwrite; freshness is judged by the reader from ``cachedAt``.
"""
import logging
from datetime import datetime
from typing import Optional, Protocol

from vocabstudy.models.dictionary import CacheEntry, WordEntry
from vocabstudy.services.cosmos_db_service import CosmosDBService, cosmos_db_service

logger = logging.getLogger(__name__)


class DefinitionStore(Protocol):
    """Keyed get/put with a stored timestamp"""

    async def get(self, term: str) -> Optional[CacheEntry]:
        ...

    async def put(self, term: str, entry: WordEntry, cached_at: datetime) -> None:
        ...

    async def delete(self, term: str) -> bool:
        ...


class CosmosDefinitionStore:
    """DefinitionStore over Azure Cosmos DB"""

    def __init__(self, db_service: Optional[CosmosDBService] = None):
        self.db_service = db_service or cosmos_db_service

    async def get(self, term: str) -> Optional[CacheEntry]:
        document = await self.db_service.get_cached_definition(term)
        if not document:
            return None
        try:
            return CacheEntry(
                term=document["term"],
                entry=WordEntry.model_validate(document["entry"]),
                cached_at=datetime.fromisoformat(document["cachedAt"])
            )
        except (KeyError, ValueError) as e:
            # Unreadable rows behave like a miss and get overwritten
            logger.warning(f"Ignoring malformed cached definition for '{term}': {e}")
            return None

    async def put(self, term: str, entry: WordEntry, cached_at: datetime) -> None:
        await self.db_service.save_cached_definition(term, {
            "entry": entry.model_dump(mode="json"),
            "source": entry.source,
            "cachedAt": cached_at.isoformat()
        })
        logger.debug(f"Stored definition for '{term}' from {entry.source}")

    async def delete(self, term: str) -> bool:
        return await self.db_service.delete_cached_definition(term)
