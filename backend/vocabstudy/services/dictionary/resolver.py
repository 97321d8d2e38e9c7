"""
Tiered Content Resolver.

Answers "what does this term mean?" from three tiers, each keyed on the
normalized term:

- L1: in-process MemoryCache
- L2: persistent DefinitionStore (Cosmos DB)
- L3: ProviderChain over external lookups

Fresh results from L3 are written back to L2 and L1. Failures are never
cached.
"""
import asyncio
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from vocabstudy.config import settings
from vocabstudy.models.dictionary import CacheEntry, WordEntry
from vocabstudy.services.dictionary.definition_store import CosmosDefinitionStore, DefinitionStore
from vocabstudy.services.dictionary.memory_cache import MemoryCache, utc_now
from vocabstudy.services.dictionary.provider_chain import ChainFailure, ProviderChain
from vocabstudy.services.dictionary.providers import build_providers
from vocabstudy.services.dictionary.providers.base import normalize_term

logger = logging.getLogger(__name__)


class TieredContentResolver:
    """Single entry point for definition lookups"""

    def __init__(
        self,
        provider_chain: ProviderChain,
        store: Optional[DefinitionStore] = None,
        memory_cache: Optional[MemoryCache] = None,
        ttl: Optional[timedelta] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.provider_chain = provider_chain
        self.store = store
        self.ttl = ttl or timedelta(days=settings.DICTIONARY_CACHE_TTL_DAYS)
        self.clock = clock
        if memory_cache is None:
            memory_cache = MemoryCache(
                max_entries=settings.DICTIONARY_MEMORY_CACHE_MAX_ENTRIES,
                ttl=self.ttl,
                clock=clock
            )
        self.memory_cache = memory_cache
        # Strong references so in-flight resolutions are not collected
        self._pending: set[asyncio.Task] = set()

    async def get_definition(self, term: str) -> Optional[WordEntry]:
        """
        Resolve a term to a WordEntry.

        Returns None when no tier produced an entry. Provider and cache
        failures are logged, never raised.
        """
        key = normalize_term(term)
        if not key:
            return None

        entry = self.memory_cache.get(key)
        if entry is not None:
            logger.debug(f"L1 hit for '{key}'")
            return entry

        cached = await self._read_store(key)
        if cached is not None:
            logger.debug(f"L2 hit for '{key}'")
            # L1 ages from the stored timestamp, not from this read
            self.memory_cache.set(key, cached.entry, cached.cached_at)
            return cached.entry

        # Runs to completion even if this request is cancelled
        task = asyncio.ensure_future(self._resolve_and_cache(key))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        task.add_done_callback(self._log_task_failure)
        return await asyncio.shield(task)

    def _log_task_failure(self, task: asyncio.Task) -> None:
        # Retrieved here so an abandoned resolution still reports its error
        if not task.cancelled() and task.exception() is not None:
            logger.error(f"Definition resolution failed: {task.exception()!r}")

    async def _read_store(self, key: str) -> Optional[CacheEntry]:
        if self.store is None:
            return None
        try:
            cached = await self.store.get(key)
        except Exception as e:
            logger.warning(f"Definition store read failed for '{key}': {e}")
            return None
        if cached is None:
            return None
        if not cached.is_fresh(self.ttl, self.clock()):
            logger.debug(f"L2 entry for '{key}' is stale (cached {cached.cached_at.isoformat()})")
            return None
        return cached

    async def _resolve_and_cache(self, key: str) -> Optional[WordEntry]:
        result = await self.provider_chain.resolve(key)
        if isinstance(result, ChainFailure):
            logger.info(f"No definition for '{key}': {result.reason.value}")
            return None

        cached_at = self.clock()
        if self.store is not None:
            try:
                await self.store.put(key, result, cached_at)
            except Exception as e:
                logger.error(f"Definition store write failed for '{key}': {e}")
        self.memory_cache.set(key, result, cached_at)
        return result

    async def invalidate(self, term: str) -> None:
        """Forget a term in L1 and L2 so the next lookup re-resolves it."""
        key = normalize_term(term)
        self.memory_cache.delete(key)
        if self.store is not None:
            await self.store.delete(key)

    def clear_memory_cache(self) -> None:
        """Drop every L1 entry; L2 is untouched."""
        self.memory_cache.clear()


def build_default_resolver() -> TieredContentResolver:
    """Build a resolver from application settings."""
    chain = ProviderChain(
        build_providers(settings.DICTIONARY_PROVIDERS),
        timeout=settings.DICTIONARY_PROVIDER_TIMEOUT_SECONDS,
        backoff=settings.DICTIONARY_PROVIDER_BACKOFF_SECONDS
    )
    return TieredContentResolver(chain, store=CosmosDefinitionStore())


# Singleton instance
definition_resolver = build_default_resolver()
