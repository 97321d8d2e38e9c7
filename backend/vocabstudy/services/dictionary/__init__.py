"""
Dictionary lookups: providers, provider chain, cache tiers and resolver.
"""
from vocabstudy.services.dictionary.formatting import extract_definitions, get_primary_definition
from vocabstudy.services.dictionary.memory_cache import MemoryCache
from vocabstudy.services.dictionary.definition_store import CosmosDefinitionStore, DefinitionStore
from vocabstudy.services.dictionary.provider_chain import (
    ChainFailure,
    ChainFailureReason,
    ChainResult,
    ChainWalk,
    ProviderChain,
)
from vocabstudy.services.dictionary.resolver import (
    TieredContentResolver,
    build_default_resolver,
    definition_resolver,
)

__all__ = [
    "extract_definitions", "get_primary_definition",
    "MemoryCache", "CosmosDefinitionStore", "DefinitionStore",
    "ChainFailure", "ChainFailureReason", "ChainResult", "ChainWalk", "ProviderChain",
    "TieredContentResolver", "build_default_resolver", "definition_resolver"
]
