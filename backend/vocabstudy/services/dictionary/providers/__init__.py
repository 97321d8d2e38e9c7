"""
Definition lookup providers.

Each provider implements ``async resolve(term) -> ProviderResult``.
``build_providers`` turns configured names into instances, in order.
"""
import logging
from typing import Callable, Iterable

from vocabstudy.services.dictionary.providers.base import (
    DefinitionProvider,
    ProviderResult,
    ProviderStatus,
    build_entry,
    normalize_term
)
from vocabstudy.services.dictionary.providers.free_dictionary import FreeDictionaryProvider
from vocabstudy.services.dictionary.providers.generative import GenerativeProvider
from vocabstudy.services.dictionary.providers.exa import ExaProvider
from vocabstudy.services.dictionary.providers.wiktionary import WiktionaryProvider
from vocabstudy.services.dictionary.providers.duckduckgo import DuckDuckGoProvider
from vocabstudy.services.dictionary.providers.google import GoogleProvider

logger = logging.getLogger(__name__)


PROVIDER_REGISTRY: dict[str, Callable[[], DefinitionProvider]] = {
    "free_dictionary": FreeDictionaryProvider,
    "wiktionary": WiktionaryProvider,
    "duckduckgo": DuckDuckGoProvider,
    "google": GoogleProvider,
    "exa": ExaProvider,
    "llm": GenerativeProvider
}


def build_providers(names: Iterable[str]) -> list[DefinitionProvider]:
    """Instantiate providers by registry name, keeping the given order."""
    providers = []
    for name in names:
        factory = PROVIDER_REGISTRY.get(name)
        if factory is None:
            raise ValueError(f"Unknown dictionary provider: {name}")
        providers.append(factory())
    logger.info(f"Dictionary provider chain: {[p.name for p in providers]}")
    return providers


__all__ = [
    "DefinitionProvider", "ProviderResult", "ProviderStatus", "build_entry", "normalize_term",
    "FreeDictionaryProvider", "GenerativeProvider", "ExaProvider",
    "WiktionaryProvider", "DuckDuckGoProvider", "GoogleProvider",
    "PROVIDER_REGISTRY", "build_providers"
]
