"""
Provider chain.

Walks an ordered list of definition providers, cheapest and most reliable
first. The first provider that produces an entry wins; every other
outcome (not found, error, exception, timeout) moves the walk to the next
provider after a fixed backoff. A provider is never retried within one
walk.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, Sequence, Union

from vocabstudy.models.dictionary import WordEntry
from vocabstudy.services.dictionary.providers.base import (
    DefinitionProvider,
    ProviderResult,
    ProviderStatus,
)

logger = logging.getLogger(__name__)


class ChainFailureReason(str, Enum):
    """Why a walk ended without an entry"""
    NOT_FOUND = "not_found"
    ALL_ERRORED = "all_errored"


@dataclass
class ChainFailure:
    """Structured failure of a whole chain walk"""
    term: str
    reason: ChainFailureReason
    attempts: list[ProviderResult] = field(default_factory=list)

    @property
    def last_error(self) -> Optional[str]:
        return self.attempts[-1].error if self.attempts else None


@dataclass
class ChainWalk:
    """
    State of one walk over the chain.

    ``provider_index`` points at the provider to call next; ``last_error``
    holds the most recent failure message. The walk is exhausted once the
    index runs past the end of the chain.
    """
    providers: Sequence[DefinitionProvider]
    provider_index: int = 0
    last_error: Optional[str] = None
    attempts: list[ProviderResult] = field(default_factory=list)

    @property
    def current(self) -> Optional[DefinitionProvider]:
        if self.exhausted:
            return None
        return self.providers[self.provider_index]

    @property
    def exhausted(self) -> bool:
        return self.provider_index >= len(self.providers)

    def record(self, result: ProviderResult) -> None:
        """Record the current provider's outcome and step past it."""
        self.attempts.append(result)
        if not result.success:
            self.last_error = result.error
        self.provider_index += 1

    def failure(self, term: str) -> ChainFailure:
        # Any definitive "no such word" outranks transport errors
        if not self.attempts or any(a.status == ProviderStatus.NOT_FOUND for a in self.attempts):
            reason = ChainFailureReason.NOT_FOUND
        else:
            reason = ChainFailureReason.ALL_ERRORED
        return ChainFailure(term=term, reason=reason, attempts=list(self.attempts))


ChainResult = Union[WordEntry, ChainFailure]


class ProviderChain:
    """Sequential first-success fallback over definition providers"""

    def __init__(
        self,
        providers: Sequence[DefinitionProvider],
        timeout: float = 10.0,
        backoff: float = 0.25,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.providers = list(providers)
        self.timeout = timeout
        self.backoff = backoff
        self.sleep = sleep

    @property
    def provider_names(self) -> list[str]:
        return [provider.name for provider in self.providers]

    async def _call(self, provider: DefinitionProvider, term: str) -> ProviderResult:
        """Call one provider, folding timeouts and exceptions into a result."""
        try:
            result = await asyncio.wait_for(provider.resolve(term), timeout=self.timeout)
        except asyncio.TimeoutError:
            return ProviderResult.timed_out(provider.name, self.timeout)
        except Exception as e:
            return ProviderResult.failed(provider.name, f"{type(e).__name__}: {e}")

        if result.status == ProviderStatus.FOUND and result.entry is None:
            return ProviderResult.failed(provider.name, "Provider reported success without an entry")
        return result

    async def resolve(self, term: str) -> ChainResult:
        """
        Resolve a term through the chain.

        Returns the first WordEntry produced, or a ChainFailure describing
        why nothing was found. Never raises for provider-side problems.
        """
        walk = ChainWalk(providers=self.providers)

        while not walk.exhausted:
            provider = walk.current
            result = await self._call(provider, term)
            walk.record(result)

            if result.success:
                logger.info(f"Resolved '{term}' via {provider.name} after {len(walk.attempts)} attempt(s)")
                return result.entry

            logger.warning(f"Provider {provider.name} failed for '{term}': {result.status.value} ({result.error})")

            if not walk.exhausted and self.backoff > 0:
                await self.sleep(self.backoff)

        failure = walk.failure(term)
        logger.warning(
            f"All {len(self.providers)} providers failed for '{term}' "
            f"({failure.reason.value}, last error: {failure.last_error})"
        )
        return failure
