"""
Tests for the provider chain.
"""
import asyncio
import pytest
from unittest.mock import AsyncMock

from vocabstudy.services.dictionary.provider_chain import (
    ChainFailure,
    ChainFailureReason,
    ChainWalk,
    ProviderChain,
)
from vocabstudy.services.dictionary.providers.base import ProviderResult, ProviderStatus


class StubProvider:
    """Provider returning a fixed outcome and recording its calls."""

    def __init__(self, name, outcome, calls=None):
        self.name = name
        self.outcome = outcome
        self.calls = calls if calls is not None else []

    async def resolve(self, term):
        self.calls.append(self.name)
        if isinstance(self.outcome, Exception):
            raise self.outcome
        if self.outcome == "hang":
            await asyncio.sleep(10)
        return self.outcome


@pytest.fixture
def sleep():
    return AsyncMock()


class TestProviderChain:
    """Tests for ProviderChain.resolve"""

    @pytest.mark.asyncio
    async def test_first_success_wins(self, make_entry, sleep):
        calls = []
        providers = [
            StubProvider("a", ProviderResult.found("a", make_entry(source="a")), calls),
            StubProvider("b", ProviderResult.found("b", make_entry(source="b")), calls),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0.25, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert result.source == "a"
        assert calls == ["a"]
        sleep.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_falls_back_in_order(self, make_entry, sleep):
        """A fails, B succeeds: B's entry is returned and A ran first."""
        calls = []
        providers = [
            StubProvider("a", ProviderResult.not_found("a"), calls),
            StubProvider("b", ProviderResult.found("b", make_entry(source="b")), calls),
            StubProvider("c", ProviderResult.found("c", make_entry(source="c")), calls),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0.25, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert result.source == "b"
        assert calls == ["a", "b"]
        sleep.assert_awaited_once_with(0.25)

    @pytest.mark.asyncio
    async def test_exception_moves_to_next_provider(self, make_entry, sleep):
        providers = [
            StubProvider("a", RuntimeError("boom")),
            StubProvider("b", ProviderResult.found("b", make_entry(source="b"))),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0.25, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert result.source == "b"

    @pytest.mark.asyncio
    async def test_hung_provider_times_out(self, make_entry, sleep):
        providers = [
            StubProvider("slow", "hang"),
            StubProvider("b", ProviderResult.found("b", make_entry(source="b"))),
        ]
        chain = ProviderChain(providers, timeout=0.01, backoff=0.25, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert result.source == "b"

    @pytest.mark.asyncio
    async def test_all_not_found(self, sleep):
        providers = [
            StubProvider("a", ProviderResult.not_found("a")),
            StubProvider("b", ProviderResult.not_found("b")),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0.25, sleep=sleep)

        result = await chain.resolve("zzzqx")

        assert isinstance(result, ChainFailure)
        assert result.reason == ChainFailureReason.NOT_FOUND
        assert [a.provider for a in result.attempts] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_all_errored(self, sleep):
        providers = [
            StubProvider("a", ProviderResult.failed("a", "HTTP 503")),
            StubProvider("b", RuntimeError("boom")),
            StubProvider("c", "hang"),
        ]
        chain = ProviderChain(providers, timeout=0.01, backoff=0.25, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert isinstance(result, ChainFailure)
        assert result.reason == ChainFailureReason.ALL_ERRORED
        assert [a.status for a in result.attempts] == [
            ProviderStatus.ERROR, ProviderStatus.ERROR, ProviderStatus.TIMEOUT
        ]
        assert "Timed out" in result.last_error

    @pytest.mark.asyncio
    async def test_any_not_found_is_reported_as_not_found(self, sleep):
        providers = [
            StubProvider("a", ProviderResult.failed("a", "HTTP 500")),
            StubProvider("b", ProviderResult.not_found("b")),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0.25, sleep=sleep)

        result = await chain.resolve("zzzqx")

        assert result.reason == ChainFailureReason.NOT_FOUND

    @pytest.mark.asyncio
    async def test_empty_chain(self, sleep):
        chain = ProviderChain([], sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert isinstance(result, ChainFailure)
        assert result.reason == ChainFailureReason.NOT_FOUND
        assert result.attempts == []

    @pytest.mark.asyncio
    async def test_backoff_only_between_providers(self, sleep):
        providers = [StubProvider(n, ProviderResult.not_found(n)) for n in ("a", "b", "c")]
        chain = ProviderChain(providers, timeout=1, backoff=0.5, sleep=sleep)

        await chain.resolve("zzzqx")

        assert sleep.await_count == 2

    @pytest.mark.asyncio
    async def test_found_without_entry_is_a_failure(self, make_entry, sleep):
        broken = ProviderResult(provider="a", status=ProviderStatus.FOUND, entry=None)
        providers = [
            StubProvider("a", broken),
            StubProvider("b", ProviderResult.found("b", make_entry(source="b"))),
        ]
        chain = ProviderChain(providers, timeout=1, backoff=0, sleep=sleep)

        result = await chain.resolve("ephemeral")

        assert result.source == "b"

    @pytest.mark.asyncio
    async def test_each_call_is_independent(self, sleep):
        provider = StubProvider("a", ProviderResult.not_found("a"))
        chain = ProviderChain([provider], timeout=1, backoff=0, sleep=sleep)

        await chain.resolve("zzzqx")
        await chain.resolve("zzzqx")

        assert provider.calls == ["a", "a"]


class TestChainWalk:
    """Tests for the chain walk state"""

    def test_walk_advances_and_tracks_last_error(self, make_entry):
        providers = [StubProvider("a", None), StubProvider("b", None)]
        walk = ChainWalk(providers=providers)

        assert walk.current is providers[0]
        assert walk.exhausted is False

        walk.record(ProviderResult.failed("a", "HTTP 500"))
        assert walk.provider_index == 1
        assert walk.last_error == "HTTP 500"
        assert walk.current is providers[1]

        walk.record(ProviderResult.not_found("b"))
        assert walk.exhausted is True
        assert walk.current is None
        assert walk.last_error == "Word not found"

    def test_failure_reason_from_attempts(self):
        walk = ChainWalk(providers=[])
        walk.attempts = [ProviderResult.timed_out("a", 5.0)]

        assert walk.failure("x").reason == ChainFailureReason.ALL_ERRORED
