"""
Tests for the Cosmos DB and Azure OpenAI service wrappers.
The SDK clients are replaced with mocks.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import date

from azure.cosmos import exceptions

from vocabstudy.services.azure_openai_service import AzureOpenAIService, parse_json_response
from vocabstudy.services.cosmos_db_service import CosmosDBService


@pytest.fixture
def container():
    container = MagicMock()
    container.upsert_item.side_effect = lambda body: body
    container.create_item.side_effect = lambda body: body
    return container


@pytest.fixture
def service(container):
    service = CosmosDBService()
    with patch.object(service, "_get_container", return_value=container):
        yield service


class TestCosmosDBService:
    """Tests for CosmosDBService document handling."""

    @pytest.mark.asyncio
    async def test_save_review_state_sets_identity(self, service, container):
        saved = await service.save_review_state("u1", "w1", {"streak": 1})

        assert saved["id"] == "review_u1_w1"
        assert saved["partitionKey"] == "u1"
        assert saved["itemId"] == "w1"
        assert "createdAt" in saved and "updatedAt" in saved

    @pytest.mark.asyncio
    async def test_upsert_keeps_created_at(self, service):
        saved = await service.save_review_state("u1", "w1", {"createdAt": "2024-01-01T00:00:00"})

        assert saved["createdAt"] == "2024-01-01T00:00:00"

    @pytest.mark.asyncio
    async def test_missing_item_is_none(self, service, container):
        container.read_item.side_effect = exceptions.CosmosResourceNotFoundError(message="gone")

        assert await service.get_review_state("u1", "w1") is None

    @pytest.mark.asyncio
    async def test_delete_missing_definition(self, service, container):
        container.delete_item.side_effect = exceptions.CosmosResourceNotFoundError(message="gone")

        assert await service.delete_cached_definition("ephemeral") is False

    @pytest.mark.asyncio
    async def test_definition_ids_are_safe(self, service):
        saved = await service.save_cached_definition("either/or", {"source": "wiktionary"})

        assert "/" not in saved["id"]
        assert saved["term"] == "either/or"
        assert saved["partitionKey"] == "either/or"

    @pytest.mark.asyncio
    async def test_get_attempts_filters_by_day(self, service, container):
        container.query_items.return_value = iter([{"itemId": "w1"}])

        result = await service.get_attempts("u1", since=date(2024, 1, 5), until=date(2024, 1, 5))

        assert result == [{"itemId": "w1"}]
        kwargs = container.query_items.call_args.kwargs
        assert "c.day >= @since" in kwargs["query"]
        assert "c.day <= @until" in kwargs["query"]
        assert kwargs["partition_key"] == "u1"
        assert kwargs["enable_cross_partition_query"] is False

    @pytest.mark.asyncio
    async def test_daily_stats_id_per_day(self, service):
        saved = await service.save_daily_stats("u1", {"day": "2024-01-05", "attempts": 3})

        assert saved["id"] == "daily_u1_all_2024-01-05"

    @pytest.mark.asyncio
    async def test_query_errors_propagate(self, service, container):
        container.query_items.side_effect = RuntimeError("throttled")

        with pytest.raises(RuntimeError):
            await service.get_review_states("u1")


class TestAzureOpenAIService:
    """Tests for AzureOpenAIService."""

    def test_parse_plain_json(self):
        assert parse_json_response('{"grade": "pass"}') == {"grade": "pass"}

    def test_parse_json_wrapped_in_prose(self):
        assert parse_json_response('Here you go: {"grade": "fail"} hope it helps') == {"grade": "fail"}

    def test_parse_garbage(self):
        with pytest.raises(ValueError):
            parse_json_response("no json here")

    @pytest.mark.asyncio
    async def test_grade_spoken_definition(self):
        service = AzureOpenAIService()
        service.chat_completion = AsyncMock(return_value='{"grade": "almost", "score": 0.5}')

        result = await service.grade_spoken_definition("ephemeral", "short-lived", "short", temperature=0.3)

        assert result["grade"] == "almost"
        messages = service.chat_completion.call_args.args[0]
        assert messages[0]["role"] == "system"
        assert "ephemeral" in messages[1]["content"]
        assert service.chat_completion.call_args.kwargs["temperature"] == 0.3
