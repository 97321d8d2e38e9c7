"""
Pytest configuration and fixtures for tests.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from datetime import date, datetime, timedelta, timezone

from vocabstudy.models.dictionary import WordEntry


class FakeClock:
    """Settable clock for TTL tests."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class FakeDefinitionsContainer:
    """Dict-backed stand-in for the Cosmos definition cache calls."""

    def __init__(self):
        self.documents = {}

    async def get_cached_definition(self, term: str):
        doc = self.documents.get(term)
        return dict(doc) if doc else None

    async def save_cached_definition(self, term: str, document: dict):
        document = dict(document, term=term)
        self.documents[term] = document
        return document

    async def delete_cached_definition(self, term: str) -> bool:
        return self.documents.pop(term, None) is not None


@pytest.fixture
def clock():
    """Clock fixed at 2024-01-05 12:00 UTC."""
    return FakeClock(datetime(2024, 1, 5, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def today():
    return date(2024, 1, 5)


@pytest.fixture
def make_entry():
    """Factory for small WordEntry payloads."""
    def _make(term: str = "ephemeral", source: str = "free-dictionary-api", text: str | None = None) -> WordEntry:
        return WordEntry(
            term=term,
            phonetic="/əˈfɛm(ə)rəl/",
            meanings=[{
                "part_of_speech": "adjective",
                "definitions": [
                    {"text": text or "lasting for a very short time", "example": "ephemeral pleasures"},
                    {"text": "short-lived", "synonyms": ["fleeting", "transient"]}
                ]
            }],
            source=source
        )
    return _make


@pytest.fixture
def fake_definitions_container():
    return FakeDefinitionsContainer()


@pytest.fixture
def mock_settings():
    """Mock settings for tests."""
    settings = MagicMock()
    settings.AZURE_OPENAI_API_KEY = "test-key"
    settings.AZURE_OPENAI_ENDPOINT = "https://test.openai.azure.com"
    settings.AZURE_OPENAI_DEPLOYMENT_NAME = "gpt-4o-mini"
    settings.COSMOS_DB_ENDPOINT = "https://test.documents.azure.com"
    settings.COSMOS_DB_KEY = "test-cosmos-key"
    settings.COSMOS_DB_DATABASE_NAME = "test_db"
    settings.SR_MAX_INTERVAL_DAYS = 21
    settings.SR_ALMOST_FACTOR = 0.5
    settings.SR_DEFAULT_DUE_LIMIT = 20
    settings.DICTIONARY_CACHE_TTL_DAYS = 7
    settings.GRADER_TEMPERATURE = 0.3
    settings.GRADER_VERBOSE = False
    return settings


@pytest.fixture
def mock_cosmos_service():
    """Mock Cosmos DB service with an empty store."""
    service = AsyncMock()
    service.get_review_state.return_value = None
    service.get_review_states.return_value = []
    service.get_attempts.return_value = []
    service.save_review_state.side_effect = lambda user_id, item_id, data: data
    service.record_attempt.side_effect = lambda user_id, data: data
    service.save_daily_stats.side_effect = lambda user_id, data: data
    return service


@pytest.fixture
def sample_review_states():
    """Stored review documents for one user."""
    return [
        {
            "id": "review_test_user_123_w1",
            "userId": "test_user_123",
            "itemId": "w1",
            "stackId": "sat",
            "streak": 2,
            "intervalDays": 4,
            "dueOn": "2024-01-05",
            "lastResult": "pass",
            "inTestQueue": False
        },
        {
            "id": "review_test_user_123_w2",
            "userId": "test_user_123",
            "itemId": "w2",
            "stackId": "sat",
            "streak": 0,
            "intervalDays": 1,
            "dueOn": "2024-01-03",
            "lastResult": "fail",
            "inTestQueue": False
        },
        {
            "id": "review_test_user_123_w3",
            "userId": "test_user_123",
            "itemId": "w3",
            "stackId": "gre",
            "streak": 4,
            "intervalDays": 16,
            "dueOn": "2024-01-20",
            "lastResult": "pass",
            "inTestQueue": True
        },
        {
            "id": "review_test_user_123_w4",
            "userId": "test_user_123",
            "itemId": "w4",
            "stackId": "sat",
            "streak": 0,
            "intervalDays": 0,
            "dueOn": None,
            "lastResult": None,
            "inTestQueue": True,
            "hasReviewed": True
        }
    ]
