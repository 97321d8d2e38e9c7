"""
Tests for Progress API endpoints.
"""
import pytest
from unittest.mock import patch
from fastapi.testclient import TestClient

from vocabstudy.main import app


client = TestClient(app)


@pytest.fixture
def mock_run_orchestrator():
    """Mock the run_orchestrator function."""
    with patch("vocabstudy.api.v1.endpoints.progress.run_orchestrator") as mock:
        yield mock


class TestOverviewEndpoint:
    """Tests for GET /progress/overview"""

    def test_get_overview_success(self, mock_run_orchestrator):
        mock_run_orchestrator.return_value = {
            "response": {
                "type": "progress",
                "overview": {
                    "user_id": "test_user",
                    "total_words": 4,
                    "due_today": 2,
                    "total_attempts": 5,
                    "accuracy_last_7_days": 50,
                    "average_interval": 5.2,
                    "item_stats": [
                        {
                            "item_id": "w3", "streak": 4, "last_result": "pass", "interval_days": 16,
                            "due_on": "2024-01-20", "total_attempts": 0, "passes": 0, "accuracy": 0.0
                        }
                    ],
                    "daily_accuracy": [{"day": "2024-01-05", "attempts": 2, "accuracy": 0.5}]
                }
            },
            "has_error": False
        }

        response = client.get("/api/v1/progress/overview", params={"user_id": "test_user"})

        assert response.status_code == 200
        overview = response.json()["overview"]
        assert overview["total_words"] == 4
        assert overview["accuracy_last_7_days"] == 50
        assert overview["item_stats"][0]["item_id"] == "w3"

    def test_get_overview_error(self, mock_run_orchestrator):
        mock_run_orchestrator.return_value = {
            "response": {},
            "has_error": True,
            "error_message": "Progress error: cosmos down"
        }

        response = client.get("/api/v1/progress/overview", params={"user_id": "test_user"})

        assert response.status_code == 500
        assert "cosmos down" in response.json()["detail"]


class TestHealthEndpoints:
    """Tests for the root and health endpoints."""

    def test_root(self):
        response = client.get("/")

        assert response.status_code == 200

    def test_health(self):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
