"""
Test cases for the search API endpoints.
"""

import pytest
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from sparos.core.config import Settings
from sparos.features.search.dependencies import get_search_pipeline
from sparos.features.search.models import PipelineState, SearchJob
from sparos.features.search.orchestrator import SearchPipeline
from sparos.main import create_app


@pytest.fixture
def app():
    return create_app(
        Settings(bungie_api_key="test_api_key", restore_job_on_startup=False)
    )


@pytest.fixture
def mock_pipeline():
    pipeline = MagicMock(spec=SearchPipeline)
    pipeline.state = PipelineState(
        running=True, job=SearchJob(query="Guardian#0042", token=1)
    )
    return pipeline


class TestSearchAPI:
    """Test class for search API endpoints."""

    def test_submit_search_returns_accepted(self, app, mock_pipeline):
        app.dependency_overrides[get_search_pipeline] = lambda: mock_pipeline

        with TestClient(app) as client:
            response = client.post("/api/v1/search", json={"query": "Guardian#0042"})

        assert response.status_code == 202
        data = response.json()
        assert data["running"] is True
        assert data["job"]["query"] == "Guardian#0042"
        mock_pipeline.submit.assert_called_once_with("Guardian#0042")

    def test_submit_search_requires_query(self, app, mock_pipeline):
        app.dependency_overrides[get_search_pipeline] = lambda: mock_pipeline

        with TestClient(app) as client:
            response = client.post("/api/v1/search", json={})

        assert response.status_code == 422
        mock_pipeline.submit.assert_not_called()

    def test_get_state(self, app, mock_pipeline):
        app.dependency_overrides[get_search_pipeline] = lambda: mock_pipeline

        with TestClient(app) as client:
            response = client.get("/api/v1/search/state")

        assert response.status_code == 200
        assert response.json()["job"]["token"] == 1

    def test_cancel(self, app, mock_pipeline):
        app.dependency_overrides[get_search_pipeline] = lambda: mock_pipeline

        with TestClient(app) as client:
            response = client.post("/api/v1/search/cancel")

        assert response.status_code == 200
        mock_pipeline.cancel.assert_called_once_with()

    def test_state_before_any_search(self, app):
        """Lifespan builds the real pipeline; nothing is running yet"""
        with TestClient(app) as client:
            response = client.get("/api/v1/search/state")

        assert response.status_code == 200
        assert response.json() == {
            "running": False,
            "error": None,
            "job": None,
            "account": None,
            "memberships": None,
        }

    def test_health_check(self, app):
        with TestClient(app) as client:
            response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
