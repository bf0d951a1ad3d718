"""Integration tests for the API endpoints."""

import pytest
from fastapi.testclient import TestClient
from aimai_search.core.engine import SearchEngine
from aimai_search.engine_instance import get_search_engine
from aimai_search.main import app
from tests.conftest import FakeReadingProvider


class TestAPI:
    """Integration tests for API endpoints."""

    @pytest.fixture
    def engine(self, tokyo_corpus, reading_provider):
        """Engine served by the app under test."""
        return SearchEngine.from_records(tokyo_corpus, reading_provider=reading_provider)

    @pytest.fixture
    def client(self, engine):
        """Create a test client bound to the test engine."""
        app.dependency_overrides[get_search_engine] = lambda: engine
        yield TestClient(app)
        app.dependency_overrides.clear()

    def test_root_endpoint(self, client):
        """Test the root endpoint."""
        response = client.get("/")
        assert response.status_code == 200

        data = response.json()
        assert data["name"] == "Aimai Search"
        assert data["version"] == "1.0.0"
        assert data["status"] == "running"
        assert "search" in data["endpoints"]

    def test_search(self, client):
        """Test script variants are returned best first."""
        response = client.get("/api/v1/search", params={"q": "とうきょう"})
        assert response.status_code == 200

        data = response.json()
        assert data["query"] == "とうきょう"
        assert data["total_results"] == 3
        assert [r["item"] for r in data["results"]] == ["とうきょう", "東京", "トウキョウ"]
        assert [r["ref_index"] for r in data["results"]] == [1, 0, 2]
        assert data["results"][0]["score"] == 1.0
        assert data["execution_time_ms"] >= 0

    def test_search_romaji(self, client):
        """Test romaji queries over HTTP."""
        response = client.get("/api/v1/search", params={"q": "tokyo"})
        assert response.status_code == 200
        assert response.json()["total_results"] == 3

    def test_search_with_parameters(self, client):
        """Test per-request overrides."""
        response = client.get(
            "/api/v1/search",
            params={"q": "とうきょう", "limit": 1, "include_score": "false"},
        )
        assert response.status_code == 200

        data = response.json()
        assert data["total_results"] == 1
        assert "score" not in data["results"][0]

    def test_search_with_threshold(self, client):
        """Test a lower threshold admits weaker matches."""
        response = client.get("/api/v1/search", params={"q": "とうきょう", "threshold": 0.3})
        assert response.status_code == 200
        assert response.json()["total_results"] == 4

    def test_search_no_match(self, client):
        """Test search with no matches."""
        response = client.get("/api/v1/search", params={"q": "さっぽろ"})
        assert response.status_code == 200

        data = response.json()
        assert data["total_results"] == 0
        assert data["results"] == []

    def test_search_validation(self, client):
        """Test invalid query parameters are rejected."""
        assert client.get("/api/v1/search").status_code == 422
        assert client.get("/api/v1/search", params={"q": ""}).status_code == 422
        assert client.get("/api/v1/search", params={"q": "東京", "threshold": 1.5}).status_code == 422
        assert client.get("/api/v1/search", params={"q": "東京", "limit": -1}).status_code == 422

    def test_query_too_long(self, client):
        """Test overly long queries are refused."""
        response = client.get("/api/v1/search", params={"q": "あ" * 101})
        assert response.status_code == 400

    def test_post_search(self, client):
        """Test search with a request body."""
        response = client.post("/api/v1/search", json={"query": "とうきょう", "limit": 2})
        assert response.status_code == 200

        data = response.json()
        assert data["total_results"] == 2
        assert data["results"][0]["item"] == "とうきょう"

    def test_post_search_validation(self, client):
        """Test invalid request bodies are rejected."""
        assert client.post("/api/v1/search", json={"query": "   "}).status_code == 422
        assert client.post("/api/v1/search", json={"query": "東京", "threshold": 2}).status_code == 422

    def test_provider_failure(self, tokyo_corpus):
        """Test reading provider failures surface as 503."""
        engine = SearchEngine.from_records(
            tokyo_corpus, reading_provider=FakeReadingProvider(fail_on="東京")
        )
        app.dependency_overrides[get_search_engine] = lambda: engine
        try:
            response = TestClient(app).get("/api/v1/search", params={"q": "とうきょう"})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 503
        assert engine.state == "pending"

    def test_index_status_and_build(self, client):
        """Test the index reports pending until built."""
        response = client.get("/api/v1/index/status")
        assert response.status_code == 200
        assert response.json()["state"] == "pending"
        assert response.json()["total_records"] == 4

        response = client.post("/api/v1/index/build")
        assert response.status_code == 200
        assert response.json()["state"] == "built"
        assert response.json()["execution_time_ms"] is not None

    def test_export_index(self, client):
        """Test the exported index uses the persistence field names."""
        response = client.get("/api/v1/index")
        assert response.status_code == 200

        data = response.json()
        assert len(data) == 4
        assert data[0] == {
            "original": "東京",
            "normalizedText": "東京",
            "normalizedReading": "とうきょう",
        }

    def test_replace_records(self, client):
        """Test records can be replaced over HTTP."""
        response = client.put("/api/v1/records", json={"records": ["大阪", {"name": "京都"}]})
        assert response.status_code == 200
        assert response.json()["state"] == "built"
        assert response.json()["total_records"] == 2

        response = client.get("/api/v1/search", params={"q": "おおさか"})
        assert [r["item"] for r in response.json()["results"]] == ["大阪"]

    def test_health_endpoints(self, client):
        """Test health, readiness and liveness."""
        response = client.get("/api/v1/health")
        assert response.status_code == 200
        assert response.json()["status"] == "degraded"
        assert response.json()["dependencies"]["index"] == "pending"

        assert client.get("/api/v1/health/ready").status_code == 503
        assert client.get("/api/v1/health/live").status_code == 200

        client.post("/api/v1/index/build")

        assert client.get("/api/v1/health").json()["status"] == "healthy"
        assert client.get("/api/v1/health/ready").status_code == 200

    def test_metrics(self, client):
        """Test query statistics are exposed."""
        client.get("/api/v1/search", params={"q": "とうきょう"})
        client.get("/api/v1/search", params={"q": "さっぽろ"})

        response = client.get("/api/v1/metrics")
        assert response.status_code == 200

        data = response.json()
        assert data["total_queries"] == 2
        assert data["empty_results"] == 1
        assert data["index_state"] == "built"
        assert data["total_records"] == 4
        assert data["memory_usage_mb"] > 0
