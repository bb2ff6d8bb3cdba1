"""Tests for the REST API with a scripted orchestrator."""

import pytest
from fastapi.testclient import TestClient

import api
from record_search import SearchOrchestrator
from record_search.core.errors import CollaboratorError
from record_search.core.models import SearchConfig

from fakes import FakeTextGenerator

NYC_PLAN = {"filters": [{"field": "city", "operator": "=", "value": "NYC"}]}


@pytest.fixture
def client_for():
    def _client(plan_script, summary_script=None):
        generator = FakeTextGenerator(plan_script, summary_script)
        orchestrator = SearchOrchestrator(generator, SearchConfig(backoff_base_seconds=0))
        api.app.dependency_overrides[api.get_orchestrator] = lambda: orchestrator
        return TestClient(api.app)

    yield _client
    api.app.dependency_overrides.clear()


class TestAPI:
    def test_health(self, client_for):
        response = client_for([]).get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_search(self, client_for, people):
        client = client_for([NYC_PLAN], [{"answer": "John.", "insights": ["one"], "stats": {"n": 1}}])
        response = client.post("/search", json={"query": "people in NYC", "records": people})

        assert response.status_code == 200
        body = response.json()
        assert body["answer"] == "John."
        assert body["matchingRecords"] == [people[0]]
        assert body["totalMatches"] == 1
        assert body["metadata"]["plan"]["sortOrder"] == "desc"

    def test_search_raw(self, client_for, people):
        client = client_for([NYC_PLAN])
        response = client.post("/search/raw", json={"query": "people in NYC", "records": people})

        assert response.status_code == 200
        assert response.json() == {"query": "people in NYC", "matchingRecords": [people[0]], "totalMatches": 1}

    def test_blank_query_is_bad_request(self, client_for, people):
        response = client_for([NYC_PLAN]).post("/search", json={"query": "  ", "records": people})
        assert response.status_code == 400

    def test_collaborator_failure_is_bad_gateway(self, client_for, people):
        client = client_for([CollaboratorError("authentication failed")])
        response = client.post("/search", json={"query": "people in NYC", "records": people})
        assert response.status_code == 502
        assert "authentication failed" in response.json()["detail"]

    def test_invalid_limit_is_rejected(self, client_for, people):
        response = client_for([NYC_PLAN]).post("/search", json={"query": "q", "records": people, "limit": 0})
        assert response.status_code == 422
