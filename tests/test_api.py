"""
API endpoint tests for the column alignment service.

Run with: pytest tests/test_api.py -v
"""

import pytest
from fastapi.testclient import TestClient

from main import app

from conftest import document, even_section, scenario_a_document, slow_converging_section, uneven_section


@pytest.fixture
def client():
    """Create test client."""
    return TestClient(app)


class TestHealthEndpoint:

    def test_root_returns_200(self, client):
        response = client.get("/")
        assert response.status_code == 200
        assert "features" in response.json()

    def test_health_returns_status(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestAlignColumnsEndpoint:

    def test_balances_scenario_a(self, client):
        payload = {"document": scenario_a_document().model_dump()}

        response = client.post("/align-columns", json=payload)

        assert response.status_code == 200
        data = response.json()
        outcome = data["report"]["outcomes"][0]
        assert outcome["status"] == "balanced"
        column = data["document"]["pages"][0]["sections"][0]["columns"][0]
        assert [p["space_after"] for p in column] == [10.0, 10.0, 0.0]

    def test_custom_cap(self, client):
        payload = {
            "document": document([uneven_section()]).model_dump(),
            "options": {"max_space_after": 12},
        }

        response = client.post("/align-columns", json=payload)

        column = response.json()["document"]["pages"][0]["sections"][0]["columns"][0]
        assert max(p["space_after"] for p in column) == 12

    def test_recompute_cycles_cannot_be_raised(self, client):
        payload = {
            "document": document([slow_converging_section()]).model_dump(),
            "options": {"max_space_after": 40, "max_iterations": 50},
        }

        response = client.post("/align-columns", json=payload)

        assert response.status_code == 200
        balance = response.json()["report"]["outcomes"][0]["balance"]
        assert balance["recomputes"] == 5
        assert balance["stop_reason"] == "iteration-limit"

    def test_rejects_invalid_document(self, client):
        response = client.post("/align-columns", json={"document": {"pages": []}})
        assert response.status_code == 422


class TestFindUnevenColumnsEndpoint:

    def test_finds_section(self, client):
        payload = {"document": document([even_section()], [uneven_section()]).model_dump()}

        response = client.post("/find-uneven-columns", json=payload)

        assert response.status_code == 200
        data = response.json()
        assert data["found"] is True
        assert data["page_number"] == 2

    def test_reports_nothing_found(self, client):
        payload = {
            "document": document([even_section()], [even_section()]).model_dump(),
            "selection_start": 500,
            "wraparound": True,
        }

        response = client.post("/find-uneven-columns", json=payload)

        data = response.json()
        assert data["found"] is False
        assert data["passes"] == 2
