"""Tests for the HTTP transport."""

import pytest
from fastapi.testclient import TestClient

from app.main import app, get_router


@pytest.fixture
def client(router):
    app.dependency_overrides[get_router] = lambda: router
    yield TestClient(app)
    app.dependency_overrides.clear()


class TestHttp:
    
    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}
    
    def test_post_then_get(self, client):
        """Test the JSON append followed by a batched read."""
        posted = client.post("/", json={
            "timestamp": "15/03/2026 10:00:00",
            "vnd": 30000,
            "eur": 1.2,
            "category": "Food",
            "note": "coffee",
        })
        assert posted.json() == {"status": "success", "message": "Added to March 2026"}
        
        data = client.get("/", params={"action": "getAllData", "year": 2026, "month": 3}).json()
        assert data["status"] == "success"
        assert data["totalEUR"] == 1.2
        assert data["transactions"][0]["sheetName"] == "March 2026"
        assert data["stats"]["Food"]["percent"] == 100
    
    def test_errors_are_in_band(self, client):
        response = client.get("/", params={"action": "delete", "row": 3, "sheetName": "March 2026"})
        assert response.status_code == 200
        assert response.json() == {"status": "error", "message": "Sheet not found: March 2026"}
    
    def test_invalid_json(self, client):
        response = client.post("/", content=b"{not json", headers={"content-type": "application/json"})
        assert response.json()["status"] == "error"
    
    def test_overflowing_amount_keeps_month_readable(self, client):
        """Test a JSON entry with an exponent amount still leaves the month readable."""
        posted = client.post("/", json={"timestamp": "15/03/2026 10:00:00", "eur": "1e5000"})
        assert posted.json()["status"] == "success"
        
        data = client.get("/", params={"action": "getAllData", "year": 2026, "month": 3}).json()
        assert data["status"] == "success"
        assert data["totalEUR"] == 0
