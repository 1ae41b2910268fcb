import pytest
from app.core.auth import AuthService
from app.core.config import settings


@pytest.fixture
def search_payload():
    return {
        "profile_name": "Near the office",
        "criteria": {
            "budget_min": 10000,
            "budget_max": 15000,
            "bedrooms": {"min": 2},
            "amenities": ["parking", "gym"]
        }
    }


class TestSavedSearchesApi:
    """Test cases for /api/v1/saved-searches"""

    def test_create_and_list(self, client, auth_headers, search_payload, user_id):
        response = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers)

        assert response.status_code == 201
        created = response.json()
        assert created["user_id"] == user_id
        assert created["criteria"]["bedrooms"] == {"min": 2, "max": None}

        listed = client.get("/api/v1/saved-searches/", headers=auth_headers).json()
        assert [s["id"] for s in listed] == [created["id"]]

    def test_inverted_budget_rejected(self, client, auth_headers, search_payload):
        search_payload["criteria"]["budget_min"] = 15000
        search_payload["criteria"]["budget_max"] = 10000

        response = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers)

        assert response.status_code == 422
        assert client.get("/api/v1/saved-searches/", headers=auth_headers).json() == []

    def test_short_name_rejected(self, client, auth_headers, search_payload):
        search_payload["profile_name"] = "ab"
        response = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers)
        assert response.status_code == 400

    def test_limit_reached(self, client, auth_headers, search_payload, monkeypatch):
        monkeypatch.setattr(settings, "MAX_SAVED_SEARCHES_PER_USER", 1)

        assert client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers).status_code == 201
        response = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers)

        assert response.status_code == 400
        assert "limit" in response.json()["detail"]

    def test_get_update_delete(self, client, auth_headers, search_payload):
        search_id = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers).json()["id"]

        response = client.put(
            f"/api/v1/saved-searches/{search_id}",
            json={"profile_name": "Renamed search"},
            headers=auth_headers
        )
        assert response.status_code == 200
        assert response.json()["profile_name"] == "Renamed search"
        assert response.json()["criteria"]["budget_max"] == 15000

        assert client.delete(f"/api/v1/saved-searches/{search_id}", headers=auth_headers).status_code == 200
        assert client.get(f"/api/v1/saved-searches/{search_id}", headers=auth_headers).status_code == 404

    def test_other_users_search_not_found(self, client, auth_headers, search_payload):
        search_id = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers).json()["id"]
        other = {"Authorization": f"Bearer {AuthService.create_access_token({'sub': 'someone-else'})}"}

        assert client.get(f"/api/v1/saved-searches/{search_id}", headers=other).status_code == 404
        assert client.delete(f"/api/v1/saved-searches/{search_id}", headers=other).status_code == 404

    def test_toggle_and_execute(self, client, auth_headers, search_payload, make_property):
        matching = make_property(price_amount=12000, bedrooms=2, amenities=["parking"])
        make_property(price_amount=12000, bedrooms=2, amenities=["pool"])
        search_id = client.post("/api/v1/saved-searches/", json=search_payload, headers=auth_headers).json()["id"]

        toggled = client.post(f"/api/v1/saved-searches/{search_id}/toggle", headers=auth_headers).json()
        assert toggled["is_active"] is False

        response = client.post(f"/api/v1/saved-searches/{search_id}/execute", headers=auth_headers)
        assert response.status_code == 200
        assert [p["id"] for p in response.json()] == [matching.id]

        summary = client.get("/api/v1/saved-searches/summary", headers=auth_headers).json()
        assert summary == {"total_searches": 1, "active_searches": 0, "total_new_matches": 0}

    def test_execute_missing_search(self, client, auth_headers):
        response = client.post("/api/v1/saved-searches/missing/execute", headers=auth_headers)
        assert response.status_code == 404
