import pytest
from datetime import datetime


class TestPropertiesApi:
    """Test cases for /api/v1/properties"""

    def test_list_active_newest_first(self, client, make_property):
        older = make_property(created_at=datetime(2024, 1, 1))
        newer = make_property(created_at=datetime(2024, 2, 1))
        make_property(status="rented")

        response = client.get("/api/v1/properties/")

        assert response.status_code == 200
        page = response.json()
        assert page["total"] == 2
        assert [p["id"] for p in page["properties"]] == [newer.id, older.id]

    def test_list_pagination(self, client, make_property):
        for _ in range(3):
            make_property()

        page = client.get("/api/v1/properties/?limit=2&offset=2").json()

        assert page["total"] == 3
        assert len(page["properties"]) == 1

    def test_limit_validation(self, client):
        assert client.get("/api/v1/properties/?limit=0").status_code == 422

    def test_get_property(self, client, make_property):
        listing = make_property(bathrooms="1.5")

        response = client.get(f"/api/v1/properties/{listing.id}")

        assert response.status_code == 200
        assert response.json()["bathrooms"] == "1.5"

    def test_get_missing_property(self, client):
        assert client.get("/api/v1/properties/missing").status_code == 404


class TestContactApi:

    def test_contact_requires_complete_profile(self, client, auth_headers, make_property):
        listing = make_property()

        response = client.post(f"/api/v1/properties/{listing.id}/contact", json={}, headers=auth_headers)

        assert response.status_code == 400
        assert "full_name" in response.json()["detail"]

    def test_contact_marks_favorite_as_contacted(self, client, auth_headers, make_property):
        listing = make_property(landlord_whatsapp="9999-8888")
        client.put("/api/v1/profiles/tenant", json={
            "full_name": "Ana",
            "phone": "3333-4444",
            "budget_min": 10000,
            "budget_max": 20000
        }, headers=auth_headers)
        client.post("/api/v1/favorites/toggle", json={"property_id": listing.id}, headers=auth_headers)

        response = client.post(
            f"/api/v1/properties/{listing.id}/contact",
            json={"use_web_version": True},
            headers=auth_headers
        )

        assert response.status_code == 200
        assert response.json()["whatsapp_url"].startswith("https://web.whatsapp.com/send?phone=50499998888&text=")

        favorites = client.get("/api/v1/favorites/", headers=auth_headers).json()
        assert favorites[0]["is_contacted"] is True

    def test_contact_missing_property(self, client, auth_headers):
        response = client.post("/api/v1/properties/missing/contact", json={}, headers=auth_headers)
        assert response.status_code == 404
