"""Tests for POST /api/pricing/quote."""

from core.exceptions import CatalogUnavailableError


class TestQuote:

    def test_quotes_posted_draft(self, client, draft_payload):
        """A posted draft is quoted against the catalog."""
        response = client.post("/api/pricing/quote", json=draft_payload)

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["functions"][0]["function_id"] == "wedding"
        assert data["subtotal"] == 28000
        assert data["total"] == 28000
        assert data["advance"] == 8400
        assert data["balance"] == 19600

    def test_unknown_function_quotes_zero_line(self, client, draft_payload):
        """Functions missing from the catalog quote as zero lines."""
        draft_payload["functions"][0]["function_id"] = "sangeet"

        response = client.post("/api/pricing/quote", json=draft_payload)

        assert response.status_code == 200
        line = response.json()["data"]["functions"][0]
        assert line["definition_found"] is False
        assert line["total_function_cost"] == 0

    def test_invalid_draft_is_422(self, client, draft_payload):
        """A draft that fails validation is a 422."""
        draft_payload["functions"][0]["duration"] = -3

        response = client.post("/api/pricing/quote", json=draft_payload)

        assert response.status_code == 422
        assert "duration" in response.json()["error"]["message"]

    def test_catalog_outage_is_503(self, client, catalog_service, draft_payload):
        """Quotes fail retryably while the catalog is down."""
        catalog_service.load_snapshot.side_effect = CatalogUnavailableError()

        response = client.post("/api/pricing/quote", json=draft_payload)

        assert response.status_code == 503
        assert response.json()["error"]["retryable"] is True

    def test_off_grid_album_pages_are_400(self, client, draft_payload):
        """Album pages between increments are an invalid pricing input."""
        draft_payload["album"]["pages"] = 65

        response = client.post("/api/pricing/quote", json=draft_payload)

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "INVALID_PRICING_INPUT"
        assert "got 65" in error["message"]
