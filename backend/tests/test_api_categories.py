"""Tests for categories API endpoints."""


class TestCategoriesAPI:
    """Test category catalogue endpoint."""

    def test_list_categories(self, client):
        response = client.get("/api/v1/categories")
        assert response.status_code == 200
        data = response.json()
        assert {"value": "transportation", "label": "Transportation"} in data["expense"]
        assert {"value": "freelance", "label": "Freelance"} in data["income"]
