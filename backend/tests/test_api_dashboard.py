"""Tests for dashboard API endpoints."""

from datetime import date

from onlyfunds.models.transaction import TransactionType


class TestDashboardAPI:
    """Test the monthly dashboard summary."""

    def test_summary(self, client, auth_headers, make_transaction):
        make_transaction(50, "food", on=date(2024, 6, 5))
        make_transaction(150, "shopping", on=date(2024, 6, 7))
        make_transaction(20, "food", on=date(2024, 5, 30))
        make_transaction(1000, "salary", type=TransactionType.income, on=date(2024, 6, 1))

        response = client.get("/api/v1/dashboard/summary", params={"month": 6, "year": 2024}, headers=auth_headers)
        assert response.status_code == 200
        data = response.json()

        assert data["total_income"] == 1000.0
        assert data["total_expenses"] == 200.0
        assert data["net"] == 800.0
        assert data["all_time_expenses"] == 220.0
        assert data["balance"] == 780.0
        assert [c["category"] for c in data["by_category"]] == ["shopping", "food"]
        assert data["by_category"][0]["percent"] == 75.0
        assert data["by_category"][0]["label"] == "Shopping"

    def test_recent_transactions(self, client, auth_headers, make_transaction):
        for day in range(1, 8):
            make_transaction(day, on=date(2024, 6, day))

        response = client.get(
            "/api/v1/dashboard/summary",
            params={"month": 6, "year": 2024, "recent": 3},
            headers=auth_headers
        )
        recent = response.json()["recent_transactions"]
        assert [r["date"] for r in recent] == ["2024-06-07", "2024-06-06", "2024-06-05"]

    def test_empty_month(self, client, auth_headers):
        data = client.get(
            "/api/v1/dashboard/summary",
            params={"month": 1, "year": 2020},
            headers=auth_headers
        ).json()
        assert data["total_expenses"] == 0.0
        assert data["by_category"] == []

    def test_out_of_range_year_rejected(self, client, auth_headers):
        for year in (0, 9999):
            response = client.get(
                "/api/v1/dashboard/summary",
                params={"month": 12, "year": year},
                headers=auth_headers
            )
            assert response.status_code == 422
