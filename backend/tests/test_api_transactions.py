"""Tests for transactions API endpoints."""

from datetime import date
from decimal import Decimal

from onlyfunds.models.transaction import TransactionType


def expense_payload(**overrides):
    payload = {
        "type": "expense",
        "amount": "42.50",
        "description": "Groceries",
        "category": "food",
        "date": "2024-06-05",
    }
    payload.update(overrides)
    return payload


class TestTransactionsAPI:
    """Test transactions endpoints."""

    def test_list_transactions_empty(self, client, auth_headers):
        """Should return empty list."""
        response = client.get("/api/v1/transactions", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total"] == 0

    def test_requires_identity(self, client):
        assert client.get("/api/v1/transactions").status_code == 401

    def test_add_transaction(self, client, auth_headers, sample_user):
        response = client.post("/api/v1/transactions", json=expense_payload(), headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["user_id"] == sample_user.id
        assert data["category"] == "food"
        assert Decimal(data["amount"]) == Decimal("42.50")
        assert data["date"] == "2024-06-05"

    def test_add_custom_category(self, client, auth_headers):
        """A custom category is stored as its plain name."""
        response = client.post(
            "/api/v1/transactions",
            json=expense_payload(category={"custom": "Pet supplies"}),
            headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["category"] == "Pet supplies"

    def test_category_must_match_type(self, client, auth_headers):
        response = client.post(
            "/api/v1/transactions",
            json=expense_payload(type="income", category="food"),
            headers=auth_headers
        )
        assert response.status_code == 422

    def test_amount_must_be_positive(self, client, auth_headers):
        response = client.post("/api/v1/transactions", json=expense_payload(amount="0"), headers=auth_headers)
        assert response.status_code == 422

    def test_list_filter_and_sort(self, client, auth_headers, make_transaction):
        make_transaction(10, on=date(2024, 6, 1))
        make_transaction(30, on=date(2024, 6, 2))
        make_transaction(2000, category="salary", type=TransactionType.income, on=date(2024, 6, 3))

        response = client.get(
            "/api/v1/transactions",
            params={"type": "expense", "sort": "amount_desc"},
            headers=auth_headers
        )
        data = response.json()
        assert data["total"] == 2
        assert [Decimal(t["amount"]) for t in data["items"]] == [Decimal("30"), Decimal("10")]

    def test_get_transaction(self, client, auth_headers, make_transaction):
        txn = make_transaction(10)
        response = client.get(f"/api/v1/transactions/{txn.id}", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["id"] == txn.id

    def test_get_missing_transaction(self, client, auth_headers):
        assert client.get("/api/v1/transactions/missing", headers=auth_headers).status_code == 404

    def test_delete_transaction(self, client, auth_headers, make_transaction):
        txn = make_transaction(10)
        response = client.delete(f"/api/v1/transactions/{txn.id}", headers=auth_headers)
        assert response.status_code == 204
        assert client.get(f"/api/v1/transactions/{txn.id}", headers=auth_headers).status_code == 404

    def test_add_expense_refreshes_progress(self, client, auth_headers, sample_user, make_budget, progress_store):
        """Recording an expense recomputes progress for its month."""
        make_budget(100, "food", 6, 2024)
        client.post("/api/v1/transactions", json=expense_payload(amount="25"), headers=auth_headers)

        snapshot = progress_store.get((sample_user.id, 6, 2024))
        assert snapshot[0].spent_amount == Decimal("25")

    def test_delete_expense_refreshes_progress(self, client, auth_headers, sample_user, make_budget, make_transaction, progress_store):
        make_budget(100, "food", 6, 2024)
        txn = make_transaction(40)
        client.delete(f"/api/v1/transactions/{txn.id}", headers=auth_headers)

        snapshot = progress_store.get((sample_user.id, 6, 2024))
        assert snapshot[0].spent_amount == 0
