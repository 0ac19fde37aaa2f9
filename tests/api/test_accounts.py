"""
Tests for the account endpoints.
"""

from decimal import Decimal


def create_account(client, **overrides):
    payload = {"user_id": "u1", "account_type": "checking"}
    payload.update(overrides)
    return client.post("/accounts", json=payload)


class TestCreateAccount:

    def test_create_account_returns_201(self, client):
        response = create_account(client)

        assert response.status_code == 201
        data = response.json()
        assert isinstance(data["account_id"], int)
        assert data["user_id"] == "u1"
        assert data["account_type"] == "checking"
        assert data["currency"] == "USD"
        assert "external_id" in data
        assert "created_at" in data
        assert "balance" not in data

    def test_create_account_with_currency(self, client):
        response = create_account(client, currency="JPY")
        assert response.json()["currency"] == "JPY"

    def test_missing_user_id(self, client):
        response = client.post("/accounts", json={"account_type": "checking"})

        assert response.status_code == 400
        data = response.json()
        assert data["code"] == "VALIDATION_ERROR"
        assert "user_id" in data["error"]

    def test_lowercase_currency(self, client):
        response = create_account(client, currency="usd")

        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"


class TestGetAccount:

    def test_get_account_with_balance(self, client):
        account_id = create_account(client).json()["account_id"]
        client.post("/transactions/deposit", json={
            "account_id": account_id, "amount": "100.50",
        })

        response = client.get(f"/accounts/{account_id}")

        assert response.status_code == 200
        data = response.json()
        assert data["account_id"] == account_id
        assert Decimal(data["balance"]) == Decimal("100.50")

    def test_new_account_balance_is_zero(self, client):
        account_id = create_account(client).json()["account_id"]
        data = client.get(f"/accounts/{account_id}").json()
        assert Decimal(data["balance"]) == Decimal("0")

    def test_unknown_account_returns_404(self, client):
        response = client.get("/accounts/999")

        assert response.status_code == 404
        assert response.json() == {
            "error": "Account 999 not found",
            "code": "NOT_FOUND",
        }


class TestAccountLedger:

    def test_ledger_lists_entries_oldest_first(self, client):
        a = create_account(client).json()["account_id"]
        b = create_account(client, user_id="u2").json()["account_id"]
        client.post("/transactions/deposit", json={"account_id": a, "amount": "100"})
        client.post("/transactions/transfer", json={
            "source_account_id": a,
            "destination_account_id": b,
            "amount": "40",
        })

        response = client.get(f"/accounts/{a}/ledger")

        assert response.status_code == 200
        entries = response.json()
        assert [e["entry_type"] for e in entries] == ["CREDIT", "DEBIT"]
        assert [Decimal(e["amount"]) for e in entries] == [
            Decimal("100"), Decimal("40"),
        ]
        assert all(isinstance(e["entry_id"], int) for e in entries)
        assert all(e["account_id"] == a for e in entries)

    def test_empty_ledger(self, client):
        account_id = create_account(client).json()["account_id"]
        response = client.get(f"/accounts/{account_id}/ledger")
        assert response.status_code == 200
        assert response.json() == []

    def test_unknown_account_ledger_returns_404(self, client):
        response = client.get("/accounts/999/ledger")
        assert response.status_code == 404
