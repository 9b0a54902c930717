"""
API tests for money movement endpoints.

Tests cover:
- Deposit and withdraw
- Transfer by account number
- Business errors (400) and missing recipients (404)
- Request validation (422)
"""

import pytest
from decimal import Decimal
from fastapi.testclient import TestClient


def _open(client: TestClient, owner_id: str = "user-1", kind: str = "checking") -> dict:
    return client.post("/accounts/", json={"owner_id": owner_id, "kind": kind}).json()


@pytest.fixture
def funded_account(client: TestClient) -> dict:
    """Account with 120.00 deposited."""
    account = _open(client)
    client.post("/transactions/deposit", json={
        "account_id": account["account_id"],
        "amount": "120.00",
    })
    return account


class TestDepositAPI:
    """Tests for POST /transactions/deposit."""

    def test_deposit_success(self, client: TestClient):
        """
        GIVEN an empty account
        WHEN I deposit 100.00
        THEN response is 201 with the new balance and the record
        """
        account = _open(client)

        response = client.post("/transactions/deposit", json={
            "account_id": account["account_id"],
            "amount": "100.00",
            "description": "Paycheck",
        })

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["new_balance"]) == Decimal("100.00")
        assert data["transaction"]["kind"] == "deposit"
        assert data["transaction"]["description"] == "Paycheck"
        assert Decimal(data["transaction"]["amount"]) == Decimal("100.00")

        balance = client.get(f"/accounts/{account['account_id']}").json()["balance"]
        assert Decimal(balance) == Decimal("100.00")

    @pytest.mark.parametrize("amount", ["0", "-5.00", "1.001"])
    def test_deposit_invalid_amount_is_422(self, client: TestClient, amount: str):
        """
        GIVEN an account
        WHEN I deposit a non-positive or over-precise amount
        THEN response is 422
        """
        account = _open(client)

        response = client.post("/transactions/deposit", json={
            "account_id": account["account_id"],
            "amount": amount,
        })

        assert response.status_code == 422

    def test_deposit_unknown_account_is_404(self, client: TestClient):
        """
        GIVEN no accounts
        WHEN I deposit into an unknown account
        THEN response is 404
        """
        response = client.post("/transactions/deposit", json={"account_id": "missing", "amount": "1.00"})

        assert response.status_code == 404


class TestWithdrawAPI:
    """Tests for POST /transactions/withdraw."""

    def test_withdraw_success(self, client: TestClient, funded_account: dict):
        """
        GIVEN an account with 120.00
        WHEN I withdraw 30.00
        THEN the new balance is 90.00
        """
        response = client.post("/transactions/withdraw", json={
            "account_id": funded_account["account_id"],
            "amount": "30.00",
        })

        assert response.status_code == 201
        assert Decimal(response.json()["new_balance"]) == Decimal("90.00")
        assert response.json()["transaction"]["kind"] == "withdrawal"

    def test_withdraw_insufficient_funds_is_400(self, client: TestClient, funded_account: dict):
        """
        GIVEN an account with 120.00
        WHEN I withdraw 500.00
        THEN response is 400 INSUFFICIENT_FUNDS and the balance is unchanged
        """
        response = client.post("/transactions/withdraw", json={
            "account_id": funded_account["account_id"],
            "amount": "500.00",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "INSUFFICIENT_FUNDS"
        account = client.get(f"/accounts/{funded_account['account_id']}").json()
        assert Decimal(account["balance"]) == Decimal("120.00")


class TestTransferAPI:
    """Tests for POST /transactions/transfer."""

    def test_transfer_success(self, client: TestClient, funded_account: dict):
        """
        GIVEN A with 120.00 and B with 20.00
        WHEN A transfers 50.00 to B's account number
        THEN both end at 70.00 and the legs reference each other
        """
        b = _open(client, owner_id="user-2")
        client.post("/transactions/deposit", json={"account_id": b["account_id"], "amount": "20.00"})

        response = client.post("/transactions/transfer", json={
            "from_account_id": funded_account["account_id"],
            "to_account_number": b["account_number"],
            "amount": "50.00",
        })

        assert response.status_code == 201
        data = response.json()
        assert Decimal(data["new_balance"]) == Decimal("70.00")
        assert data["to_account_id"] == b["account_id"]
        assert data["debit_leg"]["reference_id"] == data["credit_leg"]["txn_id"]
        assert data["credit_leg"]["reference_id"] == data["debit_leg"]["txn_id"]
        assert data["debit_leg"]["description"] == f"Transfer to {b['account_number']}"

        b_balance = client.get(f"/accounts/{b['account_id']}").json()["balance"]
        assert Decimal(b_balance) == Decimal("70.00")

    def test_transfer_unknown_recipient_is_404(self, client: TestClient, funded_account: dict):
        """
        GIVEN a funded account
        WHEN I transfer to an account number that does not exist
        THEN response is 404 RECIPIENT_NOT_FOUND
        """
        response = client.post("/transactions/transfer", json={
            "from_account_id": funded_account["account_id"],
            "to_account_number": "9999999999",
            "amount": "1.00",
        })

        assert response.status_code == 404
        assert response.json()["error"] == "RECIPIENT_NOT_FOUND"

    def test_transfer_to_self_is_400(self, client: TestClient, funded_account: dict):
        """
        GIVEN a funded account
        WHEN it transfers to itself
        THEN response is 400 VALIDATION_ERROR
        """
        response = client.post("/transactions/transfer", json={
            "from_account_id": funded_account["account_id"],
            "to_account_number": funded_account["account_number"],
            "amount": "1.00",
        })

        assert response.status_code == 400
        assert response.json()["error"] == "VALIDATION_ERROR"

    def test_transfer_insufficient_funds_leaves_no_records(self, client: TestClient, funded_account: dict):
        """
        GIVEN A with 120.00 and an empty B
        WHEN A transfers 120.01
        THEN response is 400 and neither account has a transfer record
        """
        b = _open(client, owner_id="user-2")

        response = client.post("/transactions/transfer", json={
            "from_account_id": funded_account["account_id"],
            "to_account_number": b["account_number"],
            "amount": "120.01",
        })

        assert response.status_code == 400
        assert client.get(f"/accounts/{b['account_id']}/transactions").json()["count"] == 0
        history = client.get(f"/accounts/{funded_account['account_id']}/transactions").json()
        assert [t["kind"] for t in history["transactions"]] == ["deposit"]
