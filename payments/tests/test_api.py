import pytest
from fastapi.testclient import TestClient

from payments import api
from payments.service import LedgerService


@pytest.fixture
def client(monkeypatch) -> TestClient:
    monkeypatch.setattr(api, "ledger_service", LedgerService())
    with TestClient(api.app) as test_client:
        yield test_client


def submit(client: TestClient, kind: str, user: int, tx: int, amount=None):
    body = {"type": kind, "client": user, "tx": tx}
    if amount is not None:
        body["amount"] = amount
    return client.post("/transactions", json=body)


def test_health(client: TestClient) -> None:
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_deposit_and_dispute(client: TestClient) -> None:
    assert submit(client, "deposit", 1, 1, "100.0").status_code == 202
    assert submit(client, "dispute", 1, 1).status_code == 202

    response = client.get("/accounts/1")
    assert response.status_code == 200
    assert response.json() == {
        "client": 1,
        "available": "0.0000",
        "held": "100.0000",
        "total": "100.0000",
        "locked": False,
    }


def test_inapplicable_transaction_is_accepted(client: TestClient) -> None:
    submit(client, "deposit", 1, 1, "1.0")

    response = submit(client, "withdrawal", 1, 2, "5.0")

    assert response.status_code == 202
    assert client.get("/accounts/1").json()["available"] == "1.0000"


def test_invalid_transaction_rejected(client: TestClient) -> None:
    response = submit(client, "deposit", 1, 1, "1.23456")
    assert response.status_code == 400

    response = submit(client, "refund", 1, 1, "1.0")
    assert response.status_code == 400

    assert client.get("/accounts").json() == []


def test_list_accounts_sorted(client: TestClient) -> None:
    submit(client, "deposit", 5, 1, "2.0")
    submit(client, "deposit", 2, 2, "3.5")

    rows = client.get("/accounts").json()

    assert [row["client"] for row in rows] == [2, 5]
    assert rows[0]["total"] == "3.5000"


def test_unknown_account(client: TestClient) -> None:
    response = client.get("/accounts/42")
    assert response.status_code == 404
