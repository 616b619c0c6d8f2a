import pytest
from fastapi.testclient import TestClient

from app.server import create_app
from tracker.gateway import RestGateway
from tracker.domain import ExpenseRecord
from datetime import datetime


@pytest.fixture
def client(tmp_path):
    app = create_app(f"sqlite:///{tmp_path / 'expenses.db'}")
    with TestClient(app) as c:
        yield c


def test_create_and_list_expenses(client):
    r = client.post("/api/expenses", json={
        "amount": 100, "category": "Food", "description": "Groceries", "date": "2024-01-15T10:00:00",
    })
    assert r.status_code == 201
    body = r.json()
    assert body["id"]
    assert body["amount"] == 100
    assert body["date"].startswith("2024-01-15")

    client.post("/api/expenses", json={"amount": 20, "category": "Bus", "date": "2023-12-01T08:00:00"})

    rows = client.get("/api/expenses").json()
    assert [row["category"] for row in rows] == ["Bus", "Food"]


def test_date_defaults_when_omitted(client):
    r = client.post("/api/expenses", json={"amount": 5, "category": "Coffee"})
    assert r.status_code == 201
    assert r.json()["date"]
    assert r.json()["description"] == ""


def test_rejects_non_positive_amount(client):
    assert client.post("/api/expenses", json={"amount": -5, "category": "x"}).status_code == 422
    assert client.get("/api/expenses").json() == []


def test_rest_gateway_against_backend(client):
    gw = RestGateway("http://testserver/api/expenses", session=client)
    record = ExpenseRecord(42.0, "Books", "Novel", datetime(2024, 5, 5, 12, 0))

    stored = gw.create_expense(record).get_or_else(None)

    assert stored.amount == 42.0
    assert stored.date == datetime(2024, 5, 5, 12, 0)
    assert gw.list_expenses().get_or_else(()) == (stored,)
