from datetime import datetime, timedelta, timezone

import pytest
import requests

from tracker.domain import ExpenseRecord, StoredExpense
from tracker.gateway import GATEWAY_ERROR, InMemoryGateway, RestGateway, from_payload, to_payload

URL = "http://api.test/api/expenses"


class FakeResponse:
    def __init__(self, data, status=200):
        self._data = data
        self.status_code = status

    def json(self):
        return self._data

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def _reply(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.exc:
            raise self.exc
        return self.response

    def post(self, url, **kwargs):
        return self._reply("POST", url, **kwargs)

    def get(self, url, **kwargs):
        return self._reply("GET", url, **kwargs)


@pytest.fixture
def record():
    return ExpenseRecord(99.5, "Food", "Dinner", datetime(2024, 8, 9, 19, 30))


def test_in_memory_gateway_assigns_ids_and_sorts(record):
    gw = InMemoryGateway()
    later = gw.create_expense(record).get_or_else(None)
    earlier = gw.create_expense(ExpenseRecord(1.0, "", "", datetime(2024, 1, 1))).get_or_else(None)

    assert later.id and earlier.id and later.id != earlier.id
    assert gw.list_expenses().get_or_else(()) == (earlier, later)


def test_payload_conversion(record):
    payload = to_payload(record)
    assert payload == {
        "amount": 99.5,
        "category": "Food",
        "description": "Dinner",
        "date": "2024-08-09T19:30:00",
    }
    stored = from_payload({**payload, "id": 7})
    assert stored == StoredExpense(99.5, "Food", "Dinner", datetime(2024, 8, 9, 19, 30), id="7")


def test_from_payload_rejects_bad_amount():
    with pytest.raises(ValueError):
        from_payload({"amount": -1, "date": "2024-01-01"})


def test_rest_create_expense(record):
    session = FakeSession(FakeResponse({**to_payload(record), "id": "1"}, status=201))
    gw = RestGateway(URL + "/", timeout=2.0, session=session)

    result = gw.create_expense(record)

    assert result.is_right()
    assert result.get_or_else(None).id == "1"
    method, url, kwargs = session.calls[0]
    assert (method, url) == ("POST", URL)
    assert kwargs["timeout"] == 2.0
    assert kwargs["json"]["amount"] == 99.5


def test_rest_list_expenses_sorted_by_date():
    rows = [
        {"id": "2", "amount": 5, "category": "b", "description": "", "date": "2024-03-01T00:00:00"},
        {"id": "1", "amount": 7, "category": "a", "description": None, "date": "2024-02-01T00:00:00"},
    ]
    gw = RestGateway(URL, session=FakeSession(FakeResponse(rows)))

    stored = gw.list_expenses().get_or_else(None)

    assert [s.id for s in stored] == ["1", "2"]
    assert stored[0].description == ""


@pytest.mark.parametrize("session", [
    FakeSession(exc=requests.ConnectionError("refused")),
    FakeSession(exc=requests.Timeout("slow")),
    FakeSession(FakeResponse({"detail": "boom"}, status=500)),
])
def test_rest_failures_become_gateway_errors(session, record):
    gw = RestGateway(URL, session=session)

    for result in (gw.create_expense(record), gw.list_expenses()):
        assert result.is_left()
        assert result.get_error()["error"] == GATEWAY_ERROR
        assert result.get_error()["url"] == URL


def test_rest_list_with_malformed_body():
    gw = RestGateway(URL, session=FakeSession(FakeResponse([{"category": "no amount"}])))
    assert gw.list_expenses().is_left()


def test_in_memory_gateway_lists_offset_and_naive_dates():
    gw = InMemoryGateway()
    gw.create_expense(ExpenseRecord(1.0, "", "", datetime(2024, 1, 15, tzinfo=timezone(timedelta(hours=5)))))
    gw.create_expense(ExpenseRecord(2.0, "", "", datetime(2024, 1, 16)))

    listed = gw.list_expenses().get_or_else(None)

    assert [e.amount for e in listed] == [1.0, 2.0]
    assert all(e.date.tzinfo is None for e in listed)
