"""Persistence sink for expense records.

The tracker never needs a gateway to compute its derived values; stores are
written to on a best-effort basis and read once to restore a session.
"""
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests

from tracker.domain import ExpenseRecord, StoredExpense
from tracker.functional import Either, Right, failure
from tracker.validation import parse_date, parse_positive

logger = logging.getLogger(__name__)

GATEWAY_ERROR = "gateway_error"


class PersistenceGateway(ABC):

    @abstractmethod
    def create_expense(self, record: ExpenseRecord) -> Either[dict, StoredExpense]:
        pass

    @abstractmethod
    def list_expenses(self) -> Either[dict, Tuple[StoredExpense, ...]]:
        pass


class InMemoryGateway(PersistenceGateway):
    """Process-local store, used offline and in tests."""

    def __init__(self):
        self._rows: List[StoredExpense] = []

    def create_expense(self, record: ExpenseRecord) -> Either[dict, StoredExpense]:
        stored = StoredExpense(
            amount=record.amount,
            category=record.category,
            description=record.description,
            date=parse_date(record.date),
            id=uuid.uuid4().hex,
        )
        self._rows.append(stored)
        return Right(stored)

    def list_expenses(self) -> Either[dict, Tuple[StoredExpense, ...]]:
        return Right(tuple(sorted(self._rows, key=lambda e: e.date)))


class RestGateway(PersistenceGateway):
    """Talks to the ``/api/expenses`` endpoint of the backend."""

    def __init__(self, base_url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_expense(self, record: ExpenseRecord) -> Either[dict, StoredExpense]:
        try:
            r = self.session.post(self.base_url, json=to_payload(record), timeout=self.timeout)
            r.raise_for_status()
            stored = from_payload(r.json())
        except (requests.RequestException, ValueError, KeyError) as e:
            logger.warning("POST %s failed: %s", self.base_url, e)
            return failure(GATEWAY_ERROR, f"Could not store expense: {e}", url=self.base_url)

        logger.info("stored expense %s (%.2f)", stored.id, stored.amount)
        return Right(stored)

    def list_expenses(self) -> Either[dict, Tuple[StoredExpense, ...]]:
        try:
            r = self.session.get(self.base_url, timeout=self.timeout)
            r.raise_for_status()
            rows = tuple(from_payload(item) for item in r.json())
        except (requests.RequestException, ValueError, KeyError, TypeError) as e:
            logger.warning("GET %s failed: %s", self.base_url, e)
            return failure(GATEWAY_ERROR, f"Could not load expenses: {e}", url=self.base_url)

        logger.info("fetched %d expense(s)", len(rows))
        return Right(tuple(sorted(rows, key=lambda e: e.date)))


def to_payload(record: ExpenseRecord) -> Dict[str, Any]:
    return {
        "amount": record.amount,
        "category": record.category,
        "description": record.description,
        "date": record.date.isoformat(),
    }


def from_payload(data: Dict[str, Any]) -> StoredExpense:
    amount = parse_positive(data["amount"])
    if amount is None:
        raise ValueError(f"stored expense has invalid amount {data['amount']!r}")
    return StoredExpense(
        amount=amount,
        category=data.get("category") or "",
        description=data.get("description") or "",
        date=parse_date(data.get("date")),
        id=str(data.get("id", "")),
    )
