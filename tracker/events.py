import logging
from datetime import datetime
from typing import Callable, Dict, List, NamedTuple

__all__ = ['EXPENSE_ADDED', 'BUDGET_SET', 'BUDGET_ALERT', 'Event', 'EventBus', 'log_budget_alert']

logger = logging.getLogger(__name__)

EXPENSE_ADDED = "EXPENSE_ADDED"
BUDGET_SET = "BUDGET_SET"
BUDGET_ALERT = "BUDGET_ALERT"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], object]


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> None:
        self._subscribers.setdefault(name, []).append(handler)

    def publish(self, name: str, payload: dict) -> List[object]:
        handlers = self._subscribers.get(name)
        if not handlers:
            return []

        event = Event(name=name, ts=datetime.now().isoformat(), payload=payload)
        logger.debug("publish %s to %d handler(s)", name, len(handlers))
        return [handler(event, payload) for handler in list(handlers)]


def log_budget_alert(event: Event, payload: dict) -> dict:
    logger.warning(
        "budget alert at %s: spent %.2f of %.2f",
        event.ts, payload["actual"], payload["budget"],
    )
    return {"alert": payload["message"], "spent": payload["actual"], "limit": payload["budget"]}
