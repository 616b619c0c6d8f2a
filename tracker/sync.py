import asyncio
import logging
from typing import Any, Mapping, Optional, Tuple

from tracker.domain import ExpenseRecord
from tracker.functional import Either
from tracker.gateway import PersistenceGateway
from tracker.state import TrackerState

logger = logging.getLogger(__name__)


async def persist_expense(gateway: PersistenceGateway, record: ExpenseRecord) -> Either:
    """Store one record without blocking the event loop.

    Cancelling the awaiting task abandons the result; the in-memory state
    is not touched either way.
    """
    return await asyncio.to_thread(gateway.create_expense, record)


def schedule_persist(gateway: PersistenceGateway, record: ExpenseRecord) -> "asyncio.Task[Either]":
    """Start storing ``record`` in the background, must be called from a running loop."""
    return asyncio.get_running_loop().create_task(persist_expense(gateway, record))


async def add_and_persist(
    state: TrackerState,
    gateway: Optional[PersistenceGateway],
    raw: Mapping[str, Any],
) -> Tuple[Either, Optional[Either]]:
    """Apply ``add_expense`` and forward the accepted record to the store.

    Returns the transition result and the store result (None when nothing
    was sent). A store failure is reported, never rolled back.
    """
    result = state.add_expense(raw)
    if result.is_left() or gateway is None:
        return result, None

    stored = await schedule_persist(gateway, result.get_or_else(None))
    if stored.is_left():
        logger.warning("expense kept in session only: %s", stored.get_error()["message"])
    return result, stored


async def restore_expenses(gateway: PersistenceGateway, state: TrackerState) -> Either:
    """Load stored records into ``state``; on failure the state stays as it was."""
    result = await asyncio.to_thread(gateway.list_expenses)
    if result.is_right():
        state.load(result.get_or_else(()))
    else:
        logger.warning("restore skipped: %s", result.get_error()["message"])
    return result
