import logging
import math
from datetime import date, datetime
from numbers import Real
from typing import Any, Optional

import pandas as pd

from tracker.domain import ExpenseRecord
from tracker.functional import Either, Right, failure

logger = logging.getLogger(__name__)

INVALID_AMOUNT = "invalid_amount"
INVALID_BUDGET = "invalid_budget"
INVALID_GOAL = "invalid_goal"


def parse_positive(raw: Any) -> Optional[float]:
    """Parse a form value into a finite float > 0, or None."""
    if raw is None or isinstance(raw, bool):
        return None
    try:
        value = float(raw.strip() if isinstance(raw, str) else raw)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(value) or value <= 0:
        return None
    return value


def parse_date(raw: Any, now: Optional[datetime] = None) -> datetime:
    """Lenient date parsing: anything missing or unreadable becomes ``now``.

    Dates are kept as naive local wall-clock time; values carrying an offset
    are converted to local time first.
    """
    fallback = now if now is not None else datetime.now()
    if raw is None or isinstance(raw, bool) or (isinstance(raw, str) and not raw.strip()):
        return fallback
    if not isinstance(raw, (str, date, Real)):
        logger.debug("unsupported date %r, using %s", raw, fallback)
        return fallback
    if isinstance(raw, datetime) and raw.tzinfo is None:
        return raw

    try:
        ts = pd.to_datetime(raw, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        ts = pd.NaT
    if pd.isna(ts):
        logger.debug("unreadable date %r, using %s", raw, fallback)
        return fallback

    parsed = ts.to_pydatetime()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def _amount(raw: Any) -> Either[dict, float]:
    amount = parse_positive(raw)
    if amount is None:
        return failure(
            INVALID_AMOUNT,
            f"Amount must be a number greater than zero, got {raw!r}",
            amount=raw,
        )
    return Right(amount)


def normalize(
    raw_amount: Any,
    raw_category: Any = "",
    raw_description: Any = "",
    raw_date: Any = None,
    now: Optional[datetime] = None,
) -> Either[dict, ExpenseRecord]:
    return _amount(raw_amount).map(lambda amount: ExpenseRecord(
        amount=amount,
        category=_text(raw_category),
        description=_text(raw_description),
        date=parse_date(raw_date, now),
    ))


def _text(raw: Any) -> str:
    return "" if raw is None else str(raw).strip()
