from functools import reduce
from typing import Iterable, Tuple

import pandas as pd

from tracker.domain import ExpenseRecord

MONTH_LABELS = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)


def month_index(record: ExpenseRecord) -> int:
    # calendar month of the stored datetime as represented, January == 0
    return record.date.month - 1


def _add_to_bucket(buckets: Tuple[float, ...], record: ExpenseRecord) -> Tuple[float, ...]:
    i = month_index(record)
    return buckets[:i] + (buckets[i] + record.amount,) + buckets[i + 1:]


def monthly_totals(expenses: Iterable[ExpenseRecord]) -> Tuple[float, ...]:
    """Total spend per calendar month, 12 buckets from January to December."""
    return reduce(_add_to_bucket, expenses, (0.0,) * 12)


def monthly_frame(expenses: Iterable[ExpenseRecord], budget: float) -> pd.DataFrame:
    """Chart-ready table: one row per month with spend and the flat budget line."""
    return pd.DataFrame({
        "month": list(MONTH_LABELS),
        "expenses": list(monthly_totals(expenses)),
        "budget": [float(budget)] * 12,
    })
