from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class ExpenseRecord:
    amount: float        # always > 0
    category: str
    description: str
    date: datetime


@dataclass(frozen=True)
class StoredExpense(ExpenseRecord):
    id: str = ""         # assigned by the store


@dataclass(frozen=True)
class BudgetConfig:
    budget: float = 0.0
    savings_goal: float = 0.0


# Snapshot handed to the presentation layer
@dataclass(frozen=True)
class TrackerView:
    expenses: tuple[ExpenseRecord, ...]
    budget: float
    savings_goal: float
    actual: float
    advice: Optional[str]
    monthly_totals: tuple[float, ...]
    remaining_for_savings: float
    percent_spent: float
    last_expense: Optional[ExpenseRecord] = field(default=None)
