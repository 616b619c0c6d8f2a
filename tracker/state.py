import logging
from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional

from tracker.aggregate import monthly_totals
from tracker.budget import advise, percent_spent, remaining_for_savings
from tracker.domain import BudgetConfig, ExpenseRecord, TrackerView
from tracker.events import BUDGET_ALERT, BUDGET_SET, EXPENSE_ADDED, EventBus
from tracker.functional import Either
from tracker.validation import INVALID_BUDGET, INVALID_GOAL, normalize, parse_positive

logger = logging.getLogger(__name__)


class TrackerState:
    """Session state of the tracker.

    Two actions change it: ``add_expense`` and ``set_budget_and_goal``.
    ``actual`` and ``advice`` are derived and refreshed after each action;
    monthly totals are only computed when ``view()`` is called.
    """

    def __init__(self, bus: Optional[EventBus] = None):
        self.bus = bus if bus is not None else EventBus()
        self._expenses: tuple[ExpenseRecord, ...] = ()
        self._config = BudgetConfig()
        self._actual = 0.0
        self._advice: Optional[str] = None

    @property
    def expenses(self) -> tuple[ExpenseRecord, ...]:
        return self._expenses

    @property
    def config(self) -> BudgetConfig:
        return self._config

    @property
    def budget(self) -> float:
        return self._config.budget

    @property
    def savings_goal(self) -> float:
        return self._config.savings_goal

    @property
    def actual(self) -> float:
        return self._actual

    @property
    def advice(self) -> Optional[str]:
        return self._advice

    def add_expense(self, raw: Mapping[str, Any]) -> Either[dict, ExpenseRecord]:
        result = normalize(
            raw.get("amount"),
            raw.get("category", ""),
            raw.get("description", ""),
            raw.get("date"),
        )
        if result.is_left():
            logger.warning("expense refused: %s", result.get_error()["message"])
            return result

        record = result.get_or_else(None)
        self._append(record)
        self.bus.publish(EXPENSE_ADDED, {"record": record, "actual": self._actual})
        return result

    def load(self, records: Iterable[ExpenseRecord]) -> int:
        """Append records that were already validated, e.g. by the store."""
        count = 0
        for record in records:
            self._append(record)
            count += 1
        logger.info("loaded %d stored expense(s)", count)
        return count

    def set_budget_and_goal(self, raw_budget: Any, raw_goal: Any) -> List[dict]:
        """Assign each field that parses to a finite value > 0.

        Fields are validated independently; the returned list holds one error
        dict per ignored field.
        """
        errors: List[dict] = []
        budget = parse_positive(raw_budget)
        goal = parse_positive(raw_goal)

        if budget is None:
            errors.append({"error": INVALID_BUDGET, "message": f"Budget ignored: {raw_budget!r}", "budget": raw_budget})
        else:
            self._config = replace(self._config, budget=budget)

        if goal is None:
            errors.append({"error": INVALID_GOAL, "message": f"Savings goal ignored: {raw_goal!r}", "savings_goal": raw_goal})
        else:
            self._config = replace(self._config, savings_goal=goal)

        self._refresh_advice()
        self.bus.publish(BUDGET_SET, {"budget": self.budget, "savings_goal": self.savings_goal})
        return errors

    def view(self) -> TrackerView:
        return TrackerView(
            expenses=self._expenses,
            budget=self.budget,
            savings_goal=self.savings_goal,
            actual=self._actual,
            advice=self._advice,
            monthly_totals=monthly_totals(self._expenses),
            remaining_for_savings=remaining_for_savings(self.budget, self._actual, self.savings_goal),
            percent_spent=percent_spent(self._actual, self.budget),
            last_expense=self._expenses[-1] if self._expenses else None,
        )

    def _append(self, record: ExpenseRecord) -> None:
        self._expenses = self._expenses + (record,)
        self._actual += record.amount
        logger.debug("expense %.2f %r added, actual=%.2f", record.amount, record.category, self._actual)
        self._refresh_advice()

    def _refresh_advice(self) -> None:
        previous = self._advice
        self._advice = advise(self._actual, self.budget)
        if self._advice is not None and previous is None:
            self.bus.publish(BUDGET_ALERT, {"message": self._advice, "actual": self._actual, "budget": self.budget})
