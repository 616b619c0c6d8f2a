from typing import Optional

ADVICE_THRESHOLD = 0.9
LOW_BUDGET_ADVICE = "Only 10% of your budget is left. Time to cut back on spending!"


def advise(actual: float, budget: float) -> Optional[str]:
    """Advisory message once spend reaches 90% of the budget.

    Disabled while no budget is set. Evaluated from scratch each time, so the
    message disappears again if the budget is raised above the threshold.
    """
    if budget <= 0:
        return None
    if actual >= budget * ADVICE_THRESHOLD:
        return LOW_BUDGET_ADVICE
    return None


def remaining_for_savings(budget: float, actual: float, savings_goal: float) -> float:
    # clamped at zero, a shortfall is not reported
    return max(0.0, budget - actual - savings_goal)


def percent_spent(actual: float, budget: float) -> float:
    if budget <= 0:
        return 0.0
    return min(actual / budget * 100, 100.0)
