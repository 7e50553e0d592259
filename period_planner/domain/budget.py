"""50/30/20 budget classification of projected expenses"""

from decimal import Decimal
from typing import Iterable, Optional

from period_planner.domain.models import BudgetAnalysis, BudgetBucket, BudgetType, Category, PlanningPolicy


def classify_expenses(
    expenses: Iterable[tuple[Decimal, Optional[Category]]],
    total_income: Decimal,
    policy: PlanningPolicy,
) -> BudgetAnalysis:
    """
    Sum projected expenses per budget bucket and compare with the ideal split.

    Expenses whose category is missing or has no budget type are reported as
    `unclassified` and stay out of the three buckets.
    """
    projected = {budget_type: Decimal("0") for budget_type in BudgetType}
    unclassified = Decimal("0")

    for amount, category in expenses:
        budget_type = category.budget_type if category is not None else None
        if budget_type is None:
            unclassified += amount
        else:
            projected[budget_type] += amount

    return BudgetAnalysis(
        needs=BudgetBucket(projected=projected[BudgetType.NEED], ideal=total_income * policy.needs_ratio),
        wants=BudgetBucket(projected=projected[BudgetType.WANT], ideal=total_income * policy.wants_ratio),
        savings=BudgetBucket(projected=projected[BudgetType.SAVINGS], ideal=total_income * policy.savings_ratio),
        unclassified=unclassified,
    )
