"""
Budget progress aggregation.

Compares spending against monthly per-category budgets. Everything here is
pure: callers pass complete budget and transaction lists already scoped to
one user, and get a fresh list of BudgetProgress records back.
"""

from typing import Dict, Iterable, List, Optional, Sequence
from decimal import Decimal, ROUND_FLOOR

from onlyfunds.models.transaction import TransactionType
from onlyfunds.schemas.budget import BudgetProgress
from onlyfunds.services.periods import resolve_target_period

CAUTION_THRESHOLD = 60
DEFAULT_WARNING_THRESHOLD = 80


def _category_key(category) -> str:
    # Enum members group with their plain string value
    return getattr(category, "value", category)


def _to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def calculate_percentage(value, total) -> int:
    """
    Percentage of total that value represents, rounded half up to an integer.

    Returns 0 when total is not positive. The result is not clamped.
    """
    total = _to_decimal(total)
    if total <= 0:
        return 0
    ratio = _to_decimal(value) / total * 100
    return int((ratio + Decimal("0.5")).to_integral_value(rounding=ROUND_FLOOR))


def compute_progress(
    budgets: Iterable,
    transactions: Iterable,
    target_month: Optional[int] = None,
    target_year: Optional[int] = None
) -> List[BudgetProgress]:
    """
    Build per-category spending-vs-budget records for a target month.

    Budgets outside the target period are skipped. Only expense
    transactions whose attribution date falls in the target period count
    toward spending, grouped by their raw category value. Results follow
    the order of the matching budgets.
    """
    target_month, target_year = resolve_target_period(target_month, target_year)

    period_budgets = [
        b for b in budgets
        if b.month == target_month and b.year == target_year
    ]
    if not period_budgets:
        return []

    spent_by_category: Dict[str, Decimal] = {}
    for t in transactions:
        if t.type != TransactionType.expense:
            continue
        if t.date.month != target_month or t.date.year != target_year:
            continue
        key = _category_key(t.category)
        spent_by_category[key] = spent_by_category.get(key, Decimal("0")) + _to_decimal(t.amount)

    progress = []
    for budget in period_budgets:
        budget_amount = _to_decimal(budget.amount)
        spent_amount = spent_by_category.get(_category_key(budget.category), Decimal("0"))
        progress.append(BudgetProgress(
            category=_category_key(budget.category),
            budget_amount=budget_amount,
            spent_amount=spent_amount,
            remaining_amount=budget_amount - spent_amount,
            percentage_used=calculate_percentage(spent_amount, budget_amount),
            is_over_budget=spent_amount > budget_amount,
        ))

    return progress


def has_progress_changed(
    previous: Optional[Sequence[BudgetProgress]],
    current: Sequence[BudgetProgress]
) -> bool:
    """
    Whether a new progress list differs materially from the previous one.

    Only list length, percentage used, spent amount and the over-budget
    flag are compared.
    """
    if previous is None:
        return True
    if len(previous) != len(current):
        return True
    for old, new in zip(previous, current):
        if (
            old.percentage_used != new.percentage_used
            or old.spent_amount != new.spent_amount
            or old.is_over_budget != new.is_over_budget
        ):
            return True
    return False


def progress_level(percentage_used: int, warning_threshold: int = DEFAULT_WARNING_THRESHOLD) -> str:
    """Display level for a percentage: over, warning, caution or ok."""
    if percentage_used >= 100:
        return "over"
    if percentage_used >= warning_threshold:
        return "warning"
    if percentage_used >= CAUTION_THRESHOLD:
        return "caution"
    return "ok"
