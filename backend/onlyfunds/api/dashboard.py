"""
Dashboard API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional
from decimal import Decimal

from onlyfunds.dependencies import get_current_user, get_transaction_repository
from onlyfunds.models.transaction import TransactionType
from onlyfunds.models.user import User
from onlyfunds.schemas.budget import MIN_BUDGET_YEAR, MAX_BUDGET_YEAR
from onlyfunds.schemas.dashboard import DashboardSummary, CategoryTotal, RecentTransaction
from onlyfunds.services.categories import get_category_display_name
from onlyfunds.services.periods import resolve_target_period, get_month_name
from onlyfunds.services.repositories import TransactionRepository

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummary)
def get_dashboard_summary(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR),
    recent: int = Query(5, ge=0, le=50),
    user: User = Depends(get_current_user),
    repo: TransactionRepository = Depends(get_transaction_repository)
):
    """
    Get the financial overview for a month.
    Returns: monthly income/expenses/net, all-time totals, expenses by category, recent transactions
    """
    month, year = resolve_target_period(month, year)

    total_income = repo.get_monthly_total(user.id, TransactionType.income, month, year)
    total_expenses = repo.get_monthly_total(user.id, TransactionType.expense, month, year)
    all_time_income = repo.get_total_by_type(user.id, TransactionType.income)
    all_time_expenses = repo.get_total_by_type(user.id, TransactionType.expense)

    transactions = repo.get_transactions(user.id)

    category_totals = {}
    for t in transactions:
        if t.type == TransactionType.expense and t.date.month == month and t.date.year == year:
            category_totals[t.category] = category_totals.get(t.category, Decimal("0")) + t.amount

    by_category = [
        CategoryTotal(
            category=category,
            label=get_category_display_name(category),
            amount=float(amount),
            percent=float(amount / total_expenses * 100) if total_expenses > 0 else 0
        )
        for category, amount in sorted(category_totals.items(), key=lambda x: x[1], reverse=True)
    ]

    return DashboardSummary(
        month=month,
        year=year,
        month_name=get_month_name(month),
        total_income=float(total_income),
        total_expenses=float(total_expenses),
        net=float(total_income - total_expenses),
        all_time_income=float(all_time_income),
        all_time_expenses=float(all_time_expenses),
        balance=float(all_time_income - all_time_expenses),
        by_category=by_category,
        recent_transactions=[
            RecentTransaction(
                id=t.id,
                date=t.date.isoformat(),
                description=t.description,
                type=t.type.value,
                category=get_category_display_name(t.category),
                amount=float(t.amount)
            )
            for t in transactions[:recent]
        ]
    )
