"""
Budget API endpoints.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response
from typing import Optional

from onlyfunds.config import settings
from onlyfunds.dependencies import (
    get_current_user,
    get_budget_repository,
    get_progress_service,
)
from onlyfunds.models.user import User
from onlyfunds.schemas.budget import (
    BudgetSet,
    BudgetUpdate,
    BudgetResponse,
    BudgetProgressItem,
    BudgetProgressReport,
    MIN_BUDGET_YEAR,
    MAX_BUDGET_YEAR,
)
from onlyfunds.services.budget_progress import progress_level
from onlyfunds.services.budget_service import BudgetProgressService
from onlyfunds.services.periods import resolve_target_period, get_month_name
from onlyfunds.services.repositories import BudgetRepository, BudgetConflictError
from onlyfunds.services.sync_service import push_budget, delete_remote_budget, budget_to_document

router = APIRouter(prefix="/budgets", tags=["budgets"])


@router.get("", response_model=list[BudgetResponse])
def list_budgets(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR),
    user: User = Depends(get_current_user),
    repo: BudgetRepository = Depends(get_budget_repository)
):
    """List the user's budgets, optionally for one month and/or year"""
    return [BudgetResponse.model_validate(b) for b in repo.get_budgets(user.id, month, year)]


@router.put("", response_model=BudgetResponse)
def set_budget(
    data: BudgetSet,
    response: Response,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    repo: BudgetRepository = Depends(get_budget_repository),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Create the budget for (category, month, year), or update its amount if it exists"""
    budget, created = repo.upsert_budget(user.id, data.category, data.month, data.year, data.amount)
    response.status_code = 201 if created else 200

    progress.refresh(user.id, budget.month, budget.year)
    background_tasks.add_task(push_budget, budget_to_document(budget))
    return BudgetResponse.model_validate(budget)


@router.get("/progress", response_model=BudgetProgressReport)
def get_budget_progress(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR),
    user: User = Depends(get_current_user),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Spending against each budget for a month (defaults to the current month)"""
    month, year = resolve_target_period(month, year)
    items = progress.refresh(user.id, month, year)

    total_budget = sum((p.budget_amount for p in items), 0)
    total_spent = sum((p.spent_amount for p in items), 0)

    return BudgetProgressReport(
        month=month,
        year=year,
        month_name=get_month_name(month),
        items=[
            BudgetProgressItem(
                **p.model_dump(),
                level=progress_level(p.percentage_used, settings.budget_warning_threshold)
            )
            for p in items
        ],
        total_budget=total_budget,
        total_spent=total_spent,
        total_remaining=total_budget - total_spent,
        over_budget_count=sum(1 for p in items if p.is_over_budget)
    )


@router.get("/category/{category}", response_model=BudgetResponse)
def get_budget_by_category(
    category: str,
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR),
    user: User = Depends(get_current_user),
    repo: BudgetRepository = Depends(get_budget_repository)
):
    """Get the budget for a category in a month (defaults to the current month)"""
    budget = repo.get_budget_by_category(user.id, category, month, year)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return BudgetResponse.model_validate(budget)


@router.patch("/{budget_id}", response_model=BudgetResponse)
def update_budget(
    budget_id: str,
    update: BudgetUpdate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    repo: BudgetRepository = Depends(get_budget_repository),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Update a budget's amount, category or period"""
    existing = repo.get_budget(user.id, budget_id)
    if not existing:
        raise HTTPException(status_code=404, detail="Budget not found")
    old_period = (existing.month, existing.year)

    try:
        budget = repo.update_budget(user.id, budget_id, update.model_dump(exclude_unset=True, exclude_none=True))
    except BudgetConflictError as e:
        raise HTTPException(status_code=409, detail=str(e))

    progress.refresh(user.id, budget.month, budget.year)
    if old_period != (budget.month, budget.year):
        progress.refresh(user.id, *old_period)

    background_tasks.add_task(push_budget, budget_to_document(budget))
    return BudgetResponse.model_validate(budget)


@router.delete("/{budget_id}", status_code=204)
def delete_budget(
    budget_id: str,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    repo: BudgetRepository = Depends(get_budget_repository),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Delete a budget locally and from the cloud"""
    budget = repo.get_budget(user.id, budget_id)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")

    month, year = budget.month, budget.year
    repo.delete_budget(user.id, budget_id)
    progress.refresh(user.id, month, year)

    background_tasks.add_task(delete_remote_budget, budget_id)
    return None
