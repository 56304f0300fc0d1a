"""
FastAPI dependencies.
"""

from typing import Optional
from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from onlyfunds.database import get_db
from onlyfunds.models.user import User
from onlyfunds.services.budget_service import BudgetProgressService, ProgressStore, get_progress_store
from onlyfunds.services.repositories import TransactionRepository, BudgetRepository


def get_current_user(
    x_user_id: Optional[str] = Header(None, alias="x-user-id"),
    db: Session = Depends(get_db)
) -> User:
    """
    Resolve the calling user from the x-user-id header.
    """
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing user identity")
    user = db.query(User).filter(User.id == x_user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def get_transaction_repository(db: Session = Depends(get_db)) -> TransactionRepository:
    return TransactionRepository(db)


def get_budget_repository(db: Session = Depends(get_db)) -> BudgetRepository:
    return BudgetRepository(db)


def get_progress_service(
    transactions: TransactionRepository = Depends(get_transaction_repository),
    budgets: BudgetRepository = Depends(get_budget_repository),
    store: ProgressStore = Depends(get_progress_store)
) -> BudgetProgressService:
    return BudgetProgressService(transactions, budgets, store)
