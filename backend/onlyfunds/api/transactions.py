"""
Transaction API endpoints.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from typing import Optional

from onlyfunds.dependencies import (
    get_current_user,
    get_transaction_repository,
    get_progress_service,
)
from onlyfunds.models.transaction import TransactionType
from onlyfunds.models.user import User
from onlyfunds.schemas.transaction import (
    TransactionSort,
    TransactionCreate,
    TransactionResponse,
    TransactionListResponse,
)
from onlyfunds.services.budget_service import BudgetProgressService
from onlyfunds.services.repositories import TransactionRepository
from onlyfunds.services.sync_service import (
    push_transaction,
    delete_remote_transaction,
    transaction_to_document,
)

router = APIRouter(prefix="/transactions", tags=["transactions"])


@router.get("", response_model=TransactionListResponse)
def list_transactions(
    type: Optional[TransactionType] = None,
    sort: TransactionSort = TransactionSort.date_desc,
    user: User = Depends(get_current_user),
    repo: TransactionRepository = Depends(get_transaction_repository)
):
    """List the user's transactions, optionally filtered by type"""
    transactions = repo.get_transactions(user.id, type=type, sort=sort)
    return TransactionListResponse(
        items=[TransactionResponse.model_validate(t) for t in transactions],
        total=len(transactions)
    )


@router.post("", response_model=TransactionResponse, status_code=201)
def add_transaction(
    data: TransactionCreate,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    repo: TransactionRepository = Depends(get_transaction_repository),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Record a transaction locally, then sync it to the cloud in the background"""
    transaction = repo.add_transaction(
        user.id,
        type=data.type,
        amount=data.amount,
        description=data.description,
        category=data.category,
        date=data.date,
    )

    if transaction.type == TransactionType.expense:
        progress.refresh(user.id, transaction.date.month, transaction.date.year)

    background_tasks.add_task(push_transaction, transaction_to_document(transaction))
    return TransactionResponse.model_validate(transaction)


@router.get("/{transaction_id}", response_model=TransactionResponse)
def get_transaction(
    transaction_id: str,
    user: User = Depends(get_current_user),
    repo: TransactionRepository = Depends(get_transaction_repository)
):
    """Get a single transaction"""
    transaction = repo.get_transaction(user.id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")
    return TransactionResponse.model_validate(transaction)


@router.delete("/{transaction_id}", status_code=204)
def delete_transaction(
    transaction_id: str,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_user),
    repo: TransactionRepository = Depends(get_transaction_repository),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Delete a transaction locally and from the cloud"""
    transaction = repo.get_transaction(user.id, transaction_id)
    if not transaction:
        raise HTTPException(status_code=404, detail="Transaction not found")

    is_expense = transaction.type == TransactionType.expense
    month, year = transaction.date.month, transaction.date.year
    repo.delete_transaction(user.id, transaction_id)

    if is_expense:
        progress.refresh(user.id, month, year)

    background_tasks.add_task(delete_remote_transaction, transaction_id)
    return None
