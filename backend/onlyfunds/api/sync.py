"""
Cloud sync API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from onlyfunds.database import get_db
from onlyfunds.dependencies import get_current_user, get_progress_service
from onlyfunds.models.user import User
from onlyfunds.schemas.sync import SyncResponse
from onlyfunds.services.budget_service import BudgetProgressService
from onlyfunds.services.cloud import CloudClient, get_cloud_client
from onlyfunds.services.sync_service import sync_transactions_to_local, sync_budgets_to_local

router = APIRouter(prefix="/sync", tags=["sync"])


@router.post("", response_model=SyncResponse)
async def sync_from_cloud(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    client: CloudClient = Depends(get_cloud_client),
    progress: BudgetProgressService = Depends(get_progress_service)
):
    """Pull the user's cloud transactions and budgets into the local cache"""
    transactions = await sync_transactions_to_local(db, user.id, client)
    budgets = await sync_budgets_to_local(db, user.id, client)

    for month, year in sorted(transactions.periods | budgets.periods):
        progress.refresh(user.id, month, year)

    return SyncResponse(
        cloud_configured=client.is_configured,
        transactions_pulled=transactions.merged,
        budgets_pulled=budgets.merged
    )
