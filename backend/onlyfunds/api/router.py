"""
Main API router.
"""

from fastapi import APIRouter
from onlyfunds.api import auth, categories, transactions, budgets, dashboard, sync

api_router = APIRouter()

api_router.include_router(auth.router)
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(transactions.router)
api_router.include_router(budgets.router)
api_router.include_router(dashboard.router)
api_router.include_router(sync.router)
