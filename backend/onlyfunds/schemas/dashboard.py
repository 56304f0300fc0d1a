"""
Dashboard schemas.
"""

from pydantic import BaseModel
from typing import List


class CategoryTotal(BaseModel):
    category: str
    label: str
    amount: float
    percent: float


class RecentTransaction(BaseModel):
    id: str
    date: str
    description: str
    type: str
    category: str
    amount: float


class DashboardSummary(BaseModel):
    month: int
    year: int
    month_name: str
    total_income: float
    total_expenses: float
    net: float
    all_time_income: float
    all_time_expenses: float
    balance: float
    by_category: List[CategoryTotal]
    recent_transactions: List[RecentTransaction]
