"""
Budget schemas, including the derived budget progress records.
"""

from pydantic import BaseModel, Field, model_validator
from typing import List, Optional
from datetime import datetime
from decimal import Decimal

from onlyfunds.models.transaction import TransactionType
from onlyfunds.schemas.category import CategoryField
from onlyfunds.schemas.transaction import to_category_input
from onlyfunds.services.categories import resolve_category

MIN_BUDGET_YEAR = 2000
MAX_BUDGET_YEAR = 2100


class BudgetSet(BaseModel):
    """Create-or-update a budget for (category, month, year)."""
    category: CategoryField
    amount: Decimal = Field(..., gt=0, le=100000, decimal_places=2)
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR)

    @model_validator(mode="after")
    def resolve_budget_category(self):
        self.category = resolve_category(to_category_input(self.category), TransactionType.expense)
        return self


class BudgetUpdate(BaseModel):
    category: Optional[CategoryField] = None
    amount: Optional[Decimal] = Field(None, gt=0, le=100000, decimal_places=2)
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=MIN_BUDGET_YEAR, le=MAX_BUDGET_YEAR)

    @model_validator(mode="after")
    def resolve_budget_category(self):
        if self.category is not None:
            self.category = resolve_category(to_category_input(self.category), TransactionType.expense)
        return self


class BudgetResponse(BaseModel):
    id: str
    user_id: str
    category: str
    amount: Decimal
    month: int
    year: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class BudgetProgress(BaseModel):
    """Spending compared to one budget for its period. Never persisted."""
    category: str
    budget_amount: Decimal
    spent_amount: Decimal
    remaining_amount: Decimal
    percentage_used: int
    is_over_budget: bool


class BudgetProgressItem(BudgetProgress):
    level: str  # ok, caution, warning, over


class BudgetProgressReport(BaseModel):
    month: int
    year: int
    month_name: str
    items: List[BudgetProgressItem]
    total_budget: Decimal
    total_spent: Decimal
    total_remaining: Decimal
    over_budget_count: int
