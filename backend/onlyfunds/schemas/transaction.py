"""
Transaction schemas.
"""

from pydantic import BaseModel, Field, model_validator
from datetime import date, datetime
from decimal import Decimal
import enum

from onlyfunds.models.transaction import TransactionType
from onlyfunds.schemas.category import CategoryField, CustomCategoryInput
from onlyfunds.services.categories import CustomCategory, resolve_category


class TransactionSort(str, enum.Enum):
    """Sort options for transaction lists."""
    date_desc = "date_desc"
    date_asc = "date_asc"
    amount_desc = "amount_desc"
    amount_asc = "amount_asc"


def to_category_input(category: CategoryField):
    if isinstance(category, CustomCategoryInput):
        return CustomCategory(category.custom)
    return category


class TransactionCreate(BaseModel):
    type: TransactionType
    amount: Decimal = Field(..., gt=0, le=1000000, decimal_places=2)
    description: str = Field(..., min_length=1, max_length=200)
    category: CategoryField
    date: date

    @model_validator(mode="after")
    def resolve_transaction_category(self):
        # Category always leaves validation as a plain string
        self.category = resolve_category(to_category_input(self.category), self.type)
        return self


class TransactionResponse(BaseModel):
    id: str
    user_id: str
    type: TransactionType
    amount: Decimal
    description: str
    category: str
    date: date
    created_at: datetime

    class Config:
        from_attributes = True


class TransactionListResponse(BaseModel):
    items: list[TransactionResponse]
    total: int
