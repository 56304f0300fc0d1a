"""
Database models package.
"""

from onlyfunds.models.user import User
from onlyfunds.models.transaction import Transaction, TransactionType, ExpenseCategory, IncomeCategory
from onlyfunds.models.budget import Budget

__all__ = [
    "User",
    "Transaction",
    "TransactionType",
    "ExpenseCategory",
    "IncomeCategory",
    "Budget",
]
