"""
Pydantic schemas package.
"""

from onlyfunds.schemas.auth import (
    SignupRequest,
    LoginRequest,
    UserResponse,
)
from onlyfunds.schemas.category import (
    CustomCategoryInput,
    CategoryOption,
    CategoryCatalog,
)
from onlyfunds.schemas.transaction import (
    TransactionSort,
    TransactionCreate,
    TransactionResponse,
    TransactionListResponse,
)
from onlyfunds.schemas.budget import (
    BudgetSet,
    BudgetUpdate,
    BudgetResponse,
    BudgetProgress,
    BudgetProgressItem,
    BudgetProgressReport,
)
from onlyfunds.schemas.dashboard import (
    CategoryTotal,
    RecentTransaction,
    DashboardSummary,
)
from onlyfunds.schemas.sync import SyncResponse

__all__ = [
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "CustomCategoryInput",
    "CategoryOption",
    "CategoryCatalog",
    "TransactionSort",
    "TransactionCreate",
    "TransactionResponse",
    "TransactionListResponse",
    "BudgetSet",
    "BudgetUpdate",
    "BudgetResponse",
    "BudgetProgress",
    "BudgetProgressItem",
    "BudgetProgressReport",
    "CategoryTotal",
    "RecentTransaction",
    "DashboardSummary",
    "SyncResponse",
]
