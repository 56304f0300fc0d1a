"""
Category API endpoints.
"""

from fastapi import APIRouter

from onlyfunds.schemas.category import CategoryCatalog
from onlyfunds.services.categories import get_expense_categories, get_income_categories

router = APIRouter()


@router.get("", response_model=CategoryCatalog)
def list_categories():
    """List the known expense and income categories."""
    return CategoryCatalog(
        expense=get_expense_categories(),
        income=get_income_categories()
    )
