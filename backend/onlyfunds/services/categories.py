"""
Category catalogue and resolution of user-entered categories.

Data entry accepts either a known category value ("food") or a custom
category ({"custom": "pets"}). Both are resolved to a plain string before
they reach storage, so grouping by category never has to tell them apart.
"""

from typing import Dict, List, Type, Union
import enum

from onlyfunds.models.transaction import TransactionType, ExpenseCategory, IncomeCategory

MAX_CUSTOM_CATEGORY_LENGTH = 50


class CustomCategory:
    """Marker for a free-form category name entered instead of a known one."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"CustomCategory({self.name!r})"


CategoryInput = Union[str, enum.Enum, CustomCategory]


def get_category_display_name(category: str) -> str:
    value = category.value if isinstance(category, enum.Enum) else category
    if not value:
        return ""
    return value[0].upper() + value[1:].replace("_", " ")


def _options(categories: Type[enum.Enum]) -> List[Dict[str, str]]:
    return [
        {"value": c.value, "label": get_category_display_name(c.value)}
        for c in categories
    ]


def get_expense_categories() -> List[Dict[str, str]]:
    return _options(ExpenseCategory)


def get_income_categories() -> List[Dict[str, str]]:
    return _options(IncomeCategory)


def categories_for_type(transaction_type: TransactionType) -> Type[enum.Enum]:
    if transaction_type == TransactionType.income:
        return IncomeCategory
    return ExpenseCategory


def resolve_category(category: CategoryInput, transaction_type: TransactionType) -> str:
    """
    Resolve a known or custom category to the plain string that is stored.

    Raises ValueError when a known value does not belong to the category
    set of the transaction type, or when a custom name is blank or too long.
    """
    if isinstance(category, CustomCategory):
        name = category.name.strip()
        if not name:
            raise ValueError("Custom category name is required")
        if len(name) > MAX_CUSTOM_CATEGORY_LENGTH:
            raise ValueError(
                f"Custom category must be at most {MAX_CUSTOM_CATEGORY_LENGTH} characters"
            )
        return name

    value = category.value if isinstance(category, enum.Enum) else str(category)
    allowed = {c.value for c in categories_for_type(transaction_type)}
    if value not in allowed:
        raise ValueError(
            f"'{value}' is not a valid {transaction_type.value} category"
        )
    return value
