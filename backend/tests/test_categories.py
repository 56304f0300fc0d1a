"""Tests for the category catalogue and custom category resolution."""

import pytest

from onlyfunds.models.transaction import TransactionType, ExpenseCategory, IncomeCategory
from onlyfunds.services.categories import (
    CustomCategory,
    get_category_display_name,
    get_expense_categories,
    get_income_categories,
    resolve_category,
)


class TestCatalogue:
    """Test category option lists."""

    def test_expense_options(self):
        options = get_expense_categories()
        assert len(options) == len(ExpenseCategory)
        assert {"value": "food", "label": "Food"} in options

    def test_income_options(self):
        values = [o["value"] for o in get_income_categories()]
        assert values == ["salary", "freelance", "investment", "gift", "other"]

    def test_display_name(self):
        assert get_category_display_name("healthcare") == "Healthcare"
        assert get_category_display_name("side_hustle") == "Side hustle"
        assert get_category_display_name(IncomeCategory.gift) == "Gift"


class TestResolveCategory:
    """Test resolution of entered categories to stored strings."""

    def test_known_expense_category(self):
        assert resolve_category("food", TransactionType.expense) == "food"
        assert resolve_category(ExpenseCategory.utilities, TransactionType.expense) == "utilities"

    def test_known_income_category(self):
        assert resolve_category("salary", TransactionType.income) == "salary"

    def test_category_must_match_type(self):
        """An income category is rejected for an expense and vice versa."""
        with pytest.raises(ValueError):
            resolve_category("salary", TransactionType.expense)
        with pytest.raises(ValueError):
            resolve_category("food", TransactionType.income)

    def test_other_is_valid_for_both(self):
        assert resolve_category("other", TransactionType.expense) == "other"
        assert resolve_category("other", TransactionType.income) == "other"

    def test_custom_category(self):
        """Custom names are stripped and stored as plain strings."""
        assert resolve_category(CustomCategory("  Pet supplies "), TransactionType.expense) == "Pet supplies"

    def test_blank_custom_category(self):
        with pytest.raises(ValueError):
            resolve_category(CustomCategory("   "), TransactionType.expense)

    def test_long_custom_category(self):
        with pytest.raises(ValueError):
            resolve_category(CustomCategory("x" * 51), TransactionType.income)
