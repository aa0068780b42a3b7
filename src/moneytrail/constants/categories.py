"""
Centralized category vocabularies for the transaction form.
Keys are stored on transactions; labels are what the dropdowns show.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

EXPENSE = "expense"
INCOME = "income"
TRANSACTION_TYPES = (EXPENSE, INCOME)

# Transaction Categories - Expenses
EXPENSE_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {
        "housing": "Housing",
        "utilities": "Utilities",
        "food": "Food & Groceries",
        "dining": "Dining Out",
        "transportation": "Transportation",
        "healthcare": "Healthcare",
        "insurance": "Insurance",
        "entertainment": "Entertainment",
        "shopping": "Shopping",
        "education": "Education",
        "travel": "Travel",
        "personal_care": "Personal Care",
        "subscriptions": "Subscriptions",
        "gifts": "Gifts & Donations",
        "taxes": "Taxes",
        "other_expense": "Other",
    }
)

# Transaction Categories - Income
INCOME_CATEGORIES: Mapping[str, str] = MappingProxyType(
    {
        "salary": "Salary",
        "bonus": "Bonus",
        "freelance": "Freelance",
        "business": "Business Income",
        "investments": "Investment Income",
        "interest": "Interest",
        "rental": "Rental Income",
        "refund": "Refund",
        "gift_received": "Gift Received",
        "other_income": "Other",
    }
)

_BY_TYPE: Mapping[str, Mapping[str, str]] = {
    EXPENSE: EXPENSE_CATEGORIES,
    INCOME: INCOME_CATEGORIES,
}


def categories_for_type(txn_type: str) -> Mapping[str, str]:
    """Return the key -> label mapping for a transaction type (empty when unknown)."""

    return _BY_TYPE.get(txn_type, MappingProxyType({}))


def category_label(category: str, txn_type: str | None = None) -> str:
    """Return the display label for ``category``, falling back to the raw key."""

    if txn_type is not None:
        return categories_for_type(txn_type).get(category, category)
    return EXPENSE_CATEGORIES.get(category) or INCOME_CATEGORIES.get(category) or category


def description_placeholder(txn_type: str) -> str:
    if txn_type == INCOME:
        return "e.g. Salary, Bonus, etc."
    return "e.g. Groceries, Rent, etc."
