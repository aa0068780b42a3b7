"""Service module exports."""

from . import (
    account_resolver,
    accounts,
    auth,
    revalidation,
    submission,
    transactions,
)

__all__ = [
    "account_resolver",
    "accounts",
    "auth",
    "revalidation",
    "submission",
    "transactions",
]
