"""Blueprint exports."""

from . import accounts, auth, overview, transactions

__all__ = [
    "accounts",
    "auth",
    "overview",
    "transactions",
]
