"""SQLModel table exports."""

from .account import Account
from .transaction import Transaction
from .user import User

__all__ = [
    "Account",
    "Transaction",
    "User",
]
