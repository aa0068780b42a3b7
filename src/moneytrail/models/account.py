"""Account model for transaction linkage."""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover
    from .transaction import Transaction


class Account(SQLModel, table=True):
    """A user-owned account that transactions are recorded against."""

    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    name: str = Field(nullable=False, max_length=128)
    currency: str = Field(default="USD", max_length=3)
    # At most one account per user carries the flag; the account service enforces it.
    is_default: bool = Field(default=False, nullable=False)

    transactions: list["Transaction"] = Relationship(
        back_populates="account",
        sa_relationship=relationship("Transaction", back_populates="account"),
    )
