"""SQLModel definitions for ledger transactions."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import TYPE_CHECKING, ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

if TYPE_CHECKING:  # pragma: no cover - import guard for circular dependency
    from .account import Account


class Transaction(SQLModel, table=True):
    """A single hand-entered expense or income record."""

    __tablename__: ClassVar[str] = "transaction"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    txn_type: str = Field(default="expense", nullable=False, max_length=16, index=True)
    description: str = Field(nullable=False, max_length=255)
    category: str = Field(nullable=False, max_length=64, index=True)
    occurred_on: date = Field(nullable=False, index=True)
    amount: float = Field(nullable=False, description="Always positive; txn_type carries the sign")
    notes: Optional[str] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    account_id: int = Field(foreign_key="account.id", nullable=False, index=True)
    account: "Account | None" = Relationship(
        back_populates="transactions",
        sa_relationship=relationship("Account", back_populates="transactions"),
    )

    @property
    def signed_amount(self) -> float:
        """Return the amount with expenses negated."""
        return -self.amount if self.txn_type == "expense" else self.amount
