"""SQLModel implementation of the account repository."""

from __future__ import annotations

from typing import Optional

from sqlmodel import select

from ...models.account import Account
from ..database import SessionFactory


class SQLModelAccountRepository:
    """SQLModel-based account repository scoped by user."""

    def __init__(self, session_factory: SessionFactory):
        self.session_factory = session_factory

    def get_by_id(self, account_id: int, *, user_id: int) -> Optional[Account]:
        """Retrieve an account owned by ``user_id``."""
        with self.session_factory() as session:
            obj = session.exec(
                select(Account)
                .where(Account.id == account_id)
                .where(Account.user_id == user_id)
            ).first()
            if obj:
                session.expunge(obj)
            return obj

    def list_all(self, *, user_id: int) -> list[Account]:
        """List a user's accounts ordered by name."""
        with self.session_factory() as session:
            statement = (
                select(Account)
                .where(Account.user_id == user_id)
                .order_by(Account.name, Account.id)  # type: ignore[arg-type]
            )
            rows = list(session.exec(statement).all())
            session.expunge_all()
            return rows

    def create(self, account: Account, *, user_id: int) -> Account:
        """Create a new account for ``user_id``."""
        with self.session_factory() as session:
            account.user_id = user_id
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    def set_default(self, account_id: int, *, user_id: int) -> Account:
        """Flag ``account_id`` as the user's default and clear the flag elsewhere."""
        with self.session_factory() as session:
            accounts = session.exec(select(Account).where(Account.user_id == user_id)).all()
            target = next((acc for acc in accounts if acc.id == account_id), None)
            if target is None:
                raise LookupError(f"Account {account_id} was not found")
            for acc in accounts:
                acc.is_default = acc.id == account_id
                session.add(acc)
            session.commit()
            session.refresh(target)
            session.expunge(target)
            return target
