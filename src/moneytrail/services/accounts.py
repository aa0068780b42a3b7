"""Account lookups and default-account management."""

from __future__ import annotations

from dataclasses import dataclass

from ..infra.database import SessionFactory
from ..infra.repositories.account import SQLModelAccountRepository
from ..logging_config import get_logger
from ..models.account import Account

logger = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AccountOption:
    """Read-only projection of an account as offered by the transaction form."""

    id: str
    name: str
    is_default: bool = False

    @classmethod
    def from_model(cls, account: Account) -> AccountOption:
        return cls(id=str(account.id), name=account.name, is_default=bool(account.is_default))


def get_all_user_accounts_by_user_id(
    user_id: int, *, session_factory: SessionFactory
) -> list[AccountOption]:
    """Return every account owned by ``user_id`` ordered by name."""

    repo = SQLModelAccountRepository(session_factory)
    return [AccountOption.from_model(acc) for acc in repo.list_all(user_id=user_id)]


def create_account(
    user_id: int,
    name: str,
    *,
    currency: str = "USD",
    is_default: bool = False,
    session_factory: SessionFactory,
) -> Account:
    """Create an account; a user's first account becomes the default."""

    name = name.strip()
    if not name:
        raise ValueError("Account name is required")

    repo = SQLModelAccountRepository(session_factory)
    first_account = not repo.list_all(user_id=user_id)
    account = repo.create(
        Account(name=name, currency=(currency or "USD").upper()[:3], user_id=user_id),
        user_id=user_id,
    )
    if is_default or first_account:
        account = repo.set_default(account.id, user_id=user_id)  # type: ignore[arg-type]
    logger.info(
        "Account created",
        extra={"account_id": account.id, "user_id": user_id, "is_default": account.is_default},
    )
    return account


def set_default_account(
    user_id: int, account_id: int, *, session_factory: SessionFactory
) -> Account:
    """Make ``account_id`` the only default account of ``user_id``.

    Raises:
        LookupError: the account does not exist or belongs to another user.
    """

    account = SQLModelAccountRepository(session_factory).set_default(account_id, user_id=user_id)
    logger.info("Default account changed", extra={"account_id": account_id, "user_id": user_id})
    return account
