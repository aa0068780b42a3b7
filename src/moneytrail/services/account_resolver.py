"""Prime a transaction form with the user's default account."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Iterable, Optional

from ..logging_config import get_logger
from .accounts import AccountOption

if TYPE_CHECKING:  # pragma: no cover
    from ..blueprints.transactions.forms import TransactionForm

logger = get_logger(__name__)

AccountFetcher = Callable[[int], Iterable[AccountOption]]


class AccountResolver:
    """Fetch a user's accounts once per form and seed the default account.

    The user identity is passed in by the caller. Fetch failures are logged
    and leave the form's ``account_id`` untouched; results that arrive after
    :meth:`detach` are discarded.
    """

    def __init__(self, form: TransactionForm, fetch_accounts: AccountFetcher) -> None:
        self.form = form
        self._fetch_accounts = fetch_accounts
        self.accounts: list[AccountOption] = []
        self.default_account: Optional[AccountOption] = None
        self.failed = False
        self._loaded_for: Optional[int] = None
        self._in_flight = False
        self._detached = False

    @property
    def detached(self) -> bool:
        return self._detached

    def load_accounts(
        self, user_id: Optional[int], *, select_default: bool = True
    ) -> list[AccountOption]:
        """Load accounts for ``user_id`` and write the default into the form.

        The default account id overwrites any ``account_id`` already on the
        form; when no account is flagged default the field is cleared.
        """

        if not user_id or self._detached:
            return self.accounts
        if self._in_flight or self._loaded_for == user_id:
            return self.accounts

        self._in_flight = True
        try:
            fetched = list(self._fetch_accounts(user_id))
        except Exception:
            self.failed = True
            logger.exception("Error fetching accounts", extra={"user_id": user_id})
            return self.accounts
        finally:
            self._in_flight = False

        if self._detached:
            logger.debug("Dropping account list for a detached form", extra={"user_id": user_id})
            return self.accounts

        self.failed = False
        self._loaded_for = user_id
        self.accounts = fetched
        self.default_account = next((acc for acc in fetched if acc.is_default), None)

        if select_default:
            self.form.set_field(
                "account_id", self.default_account.id if self.default_account else ""
            )
        return self.accounts

    def detach(self) -> None:
        """Mark the owning form as torn down."""

        self._detached = True

    def account_name(self, account_id: str) -> Optional[str]:
        return next((acc.name for acc in self.accounts if acc.id == account_id), None)
