"""Data loaders for the overview dashboard."""

from __future__ import annotations

from datetime import date, timedelta

from ...infra.database import SessionFactory
from ...infra.repositories.account import SQLModelAccountRepository
from ...infra.repositories.transaction import SQLModelTransactionRepository
from ...services.transactions import compute_summary, spending_by_category


def load_overview_summary(
    user_id: int, *, session_factory: SessionFactory, today: date | None = None
) -> dict:
    """Gather summary statistics used by the overview dashboard."""

    today = today or date.today()
    txn_repo = SQLModelTransactionRepository(session_factory)
    account_repo = SQLModelAccountRepository(session_factory)

    transactions = txn_repo.list_all(user_id=user_id, limit=None)
    recent = [txn for txn in transactions if txn.occurred_on >= today - timedelta(days=30)]
    accounts = account_repo.list_all(user_id=user_id)
    default_account = next((acc for acc in accounts if acc.is_default), None)

    balances_by_account: dict[int, float] = {}
    for txn in transactions:
        balances_by_account[txn.account_id] = (
            balances_by_account.get(txn.account_id, 0.0) + txn.signed_amount
        )

    return {
        "balances": compute_summary(transactions),
        "last_30_days": compute_summary(recent),
        "top_categories": spending_by_category(recent)[:5],
        "accounts": [
            {
                "name": acc.name,
                "currency": acc.currency,
                "is_default": acc.is_default,
                "balance": balances_by_account.get(acc.id, 0.0),  # type: ignore[arg-type]
            }
            for acc in accounts
        ],
        "default_account": default_account.name if default_account else None,
        "transaction_count": len(transactions),
        "recent_transactions": transactions[:5],
    }
