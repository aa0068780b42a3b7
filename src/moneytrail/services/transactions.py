"""Transaction creation, listing and summaries."""

from __future__ import annotations

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, TypedDict

from ..constants.categories import TRANSACTION_TYPES, categories_for_type, category_label
from ..infra.database import SessionFactory
from ..infra.repositories.account import SQLModelAccountRepository
from ..infra.repositories.transaction import SQLModelTransactionRepository
from ..logging_config import get_logger
from ..models.transaction import Transaction

logger = get_logger(__name__)

ACCOUNT_NOT_FOUND = "Account not found"
UNKNOWN_CATEGORY = "Unknown category"
INVALID_TYPE = "Unknown transaction type"


class _RequiredTransactionFields(TypedDict):
    account_id: str
    type: str
    description: str
    category: str
    date: date
    amount: float


class TransactionRequest(_RequiredTransactionFields, total=False):
    """Payload accepted by :func:`create_transaction`."""

    notes: Optional[str]


class _ResultStatus(TypedDict):
    success: bool


class CreateTransactionResult(_ResultStatus, total=False):
    error: str
    id: int


def _parse_account_id(raw: object) -> Optional[int]:
    try:
        return int(str(raw))
    except (TypeError, ValueError):
        return None


def create_transaction(
    request: TransactionRequest,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> CreateTransactionResult:
    """Persist a transaction for ``user_id``.

    Business-rule rejections come back as ``{"success": False, "error": ...}``;
    database failures propagate to the caller.
    """

    txn_type = request["type"]
    if txn_type not in TRANSACTION_TYPES:
        return {"success": False, "error": INVALID_TYPE}

    account_id = _parse_account_id(request["account_id"])
    account = None
    if account_id is not None:
        account = SQLModelAccountRepository(session_factory).get_by_id(account_id, user_id=user_id)
    if account is None:
        logger.info(
            "Rejected transaction for unknown account",
            extra={"account_id": request["account_id"], "user_id": user_id},
        )
        return {"success": False, "error": ACCOUNT_NOT_FOUND}

    if request["category"] not in categories_for_type(txn_type):
        return {"success": False, "error": UNKNOWN_CATEGORY}

    txn = SQLModelTransactionRepository(session_factory).create(
        Transaction(
            user_id=user_id,
            account_id=account.id,
            txn_type=txn_type,
            description=request["description"],
            category=request["category"],
            occurred_on=request["date"],
            amount=request["amount"],
            notes=request.get("notes") or None,
        ),
        user_id=user_id,
    )
    logger.info("Transaction created", extra={"transaction_id": txn.id, "user_id": user_id})
    return {"success": True, "id": txn.id}  # type: ignore[typeddict-item]


def get_transaction(
    transaction_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[Transaction]:
    return SQLModelTransactionRepository(session_factory).get_by_id(transaction_id, user_id=user_id)


def list_transactions(
    user_id: int, *, session_factory: SessionFactory, limit: int = 100
) -> list[Transaction]:
    """Return the user's most recent transactions, newest first."""

    return SQLModelTransactionRepository(session_factory).list_all(user_id=user_id, limit=limit)


def compute_summary(transactions: Iterable[Transaction]) -> dict[str, float]:
    """Compute income, expenses, and net totals from the provided transactions."""

    income = 0.0
    expenses = 0.0
    for txn in transactions:
        if txn.txn_type == "income":
            income += txn.amount
        else:
            expenses += txn.amount
    return {"income": income, "expenses": expenses, "net": income - expenses}


def spending_by_category(transactions: Iterable[Transaction]) -> list[dict[str, object]]:
    """Roll up expense totals by category, largest first."""

    totals: dict[str, float] = defaultdict(float)
    for txn in transactions:
        if txn.txn_type != "expense":
            continue
        totals[txn.category] += txn.amount

    breakdown: list[dict[str, object]] = [
        {"category": key, "label": category_label(key, "expense"), "amount": total}
        for key, total in totals.items()
    ]
    breakdown.sort(key=lambda entry: entry["amount"], reverse=True)  # type: ignore[arg-type,return-value]
    return breakdown
