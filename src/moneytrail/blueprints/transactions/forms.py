"""Transaction form state and validation."""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from ...constants.categories import EXPENSE, TRANSACTION_TYPES, categories_for_type
from ...models.transaction import Transaction
from ...services.transactions import TransactionRequest

EARLIEST_DATE = date(1900, 1, 1)

# Public field names mapped to the attributes holding their values.
FIELDS: Mapping[str, str] = {
    "account_id": "account_id",
    "type": "txn_type",
    "description": "description",
    "category": "category",
    "date": "occurred_on",
    "amount": "amount",
    "notes": "notes",
}


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Outcome of :meth:`TransactionForm.validate`."""

    valid: bool
    errors: Mapping[str, list[str]]


@dataclass(slots=True)
class TransactionForm:
    """Holds an in-progress transaction draft and its per-field errors.

    The form knows nothing about rendering: callers push values in with
    :meth:`set_field` and read back :attr:`errors` or :meth:`form_values`.
    Changing ``type`` swaps :attr:`allowed_categories` but keeps whatever
    ``category`` was already chosen, even when it belongs to the other set.
    """

    account_id: str = ""
    txn_type: str = EXPENSE
    description: str = ""
    category: str = ""
    occurred_on: Optional[date] = field(default_factory=date.today)
    amount: Optional[float] = None
    notes: Optional[str] = ""
    submitting: bool = field(default=False, init=False)
    errors: dict[str, list[str]] = field(default_factory=dict, init=False)
    raw_data: dict[str, str] = field(default_factory=dict, init=False)
    _unparsed: set[str] = field(default_factory=set, init=False, repr=False)
    _validated: bool = field(default=False, init=False, repr=False)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TransactionForm:
        """Create a form populated from request data."""

        form = cls()
        form.load(data)
        return form

    def load(self, data: Mapping[str, Any]) -> None:
        """Bind every known field present in ``data``; other keys are ignored."""

        for name in FIELDS:
            if name in data:
                self.set_field(name, data[name])

    def set_field(self, name: str, value: Any) -> None:
        """Assign a single draft field, coercing text input for date and amount."""

        if name not in FIELDS:
            raise KeyError(f"Unknown transaction form field: {name!r}")

        self._validated = False
        self._unparsed.discard(name)
        self.errors.pop(name, None)

        if name == "date":
            self.occurred_on = self._coerce_date(value)
        elif name == "amount":
            self.amount = self._coerce_amount(value)
        elif name == "notes":
            self.notes = None if value is None else str(value)
        else:
            setattr(self, FIELDS[name], "" if value is None else str(value))

        self.raw_data[name] = "" if value is None else str(value)

    def validate(self) -> ValidationResult:
        """Check every field at once and record field-scoped error messages."""

        self.errors.clear()

        if not self.account_id.strip():
            self._add_error("account_id", "Select an account.")

        if self.txn_type not in TRANSACTION_TYPES:
            self._add_error("type", "Type must be either expense or income.")

        if not self.description.strip():
            self._add_error("description", "Description is required.")

        if not self.category.strip():
            self._add_error("category", "Select a category.")

        if "date" in self._unparsed:
            self._add_error("date", "Enter a valid date (YYYY-MM-DD).")
        elif self.occurred_on is None:
            self._add_error("date", "Date is required.")
        elif self.occurred_on < EARLIEST_DATE:
            self._add_error("date", "Date must be on or after 1900-01-01.")
        elif self.occurred_on > date.today():
            self._add_error("date", "Date cannot be in the future.")

        if "amount" in self._unparsed:
            self._add_error("amount", "Enter a valid number for the amount.")
        elif self.amount is None:
            self._add_error("amount", "Amount is required.")
        elif not math.isfinite(self.amount):
            self._add_error("amount", "Amount must be a finite number.")
        elif self.amount <= 0:
            self._add_error("amount", "Amount must be greater than zero.")

        self._validated = not self.errors
        return ValidationResult(
            valid=self._validated,
            errors={name: list(messages) for name, messages in self.errors.items()},
        )

    def reset(self, initial: Mapping[str, Any] | Transaction | None = None) -> None:
        """Restore defaults, then overlay ``initial`` (a mapping or a stored transaction)."""

        self.account_id = ""
        self.txn_type = EXPENSE
        self.description = ""
        self.category = ""
        self.occurred_on = date.today()
        self.amount = None
        self.notes = ""
        self.submitting = False
        self.errors.clear()
        self.raw_data.clear()
        self._unparsed.clear()
        self._validated = False

        if initial is None:
            return
        if isinstance(initial, Transaction):
            initial = initial_values_from_transaction(initial)
        self.load(initial)

    @property
    def allowed_categories(self) -> Mapping[str, str]:
        """Key -> label mapping of categories selectable for the current type."""

        return categories_for_type(self.txn_type)

    @property
    def is_ready(self) -> bool:
        """True once the draft validated and no submission is running."""

        return self._validated and not self.errors and not self.submitting

    def to_request(self) -> TransactionRequest:
        """Map the validated draft onto the creation request shape."""

        if not self._validated:
            raise ValueError("Transaction form must validate before building a request")
        request: TransactionRequest = {
            "account_id": self.account_id,
            "type": self.txn_type,
            "description": self.description,
            "category": self.category,
            "date": self.occurred_on,  # type: ignore[typeddict-item]
            "amount": self.amount,  # type: ignore[typeddict-item]
        }
        if self.notes is not None:
            request["notes"] = self.notes
        return request

    def form_values(self) -> dict[str, str]:
        """Convert the draft into HTML-friendly string values."""

        date_value = self.raw_data.get("date", "") if "date" in self._unparsed else ""
        if self.occurred_on is not None:
            date_value = self.occurred_on.isoformat()

        amount_value = self.raw_data.get("amount", "") if "amount" in self._unparsed else ""
        if self.amount is not None and math.isfinite(self.amount):
            amount_value = _format_amount(self.amount)

        return {
            "account_id": self.account_id,
            "type": self.txn_type,
            "description": self.description,
            "category": self.category,
            "date": date_value,
            "amount": amount_value,
            "notes": self.notes or "",
        }

    def field_errors(self, name: str) -> list[str]:
        return self.errors.get(name, [])

    def _coerce_date(self, value: Any) -> Optional[date]:
        if value is None:
            return None
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        text = str(value).strip()
        if not text:
            return None
        try:
            if len(text) == 10:
                return datetime.strptime(text, "%Y-%m-%d").date()
            return datetime.fromisoformat(text).date()
        except ValueError:
            self._unparsed.add("date")
            return None

    def _coerce_amount(self, value: Any) -> Optional[float]:
        if value is None or isinstance(value, bool):
            return None
        if isinstance(value, (int, float, Decimal)):
            return float(value)
        text = str(value).strip()
        if not text:
            return None
        try:
            return float(text)
        except ValueError:
            self._unparsed.add("amount")
            return None

    def _add_error(self, field_name: str, message: str) -> None:
        """Accumulate validation errors for a specific field."""

        self.errors.setdefault(field_name, []).append(message)


def _format_amount(amount: float) -> str:
    """Two decimals when that is exact, otherwise the full value."""

    text = f"{amount:.2f}"
    if float(text) == amount:
        return text
    return repr(amount)


def initial_values_from_transaction(transaction: Transaction) -> dict[str, Any]:
    """Draft values seeded from a stored transaction.

    The date is left out so a copied transaction defaults to today.
    """

    return {
        "account_id": str(transaction.account_id) if transaction.account_id else "",
        "type": transaction.txn_type or EXPENSE,
        "description": transaction.description or "",
        "category": transaction.category or "",
        "amount": transaction.amount,
        "notes": transaction.notes or "",
    }
