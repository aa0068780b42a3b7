"""Tests for the transaction form state and validation."""

from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from moneytrail.blueprints.transactions.forms import TransactionForm
from moneytrail.constants.categories import EXPENSE_CATEGORIES, INCOME_CATEGORIES


def _complete_form(**overrides) -> TransactionForm:
    values = {
        "account_id": "a1",
        "type": "expense",
        "description": "Coffee",
        "category": "food",
        "date": date(2024, 3, 1),
        "amount": 4.50,
    }
    values.update(overrides)
    return TransactionForm.from_mapping(values)


def test_complete_draft_is_valid():
    form = _complete_form()

    result = form.validate()

    assert result.valid is True
    assert result.errors == {}
    assert form.is_ready


def test_defaults_are_expense_dated_today():
    form = TransactionForm()

    assert form.txn_type == "expense"
    assert form.occurred_on == date.today()
    assert form.account_id == ""
    assert form.amount is None


@pytest.mark.parametrize(
    ("field", "value"),
    [
        ("account_id", ""),
        ("type", "transfer"),
        ("description", "   "),
        ("category", ""),
        ("date", None),
        ("amount", None),
    ],
)
def test_each_violated_rule_names_only_that_field(field, value):
    form = _complete_form(**{field: value})

    result = form.validate()

    assert result.valid is False
    assert list(result.errors) == [field]
    assert not form.is_ready


def test_multiple_errors_are_reported_together():
    form = TransactionForm.from_mapping({"description": "", "amount": "0"})

    result = form.validate()

    assert set(result.errors) == {"account_id", "description", "category", "amount"}


def test_negative_amount_is_rejected():
    form = _complete_form(amount=-5)

    result = form.validate()

    assert result.errors == {"amount": ["Amount must be greater than zero."]}


@pytest.mark.parametrize("value", [float("inf"), float("nan")])
def test_non_finite_amount_is_rejected(value):
    result = _complete_form(amount=value).validate()

    assert result.errors == {"amount": ["Amount must be a finite number."]}


def test_amount_text_is_parsed():
    form = _complete_form(amount=" 12.75 ")

    assert form.amount == pytest.approx(12.75)
    assert form.validate().valid


def test_unparseable_amount_reports_invalid_number():
    form = _complete_form(amount="twelve")

    result = form.validate()

    assert result.errors == {"amount": ["Enter a valid number for the amount."]}
    assert form.form_values()["amount"] == "twelve"


def test_date_before_1900_is_rejected():
    result = _complete_form(date=date(1899, 12, 31)).validate()

    assert result.errors == {"date": ["Date must be on or after 1900-01-01."]}


def test_date_range_bounds_are_inclusive():
    assert _complete_form(date=date(1900, 1, 1)).validate().valid
    assert _complete_form(date=date.today()).validate().valid


def test_future_date_is_rejected():
    tomorrow = date.today() + timedelta(days=1)

    result = _complete_form(date=tomorrow).validate()

    assert result.errors == {"date": ["Date cannot be in the future."]}


def test_date_accepts_iso_text_and_datetimes():
    assert _complete_form(date="2024-03-01").occurred_on == date(2024, 3, 1)
    assert _complete_form(date="2024-03-01T09:30").occurred_on == date(2024, 3, 1)
    assert _complete_form(date=datetime(2024, 3, 1, 8, 0)).occurred_on == date(2024, 3, 1)


def test_malformed_date_text_is_reported():
    result = _complete_form(date="03/01/2024").validate()

    assert result.errors == {"date": ["Enter a valid date (YYYY-MM-DD)."]}


def test_set_field_rejects_unknown_names():
    form = TransactionForm()

    with pytest.raises(KeyError):
        form.set_field("memo", "nope")


def test_set_field_clears_that_fields_error():
    form = _complete_form(description="")
    form.validate()
    assert "description" in form.errors

    form.set_field("description", "Lunch")

    assert "description" not in form.errors
    assert not form.is_ready  # needs a fresh validation


def test_switching_type_changes_categories_but_keeps_incompatible_category():
    form = _complete_form(type="expense", category="food")
    assert form.allowed_categories == EXPENSE_CATEGORIES

    form.set_field("type", "income")

    assert form.allowed_categories == INCOME_CATEGORIES
    # Known limitation: the expense category survives the switch.
    assert form.category == "food"
    assert "food" not in form.allowed_categories
    assert form.validate().valid


def test_to_request_renames_fields_without_transforming_values():
    form = _complete_form(notes="with oat milk")
    form.validate()

    assert form.to_request() == {
        "account_id": "a1",
        "type": "expense",
        "description": "Coffee",
        "category": "food",
        "date": date(2024, 3, 1),
        "amount": 4.50,
        "notes": "with oat milk",
    }


def test_to_request_requires_successful_validation():
    form = _complete_form(amount=-1)
    form.validate()

    with pytest.raises(ValueError):
        form.to_request()


def test_reset_restores_defaults_and_applies_initial_values():
    form = _complete_form(type="income", category="salary", notes="x")
    form.validate()

    form.reset({"description": "Rent", "amount": "1200"})

    assert form.txn_type == "expense"
    assert form.category == ""
    assert form.description == "Rent"
    assert form.amount == pytest.approx(1200.0)
    assert form.notes == ""
    assert form.errors == {}
    assert form.occurred_on == date.today()


def test_reset_from_stored_transaction_keeps_today(account_factory, transaction_factory):
    account = account_factory("Checking")
    source = transaction_factory(
        account,
        42.0,
        txn_type="income",
        category="freelance",
        description="Logo design",
        occurred_on=date(2023, 5, 4),
        notes="invoice 17",
    )
    form = TransactionForm()

    form.reset(source)

    assert form.account_id == str(account.id)
    assert form.txn_type == "income"
    assert form.category == "freelance"
    assert form.description == "Logo design"
    assert form.amount == pytest.approx(42.0)
    assert form.notes == "invoice 17"
    assert form.occurred_on == date.today()


def test_form_values_are_strings_for_rendering():
    form = _complete_form(amount=4.5)

    assert form.form_values() == {
        "account_id": "a1",
        "type": "expense",
        "description": "Coffee",
        "category": "food",
        "date": "2024-03-01",
        "amount": "4.50",
        "notes": "",
    }


@pytest.mark.parametrize(
    ("raw", "rendered"), [("4.555", "4.555"), ("0.004", "0.004"), ("12", "12.00")]
)
def test_form_values_keep_amount_precision(raw, rendered):
    form = _complete_form(amount=raw)

    value = form.form_values()["amount"]

    assert value == rendered
    assert float(value) == form.amount
