"""Transaction listing and entry routes."""

from __future__ import annotations

from datetime import date
from functools import partial

from flask import current_app, flash, redirect, render_template, request, url_for
from werkzeug.exceptions import NotFound

from ...constants.categories import TRANSACTION_TYPES, category_label, description_placeholder
from ...extensions import get_listing_cache, get_session_factory, get_submission_tokens
from ...services import accounts as account_service
from ...services import transactions as transaction_service
from ...services.account_resolver import AccountResolver
from ...services.submission import FlashNotifier, SubmissionPipeline, SubmissionStatus
from ..auth.helpers import current_user_id, login_required
from . import bp
from .forms import EARLIEST_DATE, TransactionForm


def _listing_path() -> str:
    return current_app.config.get("LISTING_PATH", "/transactions")


def _account_fetcher():
    return partial(
        account_service.get_all_user_accounts_by_user_id,
        session_factory=get_session_factory(),
    )


def _load_listing(user_id: int) -> dict:
    """Build the payload rendered by the listing page."""

    session_factory = get_session_factory()
    transactions = transaction_service.list_transactions(user_id, session_factory=session_factory)
    accounts = account_service.get_all_user_accounts_by_user_id(
        user_id, session_factory=session_factory
    )
    account_names = {acc.id: acc.name for acc in accounts}
    rows = [
        {
            "id": txn.id,
            "date": txn.occurred_on.isoformat(),
            "type": txn.txn_type,
            "description": txn.description,
            "category": category_label(txn.category, txn.txn_type),
            "account": account_names.get(str(txn.account_id), f"Account #{txn.account_id}"),
            "amount": txn.signed_amount,
            "notes": txn.notes or "",
        }
        for txn in transactions
    ]
    return {
        "rows": rows,
        "summary": transaction_service.compute_summary(transactions),
        "has_accounts": bool(accounts),
    }


def _render_form(form: TransactionForm, resolver: AccountResolver, status: int = 200):
    return (
        render_template(
            "transactions/form.html",
            form=form,
            form_values=form.form_values(),
            accounts=resolver.accounts,
            accounts_failed=resolver.failed,
            categories=form.allowed_categories,
            transaction_types=TRANSACTION_TYPES,
            description_placeholder=description_placeholder(form.txn_type),
            min_date=EARLIEST_DATE.isoformat(),
            max_date=date.today().isoformat(),
            submission_token=get_submission_tokens().issue(current_user_id()),
            form_action=url_for("transactions.create_transaction"),
            list_url=url_for("transactions.list_transactions"),
        ),
        status,
    )


@bp.get("/")
@login_required
def list_transactions():
    """Display the signed-in user's transactions."""

    user_id = current_user_id()
    listing = get_listing_cache().get_or_load(
        _listing_path(), user_id, partial(_load_listing, user_id)
    )
    return render_template("transactions/index.html", **listing)


@bp.get("/new")
@login_required
def new_transaction():
    """Render the entry form primed with the default account.

    ``?from=<id>`` copies an existing transaction into the draft and
    ``?type=income`` preselects the type.
    """

    user_id = current_user_id()
    form = TransactionForm()

    source_id = request.args.get("from", type=int)
    if source_id is not None:
        source = transaction_service.get_transaction(
            source_id, user_id=user_id, session_factory=get_session_factory()
        )
        if source is None:
            raise NotFound(f"Transaction {source_id} was not found")
        form.reset(source)

    requested_type = request.args.get("type")
    if requested_type in TRANSACTION_TYPES:
        form.set_field("type", requested_type)

    resolver = AccountResolver(form, _account_fetcher())
    resolver.load_accounts(user_id)
    return _render_form(form, resolver)


@bp.post("/")
@login_required
def create_transaction():
    """Switch the draft's type or submit it."""

    user_id = current_user_id()
    form = TransactionForm.from_mapping(request.form)
    resolver = AccountResolver(form, _account_fetcher())
    resolver.load_accounts(user_id, select_default=False)

    switch_to = request.form.get("switch_type")
    if switch_to is not None:
        # Category is carried over as-is, even when it belongs to the other type.
        form.set_field("type", switch_to)
        return _render_form(form, resolver)

    closed: list[bool] = []
    pipeline = SubmissionPipeline(
        create_transaction=partial(
            transaction_service.create_transaction,
            user_id=user_id,
            session_factory=get_session_factory(),
        ),
        notifier=FlashNotifier(),
        revalidate=get_listing_cache().revalidate,
        on_close=lambda: closed.append(True),
        claim=partial(
            get_submission_tokens().consume, user_id, request.form.get("submission_token")
        ),
        listing_path=_listing_path(),
    )
    outcome = pipeline.submit(form)
    if closed:
        return redirect(url_for("transactions.list_transactions"))

    if outcome.status is SubmissionStatus.BUSY:
        flash(
            "This form was already submitted; check the transaction list before retrying.",
            "warning",
        )
        status = 409
    elif outcome.status is SubmissionStatus.INVALID:
        status = 400
    else:
        status = 422
    return _render_form(form, resolver, status)
