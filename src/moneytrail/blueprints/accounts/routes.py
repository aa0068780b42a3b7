"""Account management routes."""

from __future__ import annotations

from flask import current_app, flash, redirect, render_template, request, url_for

from ...extensions import get_listing_cache, get_session_factory
from ...services import accounts as account_service
from ..auth.helpers import current_user_id, login_required
from . import bp


@bp.get("/")
@login_required
def list_accounts():
    accounts = account_service.get_all_user_accounts_by_user_id(
        current_user_id(), session_factory=get_session_factory()
    )
    return render_template("accounts/index.html", accounts=accounts)


@bp.post("/")
@login_required
def create_account():
    try:
        account = account_service.create_account(
            current_user_id(),
            request.form.get("name", ""),
            currency=request.form.get("currency", "USD"),
            is_default=request.form.get("is_default") == "on",
            session_factory=get_session_factory(),
        )
    except ValueError as exc:
        flash(str(exc), "danger")
        return redirect(url_for("accounts.list_accounts"))

    get_listing_cache().revalidate(current_app.config.get("LISTING_PATH", "/transactions"))
    flash(f"Account '{account.name}' created.", "success")
    return redirect(url_for("accounts.list_accounts"))


@bp.post("/<int:account_id>/default")
@login_required
def make_default(account_id: int):
    try:
        account = account_service.set_default_account(
            current_user_id(), account_id, session_factory=get_session_factory()
        )
    except LookupError:
        flash("Account could not be found.", "warning")
        return redirect(url_for("accounts.list_accounts"))

    flash(f"'{account.name}' is now your default account.", "success")
    return redirect(url_for("accounts.list_accounts"))
