"""Login, registration and logout routes."""

from __future__ import annotations

from urllib.parse import urlparse

from flask import current_app, flash, redirect, render_template, request, url_for

from ...extensions import get_session_factory
from ...services import auth as auth_service
from . import bp
from .helpers import login_user, logout_user


def _safe_next(target: str | None) -> str:
    """Only follow relative redirect targets."""

    if target and not urlparse(target).netloc and target.startswith("/"):
        return target
    return url_for("overview.dashboard")


@bp.get("/login")
def login():
    return render_template("auth/login.html", next_url=request.args.get("next", ""))


@bp.post("/login")
def login_submit():
    username = request.form.get("username", "")
    password = request.form.get("password", "")
    user = auth_service.authenticate(
        username=username, password=password, session_factory=get_session_factory()
    )
    if user is None:
        flash("Invalid username or password.", "danger")
        return (
            render_template("auth/login.html", next_url=request.form.get("next", "")),
            401,
        )

    login_user(user)
    current_app.logger.info("User %s signed in", user.id)
    return redirect(_safe_next(request.form.get("next")))


@bp.get("/register")
def register():
    return render_template("auth/register.html")


@bp.post("/register")
def register_submit():
    try:
        user = auth_service.create_user(
            username=request.form.get("username", ""),
            password=request.form.get("password", ""),
            session_factory=get_session_factory(),
        )
    except ValueError as exc:
        flash(str(exc), "danger")
        return render_template("auth/register.html"), 400

    login_user(user)
    flash("Welcome! Create an account to start recording transactions.", "success")
    return redirect(url_for("accounts.list_accounts"))


@bp.post("/logout")
def logout():
    logout_user()
    flash("You have been signed out.", "info")
    return redirect(url_for("auth.login"))
