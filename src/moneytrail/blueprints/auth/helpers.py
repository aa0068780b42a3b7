"""Session helpers shared by the blueprints."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Optional, TypeVar

from flask import flash, redirect, request, session, url_for

from ...models.user import User

F = TypeVar("F", bound=Callable)

_SESSION_KEY = "user_id"


def current_user_id() -> Optional[int]:
    """Return the signed-in user's id, or None for anonymous requests."""

    raw = session.get(_SESSION_KEY)
    if raw is None:
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        session.pop(_SESSION_KEY, None)
        return None


def login_user(user: User) -> None:
    session.clear()
    session[_SESSION_KEY] = user.id


def logout_user() -> None:
    session.clear()


def login_required(view: F) -> F:
    """Redirect anonymous requests to the login page."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        if current_user_id() is None:
            flash("Please sign in to continue.", "warning")
            return redirect(url_for("auth.login", next=request.path))
        return view(*args, **kwargs)

    return wrapped  # type: ignore[return-value]
