"""Overview dashboard routes."""

from __future__ import annotations

from flask import current_app, render_template

from ...extensions import get_session_factory
from ..auth.helpers import current_user_id, login_required
from . import bp
from .services import load_overview_summary


def _resolve_summary_loader():
    state = current_app.extensions.get("overview", {})
    loader = state.get("summary_loader")
    if callable(loader):
        return loader
    return load_overview_summary


@bp.get("/")
@login_required
def dashboard():
    """Render balances and spending highlights for the signed-in user."""

    summary_loader = _resolve_summary_loader()
    summary = summary_loader(current_user_id(), session_factory=get_session_factory())

    return render_template("overview/index.html", summary=summary)
