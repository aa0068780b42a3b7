"""Authentication blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("auth", __name__, url_prefix="/auth")

from . import routes  # noqa: E402,F401 - ensure routes get registered
from .helpers import current_user_id, login_required  # noqa: E402

__all__ = ["bp", "current_user_id", "login_required"]
