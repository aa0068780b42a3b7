"""MoneyTrail application factory."""

from __future__ import annotations

import os
from importlib import import_module
from typing import Iterable

from flask import Flask, redirect, url_for

from .config import BaseConfig, DevConfig, TestingConfig

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestingConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[str]:
    """Yield blueprint import paths registered on the app."""

    yield "moneytrail.blueprints.auth"
    yield "moneytrail.blueprints.overview"
    yield "moneytrail.blueprints.accounts"
    yield "moneytrail.blueprints.transactions"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__)
    config_obj = _resolve_config(config_name or os.getenv("MONEYTRAIL_ENV"))()
    app.config.from_object(config_obj)
    app.config["MONEYTRAIL_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    # Imported lazily so importing model classes does not pull in Flask wiring.
    from .extensions import init_db

    init_db(app)
    _register_blueprints(app)

    from .blueprints import overview

    overview.init_app(app)

    from . import cli

    cli.init_app(app)

    @app.get("/")
    def index():
        return redirect(url_for("overview.dashboard"))

    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path in _blueprint_paths():
        module = import_module(dotted_path)
        blueprint = getattr(module, "bp")
        app.register_blueprint(blueprint)


__all__ = ["BaseConfig", "DevConfig", "TestingConfig", "create_app"]
