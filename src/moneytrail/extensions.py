"""Database and extension wiring for MoneyTrail."""

from __future__ import annotations

from flask import Flask, current_app
from sqlalchemy.engine import Engine

from .config import BaseConfig
from .infra.database import SessionFactory, create_db_engine, create_session_factory, init_database
from .services.revalidation import ListingCache
from .services.submission import SubmissionTokens

_ENGINE_KEY = "moneytrail.engine"
_SESSION_FACTORY_KEY = "moneytrail.session_factory"
_LISTING_CACHE_KEY = "moneytrail.listing_cache"
_SUBMISSION_TOKENS_KEY = "moneytrail.submission_tokens"


def init_db(app: Flask) -> None:
    """Initialize the SQLModel engine using configuration from the app."""

    config: BaseConfig = app.config["MONEYTRAIL_CONFIG"]
    engine = create_db_engine(config)
    init_database(engine)

    app.extensions[_ENGINE_KEY] = engine
    app.extensions[_SESSION_FACTORY_KEY] = create_session_factory(engine)
    app.extensions[_LISTING_CACHE_KEY] = ListingCache()
    app.extensions[_SUBMISSION_TOKENS_KEY] = SubmissionTokens()


def get_engine() -> Engine:
    """Return the engine bound to the current application."""

    engine = current_app.extensions.get(_ENGINE_KEY)
    if engine is None:
        raise RuntimeError("Database engine not initialized")
    return engine


def get_session_factory() -> SessionFactory:
    """Return the session factory bound to the current application."""

    factory = current_app.extensions.get(_SESSION_FACTORY_KEY)
    if factory is None:
        raise RuntimeError("Database engine not initialized")
    return factory


def get_listing_cache() -> ListingCache:
    """Return the per-application listing cache."""

    return current_app.extensions[_LISTING_CACHE_KEY]


def get_submission_tokens() -> SubmissionTokens:
    """Return the one-time form tokens guarding against duplicate submissions."""

    return current_app.extensions[_SUBMISSION_TOKENS_KEY]
