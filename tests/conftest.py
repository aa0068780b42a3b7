"""Pytest configuration and shared fixtures for MoneyTrail tests.

This module provides database fixtures, test data factories, and a configured
Flask app/client for testing services and routes without touching the real
app database.
"""

from __future__ import annotations

from datetime import date

import pytest
from sqlmodel import SQLModel, create_engine

# Import all models to ensure they're registered with SQLModel metadata
from moneytrail.models import Account, Transaction, User
from moneytrail.infra.database import create_session_factory

TEST_PASSWORD = "correct-horse-battery"


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine(tmp_path):
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    engine = create_engine(f"sqlite:///{tmp_path / 'test.db'}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the one the app builds from its engine."""

    return create_session_factory(db_engine)


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def user_factory(session_factory):
    """Factory for creating users without going through password hashing."""

    def _create_user(username: str = "tester") -> User:
        with session_factory() as session:
            user = User(username=username, password_hash="dummy-hash")
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
            return user

    return _create_user


@pytest.fixture
def user(user_factory) -> User:
    """Create a default user for scoping data."""

    return user_factory("tester")


@pytest.fixture
def account_factory(session_factory, user):
    """Factory for creating test accounts.

    Returns:
        Callable: Function that creates and persists Account instances
    """

    def _create_account(
        name: str = "Checking",
        *,
        is_default: bool = False,
        currency: str = "USD",
        owner: User | None = None,
    ) -> Account:
        owner = owner or user
        with session_factory() as session:
            account = Account(
                name=name, currency=currency, is_default=is_default, user_id=owner.id
            )
            session.add(account)
            session.commit()
            session.refresh(account)
            session.expunge(account)
            return account

    return _create_account


@pytest.fixture
def transaction_factory(session_factory, user):
    """Factory for creating test transactions.

    Returns:
        Callable: Function that creates and persists Transaction instances
    """

    def _create_transaction(
        account: Account,
        amount: float = 10.0,
        *,
        txn_type: str = "expense",
        category: str = "food",
        description: str = "Test transaction",
        occurred_on: date | None = None,
        notes: str | None = None,
        owner: User | None = None,
    ) -> Transaction:
        owner = owner or user
        with session_factory() as session:
            txn = Transaction(
                user_id=owner.id,
                account_id=account.id,
                txn_type=txn_type,
                category=category,
                description=description,
                occurred_on=occurred_on or date.today(),
                amount=amount,
                notes=notes,
            )
            session.add(txn)
            session.commit()
            session.refresh(txn)
            session.expunge(txn)
            return txn

    return _create_transaction


# =============================================================================
# Notification sink
# =============================================================================


class RecordingNotifier:
    """Notifier that keeps every message for assertions."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


# =============================================================================
# Flask app fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    from moneytrail import create_app

    monkeypatch.setenv("MONEYTRAIL_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("MONEYTRAIL_DATABASE_URL", f"sqlite:///{tmp_path / 'app.db'}")
    monkeypatch.setenv("MONEYTRAIL_SECRET_KEY", "test-secret")
    app = create_app("testing")
    yield app

    from moneytrail.extensions import get_engine

    with app.app_context():
        get_engine().dispose()


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def app_session_factory(app):
    from moneytrail.extensions import get_session_factory

    with app.app_context():
        return get_session_factory()


@pytest.fixture()
def app_user(app, app_session_factory) -> User:
    """A registered user inside the app database."""

    from moneytrail.services import auth

    return auth.create_user(
        username="alice", password=TEST_PASSWORD, session_factory=app_session_factory
    )


@pytest.fixture()
def auth_client(client, app_user):
    """Test client signed in as ``app_user``."""

    response = client.post(
        "/auth/login", data={"username": app_user.username, "password": TEST_PASSWORD}
    )
    assert response.status_code == 302
    return client
