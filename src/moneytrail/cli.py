"""Flask CLI commands for MoneyTrail."""

from __future__ import annotations

import click


def init_app(app) -> None:
    """Register CLI commands on the Flask app."""

    @app.cli.command("moneytrail-create-user")
    @click.argument("username")
    @click.password_option()
    def create_user_command(username: str, password: str) -> None:
        """Create a user that can sign in to the web app."""

        from .extensions import get_session_factory
        from .services import auth

        try:
            user = auth.create_user(
                username=username, password=password, session_factory=get_session_factory()
            )
        except ValueError as exc:
            raise click.ClickException(str(exc)) from exc
        click.echo(f"Created user {user.username} (id={user.id})")

    @app.cli.command("moneytrail-seed")
    @click.option("--username", default="demo", show_default=True)
    @click.option("--password", default="demo-password", show_default=True)
    def seed_command(username: str, password: str) -> None:
        """Create a demo user with a default checking account and a savings account."""

        from .extensions import get_session_factory
        from .services import accounts, auth

        session_factory = get_session_factory()
        user = auth.get_user_by_username(username, session_factory)
        if user is None:
            user = auth.create_user(
                username=username, password=password, session_factory=session_factory
            )
            click.echo(f"Created user {user.username}")

        options = accounts.get_all_user_accounts_by_user_id(
            user.id, session_factory=session_factory  # type: ignore[arg-type]
        )
        existing = {acc.name for acc in options}
        for name, is_default in (("Checking", True), ("Savings", False)):
            if name in existing:
                continue
            accounts.create_account(
                user.id,  # type: ignore[arg-type]
                name,
                is_default=is_default,
                session_factory=session_factory,
            )
            click.echo(f"Created account {name}{' (default)' if is_default else ''}")
        click.echo("Seed complete.")
