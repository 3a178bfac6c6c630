"""Flask CLI commands provisioning the principals table and demo accounts."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from authgate.core.extensions import db
from authgate.models.user import Role
from authgate.uow import SQLAlchemyUnitOfWork

LOGGER = logging.getLogger(__name__)

SEED_PASSWORD = "Password123!"

SEED_USERS: tuple[dict[str, object], ...] = (
    {"email": "admin@test.com", "first_name": "Admin", "last_name": "User", "role": Role.ADMIN},
    {"email": "user@test.com", "first_name": "Regular", "last_name": "User", "role": Role.USER},
)


def seed_users(password: str = SEED_PASSWORD) -> dict[str, int]:
    """
    Create the demo principals that are missing.

    :returns: ``{"created": n, "existing": m}`` counters.
    """
    created = existing = 0
    with SQLAlchemyUnitOfWork() as uow:
        for entry in SEED_USERS:
            if uow.users.exists_by_email(str(entry["email"])):
                existing += 1
                continue
            uow.users.create({**entry, "password": password})
            created += 1
    LOGGER.info("users.seeded", extra={"reason": f"created={created} existing={existing}"})
    return {"created": created, "existing": existing}


@click.group("users")
def users_cli() -> None:
    """Principal store provisioning commands."""


@users_cli.command("init-db")
@with_appcontext
def init_db_command() -> None:
    """Create all tables that do not exist yet."""
    db.create_all()
    click.echo("Tables created.")


@users_cli.command("seed")
@click.option("--password", default=SEED_PASSWORD, show_default=True, help="Password for seeded accounts.")
@with_appcontext
def seed_command(password: str) -> None:
    """Insert ``admin@test.com`` (ADMIN) and ``user@test.com`` (USER) if missing."""
    summary = seed_users(password)
    click.echo(f"Seed summary: created={summary['created']} existing={summary['existing']}")
    for entry in SEED_USERS:
        click.echo(f"  {entry['email']} ({Role(entry['role']).value})")
