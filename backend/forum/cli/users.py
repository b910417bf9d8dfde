"""Flask CLI commands for operator-only account management."""

from __future__ import annotations

import logging

import click
from flask.cli import with_appcontext

from forum.services._shared.errors import UserNotFound
from forum.services.accounts import AccountService

LOGGER = logging.getLogger(__name__)


@click.group("users")
def users_cli() -> None:
    """Account administration commands."""


@users_cli.command("promote")
@click.argument("email")
@with_appcontext
def promote_command(email: str) -> None:
    """Grant the ADMIN role to the account registered under EMAIL."""
    try:
        principal = AccountService().promote(email.strip().lower())
    except UserNotFound as exc:
        raise click.ClickException(f"No account registered under {email}.") from exc
    LOGGER.info("Promoted account %s to ADMIN", principal.id)
    click.echo(f"{principal.email} is now {principal.role}.")
