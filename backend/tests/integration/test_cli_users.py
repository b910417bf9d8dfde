"""Operator CLI: ``flask users promote``."""

from __future__ import annotations

from forum.models.user import Role, User
from tests.factories.user import UserFactory


def test_promote_grants_admin(app, session):
    user = UserFactory(email="ops@example.com")
    session.commit()

    result = app.test_cli_runner().invoke(args=["users", "promote", "OPS@example.com"])

    assert result.exit_code == 0
    assert "ops@example.com is now ADMIN" in result.output
    assert session.get(User, user.id).role is Role.ADMIN


def test_promote_unknown_account_fails(app, session):
    result = app.test_cli_runner().invoke(args=["users", "promote", "ghost@example.com"])

    assert result.exit_code != 0
    assert "No account registered" in result.output
