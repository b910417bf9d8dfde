# tests/unit/services/test_account_service.py
from __future__ import annotations

import pytest
from forum.models.user import Role, User, UserStatus
from forum.services._shared.errors import (
    BadCredentials,
    DuplicateAccount,
    NotLoggedIn,
    UserNotFound,
)
from forum.services.accounts import AccountService, ResignIn, SignupIn
from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from tests.helpers.services import ctx_for


def test_signup_creates_normal_user_with_hashed_password(session):
    out = AccountService().signup(
        SignupIn(email="New.User@Example.com", password="s3cret-pass", name="New")
    )

    assert out.email == "new.user@example.com"
    assert out.role == "USER"
    assert out.status == "NORMAL"
    user = session.get(User, out.id)
    assert user.password_hash != "s3cret-pass"
    assert user.verify_password("s3cret-pass")


def test_signup_rejects_taken_email(session):
    UserFactory(email="taken@example.com")
    session.commit()

    with pytest.raises(DuplicateAccount):
        AccountService().signup(SignupIn(email="taken@example.com", password="x" * 8, name="X"))


def test_signup_rejects_email_of_resigned_account(session):
    """
    GIVEN an account that has resigned
    WHEN someone signs up with the same email
    THEN the email is still considered taken
    """
    UserFactory(email="former@example.com", status=UserStatus.RESIGNED)
    session.commit()

    with pytest.raises(DuplicateAccount):
        AccountService().signup(SignupIn(email="former@example.com", password="x" * 8, name="F"))


def test_get_principal_returns_own_record(session):
    user = UserFactory(name="Mina")
    session.commit()

    out = AccountService(ctx=ctx_for(user)).get_principal()

    assert out.id == user.id
    assert out.name == "Mina"


def test_get_principal_requires_identity():
    with pytest.raises(NotLoggedIn):
        AccountService().get_principal()


def test_resign_is_terminal_and_drops_refresh_token(session):
    user = UserFactory(refresh_token="Bearer something")
    session.commit()

    out = AccountService(ctx=ctx_for(user)).resign(ResignIn(password=DEFAULT_PASSWORD))

    assert out.status == "RESIGNED"
    stored = session.get(User, user.id)
    assert stored.refresh_token is None
    assert stored.status_changed_at is not None
    with pytest.raises(ValueError):
        stored.status = UserStatus.NORMAL


def test_resign_with_wrong_password_changes_nothing(session):
    user = UserFactory()
    session.commit()

    with pytest.raises(BadCredentials):
        AccountService(ctx=ctx_for(user)).resign(ResignIn(password="not-it"))

    assert session.get(User, user.id).status is UserStatus.NORMAL


def test_promote_grants_admin(session):
    UserFactory(email="boss@example.com")
    session.commit()

    out = AccountService().promote("boss@example.com")

    assert out.role == "ADMIN"
    assert session.get(User, out.id).role is Role.ADMIN


def test_promote_unknown_email():
    with pytest.raises(UserNotFound):
        AccountService().promote("nobody@example.com")
