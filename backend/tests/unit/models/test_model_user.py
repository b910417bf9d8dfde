"""Tests for the User model."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from forum.models.user import Role, User, UserStatus
from sqlalchemy.exc import IntegrityError


class TestUser:
    def test_password_hashing(self, session):
        u = User(email="Test@Example.com", name="tester")
        u.password = "secret123"
        session.add(u)
        session.commit()
        assert u.verify_password("secret123") is True
        assert u.verify_password("wrong") is False

    def test_password_is_write_only(self):
        u = User(email="a@example.com", name="u1")
        u.password = "x"
        with pytest.raises(AttributeError):
            _ = u.password

    def test_empty_password_rejected(self):
        with pytest.raises(ValueError):
            User(email="a@example.com", name="u1").password = ""

    def test_email_normalized_and_unique(self, session):
        u1 = User(email="Alice@Example.com", name="alice")
        u1.password = "pw"
        session.add(u1)
        session.commit()
        assert u1.email == "alice@example.com"

        u2 = User(email="alice@example.com", name="alice2")
        u2.password = "pw"
        session.add(u2)
        with pytest.raises(IntegrityError):
            session.commit()
        session.rollback()

    def test_defaults_after_insert(self, session):
        u = User(email="d@example.com", name="dee")
        u.password = "pw"
        session.add(u)
        session.commit()
        assert u.role is Role.USER
        assert u.status is UserStatus.NORMAL
        assert u.refresh_token is None

    @pytest.mark.parametrize("email", ["", "no-at-sign", "x@nodot"])
    def test_email_validation(self, email):
        with pytest.raises(ValueError):
            User(email=email, name="n")

    def test_blank_name_rejected(self):
        with pytest.raises(ValueError):
            User(email="n@example.com", name="   ")


class TestResignation:
    def test_resign_clears_refresh_token_and_stamps_time(self):
        u = User(email="r@example.com", name="r", status=UserStatus.NORMAL)
        u.refresh_token = "Bearer abc"
        when = datetime(2026, 3, 1, tzinfo=UTC)

        u.resign(when)

        assert u.is_resigned
        assert u.refresh_token is None
        assert u.status_changed_at == when

    def test_resigned_is_terminal(self):
        u = User(email="t@example.com", name="t", status=UserStatus.RESIGNED)
        with pytest.raises(ValueError, match="cannot be reactivated"):
            u.status = UserStatus.NORMAL

    def test_is_admin(self):
        assert User(email="a@example.com", name="a", role=Role.ADMIN).is_admin
        assert not User(email="b@example.com", name="b", role=Role.USER).is_admin
