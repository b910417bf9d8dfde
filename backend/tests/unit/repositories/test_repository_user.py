"""Unit tests for UserRepository."""

import pytest
from forum.repositories.user import UserRepository
from tests.factories.user import UserFactory


class TestUserRepository:
    """Ensure ``UserRepository`` performs core persistence operations."""

    @pytest.fixture()
    def repo(self):
        return UserRepository()

    def test_create_and_get_user(self, repo, session):
        """Create a user and fetch it by email to verify retrieval."""
        u = UserFactory(email="alice@example.com", name="alice")
        session.commit()

        fetched = repo.get_by_email("  ALICE@example.com ")
        assert fetched is not None
        assert fetched.id == u.id
        assert fetched.name == "alice"

    def test_exists_by_email(self, repo, session):
        """Return existence flags for known and unknown email addresses."""
        UserFactory(email="bob@example.com")
        session.commit()

        assert repo.exists_by_email("bob@example.com")
        assert not repo.exists_by_email("nonexistent@example.com")

    def test_store_refresh_token_overwrites_previous_value(self, repo, session):
        u = UserFactory(refresh_token="Bearer first")
        session.commit()

        repo.store_refresh_token(u.id, "Bearer second")
        session.commit()
        assert repo.get(u.id).refresh_token == "Bearer second"

        repo.store_refresh_token(u.id, None)
        session.commit()
        assert repo.get(u.id).refresh_token is None

    def test_store_refresh_token_for_unknown_user(self, repo):
        with pytest.raises(ValueError):
            repo.store_refresh_token(424242, "Bearer x")

    def test_update_only_allows_name(self, repo, session):
        u = UserFactory(name="old")
        session.commit()

        repo.update(u, name="new")
        assert u.name == "new"

        with pytest.raises(ValueError):
            repo.update(u, email="other@example.com")
