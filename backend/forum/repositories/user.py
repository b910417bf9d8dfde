"""User repository for principal lookup and session-token persistence."""

from __future__ import annotations

from typing import cast

from sqlalchemy import select

from forum.models.user import User
from forum.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Persistence-only repository for :class:`User`.

    It stores the refresh token value handed to it but never issues or
    parses tokens.
    """

    model = User

    def _sortable_fields(self):
        return {"id": User.id, "email": User.email, "created_at": User.created_at}

    def _filterable_fields(self):
        return {"email": User.email, "role": User.role, "status": User.status}

    def _updatable_fields(self):
        return {"name"}

    # ---------------------------- Lookup helpers ----------------------------

    def get_by_email(self, email: str) -> User | None:
        """Fetch a user by email (case-insensitive).

        :param email: Email address to normalise and search.
        :type email: str
        :returns: User instance or ``None`` when not found.
        :rtype: User | None
        """
        stmt = select(User).where(User.email == email.lower().strip())
        result = self.session.execute(stmt).scalars().first()
        return cast(User | None, result)

    def exists_by_email(self, email: str) -> bool:
        """Return ``True`` when any account (including resigned) uses ``email``."""
        stmt = select(User.id).where(User.email == email.lower().strip())
        return bool(self.session.execute(stmt).first())

    # ---------------------------- Session token ----------------------------

    def store_refresh_token(self, user_id: int, value: str | None) -> None:
        """Overwrite the stored refresh token (last write wins).

        :param user_id: Identifier of the principal.
        :param value: Transport-form refresh token, or ``None`` to revoke.
        :raises ValueError: If the user does not exist.
        """
        user = self.get(user_id)
        if user is None:
            raise ValueError(f"User {user_id} not found.")
        user.refresh_token = value
        self.flush()
