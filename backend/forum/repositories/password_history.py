"""Password-history repository: recent hashes per principal."""

from __future__ import annotations

from sqlalchemy import delete, select

from forum.models.password_history import PasswordHistory
from forum.repositories.base import BaseRepository


class PasswordHistoryRepository(BaseRepository[PasswordHistory]):
    """Persistence-only repository for :class:`PasswordHistory`."""

    model = PasswordHistory

    def _filterable_fields(self):
        return {"user_id": PasswordHistory.user_id}

    def recent_for_user(self, user_id: int, limit: int) -> list[PasswordHistory]:
        """Newest ``limit`` entries for ``user_id``, newest first."""
        stmt = (
            select(PasswordHistory)
            .where(PasswordHistory.user_id == user_id)
            .order_by(PasswordHistory.created_at.desc(), PasswordHistory.id.desc())
            .limit(limit)
        )
        return list(self.session.execute(stmt).scalars().all())

    def record(self, user_id: int, password_hash: str) -> PasswordHistory:
        return self.add(PasswordHistory(user_id=user_id, password_hash=password_hash))

    def prune(self, user_id: int, keep: int) -> int:
        """
        Delete all but the newest ``keep`` entries of ``user_id``.

        :returns: Rows removed.
        """
        kept = [entry.id for entry in self.recent_for_user(user_id, keep)]
        stmt = delete(PasswordHistory).where(PasswordHistory.user_id == user_id)
        if kept:
            stmt = stmt.where(PasswordHistory.id.not_in(kept))
        return int(self.session.execute(stmt).rowcount or 0)
