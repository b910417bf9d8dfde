"""Recently used password hashes, one row per password a principal has set."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column
from werkzeug.security import check_password_hash

from forum.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin


class PasswordHistory(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    A password hash a principal has used, newest by ``created_at``.

    Only the most recent entries are kept; the profile service prunes older
    rows whenever a new password is recorded.
    """

    __tablename__ = "password_history"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    password_hash: Mapped[str] = mapped_column(String(254), nullable=False)

    __table_args__ = (Index("ix_password_history_user_id", "user_id"),)

    def matches(self, raw: str) -> bool:
        """Return ``True`` if ``raw`` hashes to this entry."""
        return bool(check_password_hash(self.password_hash, raw))
