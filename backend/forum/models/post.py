"""Post and post-like models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Post(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Forum post authored by a principal.

    Notes
    -----
    Comments and likes reference posts without ORM cascades: removal goes
    through the content tree service so deletion order stays explicit
    (likes, then comment subtrees leaves-first, then the post).
    """

    __tablename__ = "posts"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (Index("ix_posts_user_id", "user_id"),)

    author: Mapped[User] = relationship("User", lazy="joined")


class PostLike(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Like given by a principal to a post. Unique per (user, post)."""

    __tablename__ = "post_likes"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "post_id", name="uq_post_likes_user_post"),
        Index("ix_post_likes_post_id", "post_id"),
    )
