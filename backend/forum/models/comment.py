"""Threaded comment and comment-like models."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import ForeignKey, Index, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from forum.core.extensions import db

from .base import PKMixin, ReprMixin, TimestampMixin

if TYPE_CHECKING:
    from .user import User


class Comment(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """
    Comment on a post, optionally replying to another comment.

    Fields
    ------
    post_id : int
        Post the comment belongs to.
    user_id : int
        Author.
    parent_id : int | None
        Replied-to comment. Must belong to the same post; ``None`` for roots.
    content : str
        Comment body.

    Comments of a post form a forest. Replies are removed by the content
    tree service before their parent, never by a database cascade.
    """

    __tablename__ = "comments"

    post_id: Mapped[int] = mapped_column(ForeignKey("posts.id"), nullable=False)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(ForeignKey("comments.id"), nullable=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        Index("ix_comments_post_id", "post_id"),
        Index("ix_comments_parent_id", "parent_id"),
    )

    author: Mapped[User] = relationship("User", lazy="joined")


class CommentLike(PKMixin, TimestampMixin, ReprMixin, db.Model):
    """Like given by a principal to a comment. Unique per (user, comment)."""

    __tablename__ = "comment_likes"

    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False)
    comment_id: Mapped[int] = mapped_column(ForeignKey("comments.id"), nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "comment_id", name="uq_comment_likes_user_comment"),
        Index("ix_comment_likes_comment_id", "comment_id"),
    )
