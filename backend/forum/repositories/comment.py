"""Comment and comment-like repositories.

``CommentRepository`` exposes the parent/child lookups the content tree
service walks: direct children of a comment and root comments of a post.
"""

from __future__ import annotations

from sqlalchemy import delete, func, select

from forum.models.comment import Comment, CommentLike
from forum.repositories.base import BaseRepository, Page, Pagination, paginate_select


class CommentRepository(BaseRepository[Comment]):
    """Persistence-only repository for :class:`Comment`."""

    model = Comment

    def _sortable_fields(self):
        return {"id": Comment.id, "created_at": Comment.created_at}

    def _filterable_fields(self):
        return {
            "post_id": Comment.post_id,
            "user_id": Comment.user_id,
            "parent_id": Comment.parent_id,
        }

    def _updatable_fields(self):
        return {"content"}

    # ---------------------------- Tree lookups ----------------------------

    def child_ids(self, parent_id: int) -> list[int]:
        """Ids of the direct replies to ``parent_id``, oldest first."""
        stmt = select(Comment.id).where(Comment.parent_id == parent_id).order_by(Comment.id)
        return list(self.session.execute(stmt).scalars().all())

    def root_ids_for_post(self, post_id: int) -> list[int]:
        """Ids of the comments on ``post_id`` that reply to nothing."""
        stmt = (
            select(Comment.id)
            .where(Comment.post_id == post_id, Comment.parent_id.is_(None))
            .order_by(Comment.id)
        )
        return list(self.session.execute(stmt).scalars().all())

    def list_for_post(self, post_id: int) -> list[Comment]:
        return self.list(filters={"post_id": post_id}, sort=["created_at"])

    def delete_by_id(self, comment_id: int) -> int:
        return self.delete_where(Comment.id, comment_id)


class CommentLikeRepository(BaseRepository[CommentLike]):
    """Likes on comments, addressable by comment id."""

    model = CommentLike

    def _filterable_fields(self):
        return {"user_id": CommentLike.user_id, "comment_id": CommentLike.comment_id}

    def find(self, *, user_id: int, comment_id: int) -> CommentLike | None:
        return self.find_one(user_id=user_id, comment_id=comment_id)

    def remove(self, *, user_id: int, comment_id: int) -> int:
        stmt = delete(CommentLike).where(
            CommentLike.user_id == user_id, CommentLike.comment_id == comment_id
        )
        return int(self.session.execute(stmt).rowcount or 0)

    def counts_for_comments(self, comment_ids: list[int]) -> dict[int, int]:
        """Return ``{comment_id: likes}`` for the given comments."""
        if not comment_ids:
            return {}
        stmt = (
            select(CommentLike.comment_id, func.count())
            .where(CommentLike.comment_id.in_(comment_ids))
            .group_by(CommentLike.comment_id)
        )
        return {comment_id: int(n) for comment_id, n in self.session.execute(stmt).all()}

    def delete_for_comment(self, comment_id: int) -> int:
        return self.delete_where(CommentLike.comment_id, comment_id)

    # ---------------------------- Per-user lookups ----------------------------

    def count_by_user(self, user_id: int) -> int:
        return self.count(user_id=user_id)

    def liked_comments(self, user_id: int, pagination: Pagination) -> Page[Comment]:
        """Page of the comments ``user_id`` liked, most recently liked first."""
        stmt = (
            select(Comment)
            .join(CommentLike, CommentLike.comment_id == Comment.id)
            .where(CommentLike.user_id == user_id)
            .order_by(CommentLike.created_at.desc(), CommentLike.id.desc())
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
