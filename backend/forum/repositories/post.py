"""Post and post-like repositories."""

from __future__ import annotations

from sqlalchemy import delete, func, select

from forum.models.post import Post, PostLike
from forum.repositories.base import BaseRepository, Page, Pagination, paginate_select


class PostRepository(BaseRepository[Post]):
    """Persistence-only repository for :class:`Post`."""

    model = Post

    def _sortable_fields(self):
        return {"id": Post.id, "created_at": Post.created_at, "title": Post.title}

    def _filterable_fields(self):
        return {"user_id": Post.user_id}

    def _updatable_fields(self):
        return {"title", "content"}

    def delete_by_id(self, post_id: int) -> int:
        return self.delete_where(Post.id, post_id)


class PostLikeRepository(BaseRepository[PostLike]):
    """Likes on posts, addressable by post id."""

    model = PostLike

    def _filterable_fields(self):
        return {"user_id": PostLike.user_id, "post_id": PostLike.post_id}

    def find(self, *, user_id: int, post_id: int) -> PostLike | None:
        return self.find_one(user_id=user_id, post_id=post_id)

    def remove(self, *, user_id: int, post_id: int) -> int:
        """Delete one user's like on a post; returns rows removed (0 or 1)."""
        stmt = delete(PostLike).where(PostLike.user_id == user_id, PostLike.post_id == post_id)
        return int(self.session.execute(stmt).rowcount or 0)

    def count_for_post(self, post_id: int) -> int:
        return self.count(post_id=post_id)

    def counts_for_posts(self, post_ids: list[int]) -> dict[int, int]:
        """Return ``{post_id: likes}`` for the given posts (missing means zero)."""
        if not post_ids:
            return {}
        stmt = (
            select(PostLike.post_id, func.count())
            .where(PostLike.post_id.in_(post_ids))
            .group_by(PostLike.post_id)
        )
        return {post_id: int(n) for post_id, n in self.session.execute(stmt).all()}

    def delete_for_post(self, post_id: int) -> int:
        return self.delete_where(PostLike.post_id, post_id)

    # ---------------------------- Per-user lookups ----------------------------

    def count_by_user(self, user_id: int) -> int:
        return self.count(user_id=user_id)

    def liked_posts(self, user_id: int, pagination: Pagination) -> Page[Post]:
        """
        Page of the posts ``user_id`` liked, most recently liked first.

        :param user_id: Principal whose likes are listed.
        :param pagination: Page and size; its sort tokens are ignored.
        """
        stmt = (
            select(Post)
            .join(PostLike, PostLike.post_id == Post.id)
            .where(PostLike.user_id == user_id)
            .order_by(PostLike.created_at.desc(), PostLike.id.desc())
        )
        items, total = paginate_select(
            self.session, stmt, page=pagination.page, limit=pagination.limit
        )
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)
