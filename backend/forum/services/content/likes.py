"""
LikeService
===========

Likes on posts and comments. A user likes a given target at most once and
never likes their own content; a unique constraint per (user, target)
backs the first rule when two requests race.

The caller can also page through the posts and comments they liked.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from forum.models.comment import CommentLike
from forum.models.post import PostLike
from forum.services._shared.base import BaseService
from forum.services._shared.dto import PageMeta, PaginationIn
from forum.services._shared.errors import (
    AlreadyLiked,
    CannotLikeOwnContent,
    CommentNotFound,
    LikeNotFound,
    PostNotFound,
    violates,
)

from ._converters import comment_to_out, post_to_out
from .dto import CommentPageOut, LikeOut, PostPageOut

logger = logging.getLogger(__name__)


class LikeService(BaseService):
    """Like and unlike posts and comments."""

    # ------------------------------ Posts ------------------------------

    def like_post(self, post_id: int) -> LikeOut:
        """
        :raises PostNotFound: If the post does not exist.
        :raises CannotLikeOwnContent: If the caller wrote the post.
        :raises AlreadyLiked: If the caller already liked it.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise PostNotFound(post_id)
            if post.user_id == actor_id:
                raise CannotLikeOwnContent()
            if uow.post_likes.find(user_id=actor_id, post_id=post_id) is not None:
                raise AlreadyLiked("Post", post_id)

        try:
            with self.rw_uow() as uow:
                uow.post_likes.add(PostLike(user_id=actor_id, post_id=post_id))
                likes = uow.post_likes.count_for_post(post_id)
        except IntegrityError as exc:
            if violates(exc, "uq_post_likes_user_post"):
                raise AlreadyLiked("Post", post_id) from exc
            raise

        logger.info("Post liked", extra={"post_id": post_id, "principal_id": actor_id})
        return LikeOut(target="post", target_id=post_id, likes=likes)

    def unlike_post(self, post_id: int) -> LikeOut:
        """
        :raises PostNotFound: If the post does not exist.
        :raises LikeNotFound: If the caller has not liked it.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.posts.get(post_id) is None:
                raise PostNotFound(post_id)
            if uow.post_likes.find(user_id=actor_id, post_id=post_id) is None:
                raise LikeNotFound("Post", post_id)

        with self.rw_uow() as uow:
            uow.post_likes.remove(user_id=actor_id, post_id=post_id)
            likes = uow.post_likes.count_for_post(post_id)

        logger.info("Post unliked", extra={"post_id": post_id, "principal_id": actor_id})
        return LikeOut(target="post", target_id=post_id, likes=likes)

    # ----------------------------- Comments ----------------------------

    def like_comment(self, comment_id: int) -> LikeOut:
        """
        :raises CommentNotFound: If the comment does not exist.
        :raises CannotLikeOwnContent: If the caller wrote the comment.
        :raises AlreadyLiked: If the caller already liked it.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            comment = uow.comments.get(comment_id)
            if comment is None:
                raise CommentNotFound(comment_id)
            if comment.user_id == actor_id:
                raise CannotLikeOwnContent()
            if uow.comment_likes.find(user_id=actor_id, comment_id=comment_id) is not None:
                raise AlreadyLiked("Comment", comment_id)

        try:
            with self.rw_uow() as uow:
                uow.comment_likes.add(CommentLike(user_id=actor_id, comment_id=comment_id))
                likes = self._comment_likes(uow, comment_id)
        except IntegrityError as exc:
            if violates(exc, "uq_comment_likes_user_comment"):
                raise AlreadyLiked("Comment", comment_id) from exc
            raise

        logger.info("Comment liked", extra={"comment_id": comment_id, "principal_id": actor_id})
        return LikeOut(target="comment", target_id=comment_id, likes=likes)

    def unlike_comment(self, comment_id: int) -> LikeOut:
        """
        :raises CommentNotFound: If the comment does not exist.
        :raises LikeNotFound: If the caller has not liked it.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.comments.get(comment_id) is None:
                raise CommentNotFound(comment_id)
            if uow.comment_likes.find(user_id=actor_id, comment_id=comment_id) is None:
                raise LikeNotFound("Comment", comment_id)

        with self.rw_uow() as uow:
            uow.comment_likes.remove(user_id=actor_id, comment_id=comment_id)
            likes = self._comment_likes(uow, comment_id)

        logger.info("Comment unliked", extra={"comment_id": comment_id, "principal_id": actor_id})
        return LikeOut(target="comment", target_id=comment_id, likes=likes)

    # --------------------------- Liked content -------------------------

    def list_liked_posts(self, dto: PaginationIn) -> PostPageOut:
        """Posts the caller liked, most recently liked first."""
        actor_id = self.require_actor()
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit)
        with self.ro_uow() as uow:
            page = uow.post_likes.liked_posts(actor_id, pagination)
            counts = uow.post_likes.counts_for_posts([p.id for p in page.items])
            items = [post_to_out(p, likes=counts.get(p.id, 0)) for p in page.items]
        return PostPageOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    def list_liked_comments(self, dto: PaginationIn) -> CommentPageOut:
        """Comments the caller liked, most recently liked first (``depth`` is 0)."""
        actor_id = self.require_actor()
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit)
        with self.ro_uow() as uow:
            page = uow.comment_likes.liked_comments(actor_id, pagination)
            counts = uow.comment_likes.counts_for_comments([c.id for c in page.items])
            items = [comment_to_out(c, likes=counts.get(c.id, 0)) for c in page.items]
        return CommentPageOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    @staticmethod
    def _comment_likes(uow, comment_id: int) -> int:
        return uow.comment_likes.counts_for_comments([comment_id]).get(comment_id, 0)
