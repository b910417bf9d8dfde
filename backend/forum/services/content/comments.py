from __future__ import annotations

import logging

from forum.models.comment import Comment
from forum.services._shared.base import BaseService
from forum.services._shared.errors import CommentNotFound, InvalidParentComment, PostNotFound

from ._converters import comment_to_out
from .dto import CommentIn, CommentOut, DeletionOut
from .tree import ContentTreeService

logger = logging.getLogger(__name__)


def thread_order(comments: list[Comment]) -> list[tuple[Comment, int]]:
    """
    Arrange a post's comments as a flattened thread.

    Each root is followed by its replies (depth-first, oldest first at each
    level). Comments whose parent is missing are treated as roots.

    :returns: ``(comment, depth)`` pairs.
    """
    by_id = {c.id: c for c in comments}
    children: dict[int | None, list[Comment]] = {}
    for c in comments:
        parent = c.parent_id if c.parent_id in by_id else None
        children.setdefault(parent, []).append(c)

    ordered: list[tuple[Comment, int]] = []
    stack = [(c, 0) for c in reversed(children.get(None, []))]
    while stack:
        comment, depth = stack.pop()
        ordered.append((comment, depth))
        stack.extend((child, depth + 1) for child in reversed(children.get(comment.id, [])))
    return ordered


class CommentService(BaseService):
    """Create, list, edit and delete comments on a post."""

    def create_comment(self, post_id: int, dto: CommentIn) -> CommentOut:
        """
        Add a root comment or a reply.

        :raises PostNotFound: If the post does not exist.
        :raises InvalidParentComment: If ``parent_id`` is unknown or on another post.
        """
        actor_id = self.require_actor()
        with self.ro_uow() as uow:
            if uow.posts.get(post_id) is None:
                raise PostNotFound(post_id)
            if dto.parent_id is not None:
                parent = uow.comments.get(dto.parent_id)
                if parent is None or parent.post_id != post_id:
                    raise InvalidParentComment()

        with self.rw_uow() as uow:
            comment = Comment(
                post_id=post_id, user_id=actor_id, parent_id=dto.parent_id, content=dto.content
            )
            uow.comments.add(comment)
            out = comment_to_out(comment)

        logger.info(
            "Comment created",
            extra={"post_id": post_id, "comment_id": out.id, "principal_id": actor_id},
        )
        return out

    def list_comments(self, post_id: int) -> list[CommentOut]:
        """
        Return every comment on a post in thread order, with like counts.

        :raises PostNotFound: If the post does not exist.
        """
        with self.ro_uow() as uow:
            if uow.posts.get(post_id) is None:
                raise PostNotFound(post_id)
            comments = uow.comments.list_for_post(post_id)
            counts = uow.comment_likes.counts_for_comments([c.id for c in comments])
            return [
                comment_to_out(c, likes=counts.get(c.id, 0), depth=depth)
                for c, depth in thread_order(comments)
            ]

    def update_comment(self, comment_id: int, dto: CommentIn) -> CommentOut:
        """
        Edit a comment's body. Only its author may do so.

        :raises CommentNotFound: If the comment does not exist.
        :raises Forbidden: If the caller is not the author.
        """
        with self.ro_uow() as uow:
            comment = uow.comments.get(comment_id)
            if comment is None:
                raise CommentNotFound(comment_id)
            self.ensure_owner(comment.user_id, msg="Only the author can edit this comment.")

        with self.rw_uow() as uow:
            comment = uow.comments.get(comment_id)
            uow.comments.update(comment, content=dto.content)
            likes = uow.comment_likes.counts_for_comments([comment_id]).get(comment_id, 0)
            out = comment_to_out(comment, likes=likes)
        logger.info("Comment updated", extra={"comment_id": comment_id, "principal_id": self.ctx.actor_id})
        return out

    def delete_comment(self, comment_id: int) -> DeletionOut:
        return ContentTreeService(ctx=self.ctx).delete_comment(comment_id)
