"""
Ownership-checked deletion of threaded content.

Comments form a forest per post through ``parent_id``. Deleting a comment
removes its whole reply subtree, children before parents, each node
together with the likes that reference it. Authorization is checked once,
against the node the caller asked to delete; replies by other authors go
with it.

The walk uses an explicit stack rather than call-stack recursion, so an
arbitrarily deep thread cannot exhaust the interpreter's recursion limit.
Each node is deleted in its own short transaction. A crash part-way leaves
only not-yet-deleted ancestors behind, never a child whose parent is gone.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from forum.services._shared.base import BaseService
from forum.services._shared.errors import CommentNotFound, PostNotFound
from forum.services.content.dto import DeletionOut

logger = logging.getLogger(__name__)


def plan_subtree_deletion(root_id: int, children_of: Callable[[int], Iterable[int]]) -> list[int]:
    """
    Return the ids of ``root_id`` and all of its descendants in post-order.

    Every node appears after all of its descendants; siblings keep the order
    ``children_of`` yields them in. A node already visited is not expanded
    again, so a corrupted parent cycle still terminates.

    :param root_id: Subtree root.
    :param children_of: Returns the direct children of a node.
    :returns: Deletion order, ending with ``root_id``.
    """
    order: list[int] = []
    seen = {root_id}
    stack: list[tuple[int, bool]] = [(root_id, False)]

    while stack:
        node, expanded = stack.pop()
        if expanded:
            order.append(node)
            continue
        stack.append((node, True))
        children = [c for c in children_of(node) if c not in seen]
        seen.update(children)
        # reversed so the first child is popped (and emitted) first
        stack.extend((child, False) for child in reversed(children))

    return order


class ContentTreeService(BaseService):
    """Delete comments (with their replies) and whole posts."""

    def delete_comment(self, comment_id: int) -> DeletionOut:
        """
        Delete a comment and every reply beneath it.

        :param comment_id: Root of the subtree to remove.
        :returns: Deleted ids (post-order) and the number of likes removed.
        :raises CommentNotFound: If the comment does not exist.
        :raises Forbidden: If the caller is neither the author nor an admin.
        """
        with self.ro_uow() as uow:
            comment = uow.comments.get(comment_id)
            if comment is None:
                raise CommentNotFound(comment_id)
            self.ensure_owner_or_admin(
                comment.user_id, msg="Only the author or an administrator can delete this comment."
            )
            plan = plan_subtree_deletion(comment_id, uow.comments.child_ids)

        likes_removed = self._delete_nodes(plan)

        logger.info(
            "Comment subtree deleted",
            extra={
                "principal_id": self.ctx.actor_id,
                "actor_role": self.ctx.actor_role,
                "comment_ids": plan,
                "likes_removed": likes_removed,
            },
        )
        return DeletionOut(comment_ids=plan, likes_removed=likes_removed)

    def delete_post(self, post_id: int) -> DeletionOut:
        """
        Delete a post: its likes first, then every comment tree, then the post.

        :raises PostNotFound: If the post does not exist.
        :raises Forbidden: If the caller is neither the author nor an admin.
        """
        with self.ro_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise PostNotFound(post_id)
            self.ensure_owner_or_admin(
                post.user_id, msg="Only the author or an administrator can delete this post."
            )
            plans = [
                plan_subtree_deletion(root_id, uow.comments.child_ids)
                for root_id in uow.comments.root_ids_for_post(post_id)
            ]

        with self.rw_uow() as uow:
            likes_removed = uow.post_likes.delete_for_post(post_id)

        deleted: list[int] = []
        for plan in plans:
            likes_removed += self._delete_nodes(plan)
            deleted.extend(plan)

        with self.rw_uow() as uow:
            uow.posts.delete_by_id(post_id)

        logger.info(
            "Post deleted",
            extra={
                "principal_id": self.ctx.actor_id,
                "actor_role": self.ctx.actor_role,
                "post_id": post_id,
                "comment_ids": deleted,
                "likes_removed": likes_removed,
            },
        )
        return DeletionOut(comment_ids=deleted, likes_removed=likes_removed, post_id=post_id)

    # ------------------------------------------------------------------ #

    def _delete_nodes(self, plan: list[int]) -> int:
        """Delete each planned comment with its likes, one transaction per node."""
        likes_removed = 0
        for node_id in plan:
            with self.rw_uow() as uow:
                likes_removed += uow.comment_likes.delete_for_comment(node_id)
                uow.comments.delete_by_id(node_id)
        return likes_removed
