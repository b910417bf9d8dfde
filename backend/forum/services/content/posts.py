from __future__ import annotations

import logging

from forum.models.post import Post
from forum.repositories.post import PostRepository
from forum.services._shared.base import BaseService
from forum.services._shared.dto import PageMeta, PaginationIn
from forum.services._shared.errors import PostNotFound

from ._converters import post_to_out
from .dto import DeletionOut, PostIn, PostOut, PostPageOut, PostUpdateIn
from .tree import ContentTreeService

logger = logging.getLogger(__name__)


class PostService(BaseService):
    """Create, read, update and delete posts."""

    def create_post(self, dto: PostIn) -> PostOut:
        actor_id = self.require_actor()
        with self.rw_uow() as uow:
            repo: PostRepository = uow.posts
            post = Post(user_id=actor_id, title=dto.title, content=dto.content)
            repo.add(post)
            out = post_to_out(post)
        logger.info("Post created", extra={"post_id": out.id, "principal_id": actor_id})
        return out

    def get_post(self, post_id: int) -> PostOut:
        """Return a post with its like count.

        :raises PostNotFound: If the post does not exist.
        """
        with self.ro_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise PostNotFound(post_id)
            return post_to_out(post, likes=uow.post_likes.count_for_post(post_id))

    def list_posts(self, dto: PaginationIn) -> PostPageOut:
        """List posts newest first."""
        pagination = self.ensure_pagination(page=dto.page, limit=dto.limit)
        with self.ro_uow() as uow:
            page = uow.posts.paginate(pagination)
            counts = uow.post_likes.counts_for_posts([p.id for p in page.items])
            items = [post_to_out(p, likes=counts.get(p.id, 0)) for p in page.items]
        return PostPageOut(
            items=items,
            meta=PageMeta.build(page=page.page, limit=page.limit, total=page.total),
        )

    def update_post(self, post_id: int, dto: PostUpdateIn) -> PostOut:
        """
        Change title and/or content.

        :raises PostNotFound: If the post does not exist.
        :raises Forbidden: If the caller is neither the author nor an admin.
        """
        with self.ro_uow() as uow:
            post = uow.posts.get(post_id)
            if post is None:
                raise PostNotFound(post_id)
            self.ensure_owner_or_admin(
                post.user_id, msg="Only the author or an administrator can edit this post."
            )

        with self.rw_uow() as uow:
            post = uow.posts.get(post_id)
            uow.posts.update(post, **dto.changes())
            out = post_to_out(post, likes=uow.post_likes.count_for_post(post_id))
        logger.info("Post updated", extra={"post_id": post_id, "principal_id": self.ctx.actor_id})
        return out

    def delete_post(self, post_id: int) -> DeletionOut:
        return ContentTreeService(ctx=self.ctx).delete_post(post_id)
