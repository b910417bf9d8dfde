"""
DTOs for the content services (posts, comments, likes, tree deletion).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from forum.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostIn:
    """
    :param title: Post title.
    :type title: str
    :param content: Post body.
    :type content: str
    """

    title: str
    content: str


@dataclass(frozen=True, slots=True)
class PostUpdateIn:
    """Partial update; ``None`` leaves a field unchanged."""

    title: str | None = None
    content: str | None = None

    def changes(self) -> dict[str, str]:
        return {k: v for k, v in (("title", self.title), ("content", self.content)) if v is not None}


@dataclass(frozen=True, slots=True)
class CommentIn:
    """
    :param content: Comment body.
    :type content: str
    :param parent_id: Comment being replied to, or ``None`` for a root comment.
    :type parent_id: int | None
    """

    content: str
    parent_id: int | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class PostOut:
    id: int
    user_id: int
    author_name: str
    title: str
    content: str
    likes: int
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class PostPageOut:
    """
    One page of posts, newest first.

    :param items: Posts on this page.
    :type items: list[PostOut]
    :param meta: Pagination metadata.
    :type meta: PageMeta
    """

    items: list[PostOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class CommentOut:
    """
    A comment as listed under its post.

    :param depth: Reply depth (0 for root comments).
    :type depth: int
    """

    id: int
    post_id: int
    user_id: int
    author_name: str
    parent_id: int | None
    content: str
    likes: int
    depth: int = 0
    created_at: datetime | None = None


@dataclass(frozen=True, slots=True)
class CommentPageOut:
    items: list[CommentOut]
    meta: PageMeta


@dataclass(frozen=True, slots=True)
class LikeOut:
    """
    Like state of a target after a like/unlike.

    :param target: ``"post"`` or ``"comment"``.
    :param target_id: Target identifier.
    :param likes: Like count after the change.
    """

    target: str
    target_id: int
    likes: int


@dataclass(frozen=True, slots=True)
class DeletionOut:
    """
    Result of a tree deletion.

    :param comment_ids: Deleted comment ids, in deletion (post-) order.
    :type comment_ids: list[int]
    :param likes_removed: Like rows removed (comment likes plus, for a post, post likes).
    :type likes_removed: int
    :param post_id: Set when a whole post was deleted.
    :type post_id: int | None
    """

    comment_ids: list[int]
    likes_removed: int
    post_id: int | None = None
