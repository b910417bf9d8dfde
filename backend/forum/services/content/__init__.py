"""
forum.services.content
======================

Posts, threaded comments, likes, and the ownership-checked tree deletion
that removes a post or a comment together with everything hanging off it.
"""

from __future__ import annotations

from .comments import CommentService, thread_order
from .dto import (
    CommentIn,
    CommentOut,
    CommentPageOut,
    DeletionOut,
    LikeOut,
    PostIn,
    PostOut,
    PostPageOut,
    PostUpdateIn,
)
from .likes import LikeService
from .posts import PostService
from .tree import ContentTreeService, plan_subtree_deletion

__all__ = [
    "CommentIn",
    "CommentOut",
    "CommentPageOut",
    "CommentService",
    "ContentTreeService",
    "DeletionOut",
    "LikeOut",
    "LikeService",
    "PostIn",
    "PostOut",
    "PostPageOut",
    "PostService",
    "PostUpdateIn",
    "plan_subtree_deletion",
    "thread_order",
]
