from __future__ import annotations

from forum.models.comment import Comment
from forum.models.post import Post

from .dto import CommentOut, PostOut


def post_to_out(post: Post, *, likes: int = 0) -> PostOut:
    return PostOut(
        id=post.id,
        user_id=post.user_id,
        author_name=post.author.name if post.author is not None else "",
        title=post.title,
        content=post.content,
        likes=likes,
        created_at=post.created_at,
        updated_at=post.updated_at,
    )


def comment_to_out(comment: Comment, *, likes: int = 0, depth: int = 0) -> CommentOut:
    return CommentOut(
        id=comment.id,
        post_id=comment.post_id,
        user_id=comment.user_id,
        author_name=comment.author.name if comment.author is not None else "",
        parent_id=comment.parent_id,
        content=comment.content,
        likes=likes,
        depth=depth,
        created_at=comment.created_at,
    )
