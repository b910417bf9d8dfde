"""Post endpoints, including likes and the comments listed under a post."""

from __future__ import annotations

from flask import Blueprint, request

from forum.api.deps import authenticated, context_for, json_response, parse_pagination, timing
from forum.schemas import (
    CommentCreateSchema,
    CommentSchema,
    DeletionSchema,
    LikeSchema,
    MetaSchema,
    PostCreateSchema,
    PostSchema,
    PostUpdateSchema,
)
from forum.services.content import (
    CommentIn,
    CommentService,
    LikeService,
    PostIn,
    PostService,
    PostUpdateIn,
)
from forum.services.session import Identity

bp = Blueprint("posts", __name__)

post_create_schema = PostCreateSchema()
post_update_schema = PostUpdateSchema()
post_schema = PostSchema()
post_list_schema = PostSchema(many=True)
meta_schema = MetaSchema()
comment_create_schema = CommentCreateSchema()
comment_schema = CommentSchema()
comment_list_schema = CommentSchema(many=True)
like_schema = LikeSchema()
deletion_schema = DeletionSchema()


@bp.post("")
@authenticated
@timing
def create_post(identity: Identity):
    payload = post_create_schema.load(request.get_json(silent=True) or {})
    post = PostService(ctx=context_for(identity)).create_post(PostIn(**payload))
    return json_response({"data": post_schema.dump(post)}, status=201)


@bp.get("")
@authenticated
@timing
def list_posts(identity: Identity):
    """List posts newest first, paginated."""

    page = PostService(ctx=context_for(identity)).list_posts(parse_pagination())
    return json_response(
        {"data": post_list_schema.dump(page.items), "meta": meta_schema.dump(page.meta)}
    )


@bp.get("/<int:post_id>")
@authenticated
@timing
def get_post(post_id: int, identity: Identity):
    post = PostService(ctx=context_for(identity)).get_post(post_id)
    return json_response({"data": post_schema.dump(post)})


@bp.put("/<int:post_id>")
@authenticated
@timing
def update_post(post_id: int, identity: Identity):
    payload = post_update_schema.load(request.get_json(silent=True) or {})
    post = PostService(ctx=context_for(identity)).update_post(post_id, PostUpdateIn(**payload))
    return json_response({"data": post_schema.dump(post)})


@bp.delete("/<int:post_id>")
@authenticated
@timing
def delete_post(post_id: int, identity: Identity):
    """Delete the post with all its comments and likes (author or admin)."""

    result = PostService(ctx=context_for(identity)).delete_post(post_id)
    return json_response({"data": deletion_schema.dump(result)})


# --------------------------------- Likes ---------------------------------


@bp.get("/likes")
@authenticated
@timing
def list_liked_posts(identity: Identity):
    """Posts the caller liked, most recently liked first, paginated."""

    page = LikeService(ctx=context_for(identity)).list_liked_posts(parse_pagination())
    return json_response(
        {"data": post_list_schema.dump(page.items), "meta": meta_schema.dump(page.meta)}
    )


@bp.post("/<int:post_id>/likes")
@authenticated
@timing
def like_post(post_id: int, identity: Identity):
    result = LikeService(ctx=context_for(identity)).like_post(post_id)
    return json_response({"data": like_schema.dump(result)}, status=201)


@bp.delete("/<int:post_id>/likes")
@authenticated
@timing
def unlike_post(post_id: int, identity: Identity):
    result = LikeService(ctx=context_for(identity)).unlike_post(post_id)
    return json_response({"data": like_schema.dump(result)})


# ------------------------------- Comments --------------------------------


@bp.post("/<int:post_id>/comments")
@authenticated
@timing
def create_comment(post_id: int, identity: Identity):
    payload = comment_create_schema.load(request.get_json(silent=True) or {})
    comment = CommentService(ctx=context_for(identity)).create_comment(
        post_id, CommentIn(**payload)
    )
    return json_response({"data": comment_schema.dump(comment)}, status=201)


@bp.get("/<int:post_id>/comments")
@authenticated
@timing
def list_comments(post_id: int, identity: Identity):
    """Flat list in thread order; ``parent_id`` and ``depth`` rebuild the tree."""

    comments = CommentService(ctx=context_for(identity)).list_comments(post_id)
    return json_response({"data": comment_list_schema.dump(comments)})
