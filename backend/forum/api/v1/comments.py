"""Comment endpoints (edit, delete subtree, likes)."""

from __future__ import annotations

from flask import Blueprint, request

from forum.api.deps import authenticated, context_for, json_response, parse_pagination, timing
from forum.schemas import (
    CommentSchema,
    CommentUpdateSchema,
    DeletionSchema,
    LikeSchema,
    MetaSchema,
)
from forum.services.content import CommentIn, CommentService, LikeService
from forum.services.session import Identity

bp = Blueprint("comments", __name__)

comment_update_schema = CommentUpdateSchema()
comment_schema = CommentSchema()
comment_list_schema = CommentSchema(many=True)
meta_schema = MetaSchema()
like_schema = LikeSchema()
deletion_schema = DeletionSchema()


@bp.put("/<int:comment_id>")
@authenticated
@timing
def update_comment(comment_id: int, identity: Identity):
    payload = comment_update_schema.load(request.get_json(silent=True) or {})
    comment = CommentService(ctx=context_for(identity)).update_comment(
        comment_id, CommentIn(content=payload["content"])
    )
    return json_response({"data": comment_schema.dump(comment)})


@bp.delete("/<int:comment_id>")
@authenticated
@timing
def delete_comment(comment_id: int, identity: Identity):
    """Delete the comment and every reply under it (author or admin)."""

    result = CommentService(ctx=context_for(identity)).delete_comment(comment_id)
    return json_response({"data": deletion_schema.dump(result)})


@bp.get("/likes")
@authenticated
@timing
def list_liked_comments(identity: Identity):
    page = LikeService(ctx=context_for(identity)).list_liked_comments(parse_pagination())
    return json_response(
        {"data": comment_list_schema.dump(page.items), "meta": meta_schema.dump(page.meta)}
    )


@bp.post("/<int:comment_id>/likes")
@authenticated
@timing
def like_comment(comment_id: int, identity: Identity):
    result = LikeService(ctx=context_for(identity)).like_comment(comment_id)
    return json_response({"data": like_schema.dump(result)}, status=201)


@bp.delete("/<int:comment_id>/likes")
@authenticated
@timing
def unlike_comment(comment_id: int, identity: Identity):
    result = LikeService(ctx=context_for(identity)).unlike_comment(comment_id)
    return json_response({"data": like_schema.dump(result)})
