"""Post, comment and like Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class PostCreateSchema(Schema):
    title = fields.String(required=True, validate=validate.Length(min=1, max=200))
    content = fields.String(required=True, validate=validate.Length(min=1))


class PostUpdateSchema(Schema):
    """Partial update; at least one field is required."""

    title = fields.String(validate=validate.Length(min=1, max=200))
    content = fields.String(validate=validate.Length(min=1))

    @validates_schema
    def require_any(self, data: dict[str, Any], **_: Any) -> None:
        if not data:
            raise ValidationError("Provide at least one of: title, content.")


class PostSchema(Schema):
    id = fields.Integer(required=True)
    user_id = fields.Integer(required=True)
    author_name = fields.String(required=True)
    title = fields.String(required=True)
    content = fields.String(required=True)
    likes = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)
    updated_at = fields.DateTime(allow_none=True)


class CommentCreateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1))
    parent_id = fields.Integer(load_default=None, allow_none=True, validate=validate.Range(min=1))


class CommentUpdateSchema(Schema):
    content = fields.String(required=True, validate=validate.Length(min=1))


class CommentSchema(Schema):
    id = fields.Integer(required=True)
    post_id = fields.Integer(required=True)
    user_id = fields.Integer(required=True)
    author_name = fields.String(required=True)
    parent_id = fields.Integer(allow_none=True)
    content = fields.String(required=True)
    likes = fields.Integer(required=True)
    depth = fields.Integer(required=True)
    created_at = fields.DateTime(allow_none=True)


class LikeSchema(Schema):
    target = fields.String(required=True)
    target_id = fields.Integer(required=True)
    likes = fields.Integer(required=True)


class DeletionSchema(Schema):
    """Summary of a tree deletion."""

    post_id = fields.Integer(allow_none=True)
    comment_ids = fields.List(fields.Integer(), required=True)
    likes_removed = fields.Integer(required=True)
