"""Account and session Marshmallow schemas."""

from __future__ import annotations

from typing import Any

from marshmallow import Schema, ValidationError, fields, post_load, validate, validates_schema


class SignupSchema(Schema):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=8, max=128))
    name = fields.String(required=True, validate=validate.Length(min=1, max=50))

    @post_load
    def normalize(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["email"] = data["email"].strip().lower()
        data["name"] = data["name"].strip()
        return data


class LoginSchema(Schema):
    """Input payload for authenticating a principal."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))

    @post_load
    def normalize(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        data["email"] = data["email"].strip().lower()
        return data


class ResignSchema(Schema):
    password = fields.String(required=True, validate=validate.Length(min=1, max=128))


class PrincipalSchema(Schema):
    """Response payload for a principal. Never exposes hashes or tokens."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    name = fields.String(required=True)
    role = fields.String(required=True)
    status = fields.String(required=True)
    created_at = fields.DateTime(allow_none=True)


class ProfileUpdateSchema(Schema):
    """Profile change; the current password is always required."""

    password = fields.String(required=True, validate=validate.Length(min=1, max=128))
    name = fields.String(validate=validate.Length(min=1, max=50))
    new_password = fields.String(validate=validate.Length(min=8, max=128))

    @validates_schema
    def require_change(self, data: dict[str, Any], **_: Any) -> None:
        if "name" not in data and "new_password" not in data:
            raise ValidationError("Provide at least one of: name, new_password.")

    @post_load
    def normalize(self, data: dict[str, Any], **_: Any) -> dict[str, Any]:
        if "name" in data:
            data["name"] = data["name"].strip()
        return data


class ProfileSchema(Schema):
    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    name = fields.String(required=True)
    liked_posts = fields.Integer(required=True)
    liked_comments = fields.Integer(required=True)
