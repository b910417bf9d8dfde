"""Convenience exports for application schemas."""

from __future__ import annotations

from .auth import (
    LoginSchema,
    PrincipalSchema,
    ProfileSchema,
    ProfileUpdateSchema,
    ResignSchema,
    SignupSchema,
)
from .common import MetaSchema, PaginationQuerySchema
from .content import (
    CommentCreateSchema,
    CommentSchema,
    CommentUpdateSchema,
    DeletionSchema,
    LikeSchema,
    PostCreateSchema,
    PostSchema,
    PostUpdateSchema,
)

__all__ = [
    "LoginSchema",
    "SignupSchema",
    "ResignSchema",
    "PrincipalSchema",
    "ProfileSchema",
    "ProfileUpdateSchema",
    "PaginationQuerySchema",
    "MetaSchema",
    "PostCreateSchema",
    "PostUpdateSchema",
    "PostSchema",
    "CommentCreateSchema",
    "CommentUpdateSchema",
    "CommentSchema",
    "LikeSchema",
    "DeletionSchema",
]
