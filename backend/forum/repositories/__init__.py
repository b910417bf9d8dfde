"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from forum.repositories.base import (
    BaseRepository,
    Page,
    Pagination,
    paginate_select,
)
from forum.repositories.comment import CommentLikeRepository, CommentRepository
from forum.repositories.password_history import PasswordHistoryRepository
from forum.repositories.post import PostLikeRepository, PostRepository
from forum.repositories.user import UserRepository

__all__ = [
    # Base
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    # Domain
    "CommentLikeRepository",
    "CommentRepository",
    "PasswordHistoryRepository",
    "PostLikeRepository",
    "PostRepository",
    "UserRepository",
]
